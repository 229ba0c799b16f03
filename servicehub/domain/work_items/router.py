"""Work items router - Booking, project requests and admin lifecycle actions"""

from typing import Optional

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ...database import get_db
from ..assignments.service import AssignmentRegistry
from .adapters import to_record
from .schemas import (
    AppointmentCreate,
    AssignRequest,
    LegacyImportRequest,
    ProjectCreate,
    WorkItemRecord,
)
from .service import WorkItemLifecycle
from .status import WorkItemKind

router = APIRouter(tags=["Work Items"])
admin_router = APIRouter(prefix="/admin/work-items", tags=["Admin - Work Items"])


def get_lifecycle(db: Session = Depends(get_db)) -> WorkItemLifecycle:
    """Dependency injection for WorkItemLifecycle"""
    return WorkItemLifecycle(db)


def get_registry(db: Session = Depends(get_db)) -> AssignmentRegistry:
    """Dependency injection for AssignmentRegistry"""
    return AssignmentRegistry(db)


# ============================================================================
# CUSTOMER ENDPOINTS
# ============================================================================


@router.post("/appointments", response_model=WorkItemRecord, status_code=201)
async def book_appointment(
    data: AppointmentCreate,
    lifecycle: WorkItemLifecycle = Depends(get_lifecycle),
):
    """Book a service into a time slot; the appointment starts in REQUESTING"""
    return to_record(lifecycle.create_appointment(data))


@router.post("/projects", response_model=WorkItemRecord, status_code=201)
async def request_project(
    data: ProjectCreate,
    lifecycle: WorkItemLifecycle = Depends(get_lifecycle),
):
    """Request custom work; the project starts in REQUESTING"""
    return to_record(lifecycle.create_project(data))


@router.get("/customers/{customer_id}/work-items", response_model=list[WorkItemRecord])
async def list_customer_work_items(
    customer_id: str,
    kind: Optional[WorkItemKind] = None,
    lifecycle: WorkItemLifecycle = Depends(get_lifecycle),
):
    """Appointments and projects of one customer"""
    return [to_record(i, include_children=False) for i in lifecycle.list_for_customer(customer_id, kind)]


# ============================================================================
# ADMIN ENDPOINTS
# ============================================================================


@admin_router.get("", response_model=list[WorkItemRecord])
async def list_work_items(
    kind: Optional[WorkItemKind] = None,
    lifecycle: WorkItemLifecycle = Depends(get_lifecycle),
):
    return [to_record(i, include_children=False) for i in lifecycle.list_all(kind)]


@admin_router.post("/import", response_model=list[WorkItemRecord], status_code=201)
async def import_legacy_work_items(
    data: LegacyImportRequest,
    lifecycle: WorkItemLifecycle = Depends(get_lifecycle),
):
    """Import records exported from the previous system"""
    return [to_record(i, include_children=False) for i in lifecycle.import_records(data.records)]


@admin_router.get("/{item_id}", response_model=WorkItemRecord)
async def get_work_item(item_id: str, lifecycle: WorkItemLifecycle = Depends(get_lifecycle)):
    return to_record(lifecycle.get(item_id))


@admin_router.post("/{item_id}/assign", response_model=WorkItemRecord)
async def assign_work_item(
    item_id: str,
    data: AssignRequest,
    registry: AssignmentRegistry = Depends(get_registry),
):
    """Assign (or reassign) an employee; REQUESTING items become ASSIGNED"""
    return to_record(registry.assign(item_id, data.employeeId))


@admin_router.post("/{item_id}/unassign", response_model=WorkItemRecord)
async def unassign_work_item(item_id: str, lifecycle: WorkItemLifecycle = Depends(get_lifecycle)):
    return to_record(lifecycle.unassign(item_id))


@admin_router.post("/{item_id}/cancel", response_model=WorkItemRecord)
async def cancel_work_item(item_id: str, lifecycle: WorkItemLifecycle = Depends(get_lifecycle)):
    return to_record(lifecycle.cancel(item_id))


@admin_router.post("/{item_id}/complete", response_model=WorkItemRecord)
async def complete_work_item(item_id: str, lifecycle: WorkItemLifecycle = Depends(get_lifecycle)):
    """Mark an item done (percentage 100)"""
    return to_record(lifecycle.complete(item_id))
