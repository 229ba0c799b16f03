"""Work item service - Lifecycle state machine shared by appointments and projects"""

import logging
from datetime import datetime, timezone
from decimal import Decimal
from typing import Any, Callable, Optional, Union

from sqlalchemy.orm import Session

from ...models import WorkItem
from ...shared.errors import InvalidTransition, NotFound, ValidationError
from ...shared.validators import optional_text, parse_date, require_text
from ..catalog.service import ServiceCatalog
from ..progress.timer import get_timer_strategy, stop_timer
from ..scheduling.time_calculator import SlotPlanner
from .adapters import (
    LegacyWorkItem,
    NewWorkItem,
    from_appointment_request,
    from_legacy_record,
    from_payload,
    from_project_request,
)
from .repository import WorkItemRepository
from .schemas import AppointmentCreate, ProjectCreate
from .status import WorkItemKind, WorkItemStatus, can_transition

logger = logging.getLogger(__name__)

CreateInput = Union[AppointmentCreate, ProjectCreate, NewWorkItem, dict]


def utcnow() -> datetime:
    """Naive UTC timestamp, matching the DateTime columns"""
    return datetime.now(timezone.utc).replace(tzinfo=None)


class WorkItemLifecycle:
    """
    Service layer for the work item lifecycle.

    Every operation validates before mutating anything and commits exactly one
    state change, so a rejected call leaves the item untouched.
    """

    def __init__(
        self,
        db: Session,
        timer_mode: Optional[str] = None,
        clock: Callable[[], datetime] = utcnow,
    ):
        self.db = db
        self.repo = WorkItemRepository()
        self.catalog = ServiceCatalog(db)
        self.planner = SlotPlanner()
        self.timer = get_timer_strategy(timer_mode)
        self.clock = clock

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def get(self, item_id: str) -> WorkItem:
        item = self.repo.get_item_by_id(self.db, item_id)
        if not item:
            raise NotFound(f"Work item {item_id} not found")
        return item

    def list_all(self, kind: Optional[WorkItemKind] = None) -> list[WorkItem]:
        return self.repo.list_items(self.db, kind=kind)

    def list_for_customer(self, customer_id: str, kind: Optional[WorkItemKind] = None) -> list[WorkItem]:
        return self.repo.list_for_customer(self.db, customer_id, kind)

    def list_assigned_to(self, employee_id: str) -> list[WorkItem]:
        """Items an employee may act on (assigned_employee_id == employee_id)"""
        return self.repo.list_assigned_to(self.db, employee_id)

    def get_assigned(self, item_id: str, employee_id: str) -> WorkItem:
        """Fetch an item through the employee scope; items of other employees are NotFound"""
        item = self.get(item_id)
        if item.assigned_employee_id != employee_id:
            raise NotFound(f"Work item {item_id} not found")
        return item

    # ------------------------------------------------------------------
    # Creation
    # ------------------------------------------------------------------

    def create(self, data: CreateInput) -> WorkItem:
        """Create an appointment or project in REQUESTING, whatever status the caller sent"""
        if isinstance(data, AppointmentCreate):
            data = from_appointment_request(data)
        elif isinstance(data, ProjectCreate):
            data = from_project_request(data)
        elif isinstance(data, dict):
            data = from_payload(data)

        if data.kind == WorkItemKind.APPOINTMENT:
            return self._create_appointment(data)
        return self._create_project(data)

    def create_appointment(self, data: AppointmentCreate) -> WorkItem:
        return self._create_appointment(from_appointment_request(data))

    def create_project(self, data: ProjectCreate) -> WorkItem:
        return self._create_project(from_project_request(data))

    def _create_appointment(self, data: NewWorkItem) -> WorkItem:
        customer_id = require_text(data.customer_id, "customerId", max_length=64)
        if data.service_id is None:
            raise ValidationError("serviceId is required", field="serviceId")
        if data.vehicle_id is None:
            raise ValidationError("vehicleId is required", field="vehicleId")
        if not data.date:
            raise ValidationError("date is required", field="date")
        if not data.start_time:
            raise ValidationError("startTime is required", field="startTime")

        service = self.catalog.get(data.service_id)
        self._check_vehicle(data.vehicle_id, customer_id)
        plan = self.planner.plan(service, data.date, data.start_time)

        item = self.repo.create_item(
            self.db,
            kind=WorkItemKind.APPOINTMENT,
            customer_id=customer_id,
            vehicle_id=data.vehicle_id,
            service_id=service.id,
            title=service.name,
            description=optional_text(data.description, "description", max_length=1000),
            date=plan.date,
            start_time=plan.start_time,
            end_time=plan.end_time,
            service_price=service.price,
            estimated_duration_minutes=service.estimated_duration_minutes,
            status=WorkItemStatus.REQUESTING,
            assigned_employee_id=None,
        )
        logger.info(
            f"📅 Appointment {item.id} booked: {item.title} on {item.date} "
            f"{item.start_time}-{item.end_time} for customer {customer_id}"
        )
        return item

    def _create_project(self, data: NewWorkItem) -> WorkItem:
        customer_id = require_text(data.customer_id, "customerId", max_length=64)
        title = require_text(data.title, "name", max_length=255)
        description = require_text(data.description, "description", max_length=2000)
        start_date = parse_date(data.start_date, "startDate")
        end_date = parse_date(data.end_date, "endDate") if data.end_date else None
        if end_date and end_date < start_date:
            raise ValidationError("endDate cannot be before startDate", field="endDate")
        if data.vehicle_id is not None:
            self._check_vehicle(data.vehicle_id, customer_id)

        item = self.repo.create_item(
            self.db,
            kind=WorkItemKind.PROJECT,
            customer_id=customer_id,
            vehicle_id=data.vehicle_id,
            title=title,
            description=description,
            start_date=start_date,
            end_date=end_date,
            status=WorkItemStatus.REQUESTING,
            assigned_employee_id=None,
        )
        logger.info(f"📁 Project {item.id} requested: {item.title} for customer {customer_id}")
        return item

    def _check_vehicle(self, vehicle_id: int, customer_id: str) -> None:
        vehicle = self.repo.get_vehicle(self.db, vehicle_id)
        if not vehicle:
            raise NotFound(f"Vehicle {vehicle_id} not found")
        if vehicle.customer_id != customer_id:
            raise ValidationError("Vehicle does not belong to this customer", field="vehicleId")

    def import_records(self, records: list[dict[str, Any]]) -> list[WorkItem]:
        """
        Persist records exported from the previous system.

        Status spellings are normalized once here. Imported items still satisfy
        the lifecycle invariants: a COMPLETED record gets 100%, and an ASSIGNED
        record with no employee is stored as REQUESTING.
        """
        legacy = [from_legacy_record(r) for r in records]
        for entry in legacy:
            if entry.assigned_employee_id and not self.repo.get_employee(self.db, entry.assigned_employee_id):
                raise NotFound(f"Employee {entry.assigned_employee_id} not found")

        items = self.repo.create_items(self.db, [self._build_import(entry) for entry in legacy])
        logger.info(f"📥 Imported {len(items)} legacy work items")
        return items

    def _build_import(self, entry: LegacyWorkItem) -> WorkItem:
        """Validate one legacy record and build its unsaved item"""
        status = entry.status
        employee_id = entry.assigned_employee_id
        if status == WorkItemStatus.REQUESTING and employee_id:
            status = WorkItemStatus.ASSIGNED
        if status == WorkItemStatus.ASSIGNED and not employee_id:
            status = WorkItemStatus.REQUESTING

        percentage = 100 if status == WorkItemStatus.COMPLETED else entry.progress_percentage
        now = self.clock()

        return WorkItem(
            kind=entry.kind,
            customer_id=entry.customer_id,
            vehicle_id=entry.vehicle_id,
            title=require_text(entry.title, "title", max_length=255),
            description=optional_text(entry.description, "description", max_length=2000),
            date=entry.date,
            start_time=entry.start_time,
            end_time=entry.end_time,
            start_date=entry.start_date,
            end_date=entry.end_date,
            status=status,
            assigned_employee_id=employee_id,
            progress_percentage=percentage,
            logged_hours=entry.logged_hours or Decimal("0"),
            completed_at=now if status == WorkItemStatus.COMPLETED else None,
            cancelled_at=now if status == WorkItemStatus.CANCELLED else None,
        )

    # ------------------------------------------------------------------
    # Transitions
    # ------------------------------------------------------------------

    def ensure_active(self, item: WorkItem, action: str) -> None:
        """Reject any mutation of a COMPLETED or CANCELLED item"""
        if item.is_terminal:
            raise InvalidTransition(
                f"Cannot {action}: work item {item.id} is {item.status.value}"
            )

    def _move(self, item: WorkItem, new_status: WorkItemStatus) -> None:
        if item.status == new_status:
            return
        if not can_transition(item.status, new_status):
            raise InvalidTransition(
                f"Work item {item.id} cannot go from {item.status.value} to {new_status.value}"
            )
        logger.info(f"✅ Work item {item.id} transitioned: {item.status.value} → {new_status.value}")
        item.status = new_status

    def assign(self, item_id: str, employee_id: str) -> WorkItem:
        """
        Bind an employee to the item.

        REQUESTING → ASSIGNED; on ASSIGNED/IN_PROGRESS items only the employee
        changes (reassign). Repeating the call with the same employee is a no-op.
        """
        item = self.get(item_id)
        employee = self.repo.get_employee(self.db, employee_id)
        if not employee:
            raise NotFound(f"Employee {employee_id} not found")
        self.ensure_active(item, "assign")

        if item.assigned_employee_id == employee.id and item.status != WorkItemStatus.REQUESTING:
            return item

        previous = item.assigned_employee_id
        item.assigned_employee_id = employee.id
        if item.status == WorkItemStatus.REQUESTING:
            self._move(item, WorkItemStatus.ASSIGNED)

        item = self.repo.save(self.db, item)
        if previous and previous != employee.id:
            logger.info(f"🔁 Work item {item.id} reassigned: {previous} → {employee.id}")
        else:
            logger.info(f"👷 Work item {item.id} assigned to employee {employee.id}")
        return item

    def unassign(self, item_id: str) -> WorkItem:
        """Clear the employee; the item goes back to REQUESTING with its progress kept"""
        item = self.get(item_id)
        self.ensure_active(item, "unassign")
        if item.assigned_employee_id is None and item.status == WorkItemStatus.REQUESTING:
            return item

        stop_timer(self.db, item, self.timer, self.clock())
        item.assigned_employee_id = None
        self._move(item, WorkItemStatus.REQUESTING)
        return self.repo.save(self.db, item)

    def cancel(self, item_id: str) -> WorkItem:
        item = self.get(item_id)
        self.ensure_active(item, "cancel")

        now = self.clock()
        stop_timer(self.db, item, self.timer, now)
        self._move(item, WorkItemStatus.CANCELLED)
        item.cancelled_at = now
        return self.repo.save(self.db, item)

    def complete(self, item_id: str) -> WorkItem:
        item = self.get(item_id)
        self.ensure_active(item, "complete")
        self.apply_completion(item)
        return self.repo.save(self.db, item)

    def apply_completion(self, item: WorkItem) -> None:
        """Set 100% and COMPLETED, stopping a running timer (no commit)"""
        now = self.clock()
        stop_timer(self.db, item, self.timer, now)
        item.progress_percentage = 100
        self._move(item, WorkItemStatus.COMPLETED)
        item.completed_at = now

    def apply_progress(self, item: WorkItem, percentage: int) -> None:
        """
        Overwrite the percentage and run the automatic transitions (no commit):
        ASSIGNED → IN_PROGRESS on a nonzero value, → COMPLETED at 100.
        """
        if percentage >= 100:
            self.apply_completion(item)
            return

        item.progress_percentage = percentage
        if percentage > 0 and item.status == WorkItemStatus.ASSIGNED:
            self._move(item, WorkItemStatus.IN_PROGRESS)
