"""
Mappings between caller payloads and the canonical work item shape

Each external caller has its own adapter here so that the lifecycle service
only ever sees `NewWorkItem` / `LegacyWorkItem` and ORM `WorkItem` objects.
"""

from dataclasses import dataclass
from datetime import date as Date
from decimal import Decimal, InvalidOperation
from typing import Any, Optional

from ...models import ProgressUpdate, TimeLog, WorkItem
from ...shared.errors import ValidationError
from ...shared.validators import parse_date
from .schemas import (
    AppointmentCreate,
    ProgressUpdateResponse,
    ProjectCreate,
    TimeLogResponse,
    WorkItemRecord,
)
from .status import WorkItemKind, WorkItemStatus, normalize_status


@dataclass
class NewWorkItem:
    """Validated-shape input for WorkItemLifecycle.create (fields may still be missing)"""

    kind: WorkItemKind
    customer_id: Optional[str] = None
    vehicle_id: Optional[int] = None
    service_id: Optional[int] = None
    title: Optional[str] = None
    description: Optional[str] = None
    date: Optional[str] = None
    start_time: Optional[str] = None
    start_date: Optional[str] = None
    end_date: Optional[str] = None


@dataclass
class LegacyWorkItem:
    """A record from the previous system with its status already normalized"""

    kind: WorkItemKind
    customer_id: str
    title: str
    status: WorkItemStatus
    vehicle_id: Optional[int] = None
    description: Optional[str] = None
    date: Optional[Date] = None
    start_time: Optional[str] = None
    end_time: Optional[str] = None
    start_date: Optional[Date] = None
    end_date: Optional[Date] = None
    assigned_employee_id: Optional[str] = None
    progress_percentage: int = 0
    logged_hours: Decimal = Decimal("0")


def from_appointment_request(data: AppointmentCreate) -> NewWorkItem:
    return NewWorkItem(
        kind=WorkItemKind.APPOINTMENT,
        customer_id=data.customerId,
        vehicle_id=data.vehicleId,
        service_id=data.serviceId,
        description=data.description,
        date=data.date,
        start_time=data.startTime,
    )


def from_project_request(data: ProjectCreate) -> NewWorkItem:
    return NewWorkItem(
        kind=WorkItemKind.PROJECT,
        customer_id=data.customerId,
        vehicle_id=data.vehicleId,
        title=data.name,
        description=data.description,
        start_date=data.startDate,
        end_date=data.endDate,
    )


def from_payload(payload: dict[str, Any]) -> NewWorkItem:
    """Adapter for loosely-typed dict callers; `kind` decides the shape"""
    kind = str(payload.get("kind", "")).strip().upper()
    if kind == WorkItemKind.APPOINTMENT.value:
        return from_appointment_request(AppointmentCreate(**_known(payload, AppointmentCreate)))
    if kind == WorkItemKind.PROJECT.value:
        return from_project_request(ProjectCreate(**_known(payload, ProjectCreate)))
    raise ValidationError("kind must be APPOINTMENT or PROJECT", field="kind")


def _known(payload: dict[str, Any], schema) -> dict[str, Any]:
    return {k: v for k, v in payload.items() if k in schema.model_fields}


# Field spellings used by the different screens of the previous system
_TITLE_KEYS = ("serviceNameOrTitle", "serviceName", "service", "title", "name", "taskName")
_DATE_KEYS = ("date", "appointmentDate")
_START_DATE_KEYS = ("startDate", "start_date")
_END_DATE_KEYS = ("endDate", "estimatedEndDate", "completedDate", "end_date")
_EMPLOYEE_KEYS = ("assignedEmployeeId", "employeeId", "assignedEmployee")


def _first(record: dict[str, Any], keys: tuple[str, ...]) -> Any:
    for key in keys:
        value = record.get(key)
        if value not in (None, ""):
            return value
    return None


def _split_time_range(record: dict[str, Any]) -> tuple[Optional[str], Optional[str]]:
    """Old appointments stored "09:00-09:30" in a single `time` field"""
    start, end = record.get("startTime"), record.get("endTime")
    if not start and record.get("time"):
        parts = str(record["time"]).split("-", 1)
        start = parts[0].strip() or None
        if len(parts) == 2 and not end:
            end = parts[1].strip() or None
    return start, end


def from_legacy_record(record: dict[str, Any]) -> LegacyWorkItem:
    """
    Map one exported record to the canonical shape.

    Status spellings ("Upcoming", "PENDING", "ongoing", "in progress", ...) are
    normalized here, once, via the lookup table in status.py.
    """
    kind_raw = str(record.get("kind", "")).strip().upper()
    if kind_raw not in (WorkItemKind.APPOINTMENT.value, WorkItemKind.PROJECT.value):
        # Projects were never booked into a time slot
        kind_raw = WorkItemKind.APPOINTMENT.value if _first(record, _DATE_KEYS) else WorkItemKind.PROJECT.value
    kind = WorkItemKind(kind_raw)

    customer_id = record.get("customerId")
    if not customer_id:
        raise ValidationError("customerId is required", field="customerId")

    title = _first(record, _TITLE_KEYS)
    if not title:
        raise ValidationError("Record has no service name or title", field="title")

    start_time, end_time = _split_time_range(record)

    raw_date = _first(record, _DATE_KEYS)
    raw_start = _first(record, _START_DATE_KEYS)
    raw_end = _first(record, _END_DATE_KEYS)

    vehicle_id = record.get("vehicleId")
    try:
        vehicle_id = int(vehicle_id) if vehicle_id not in (None, "") else None
    except (TypeError, ValueError):
        vehicle_id = None

    try:
        percentage = int(record.get("progressPercentage") or 0)
        logged = Decimal(str(record.get("loggedHours") or record.get("actualHours") or 0))
    except (TypeError, ValueError, InvalidOperation) as e:
        raise ValidationError(f"Invalid progress values: {e}") from e

    employee = _first(record, _EMPLOYEE_KEYS)
    if isinstance(employee, dict):
        employee = employee.get("id")

    return LegacyWorkItem(
        kind=kind,
        customer_id=str(customer_id),
        title=str(title),
        status=normalize_status(record.get("status") or "REQUESTING"),
        vehicle_id=vehicle_id,
        description=record.get("description"),
        date=parse_date(raw_date) if raw_date else None,
        start_time=start_time,
        end_time=end_time,
        start_date=parse_date(raw_start, "startDate") if raw_start else None,
        end_date=parse_date(raw_end, "endDate") if raw_end else None,
        assigned_employee_id=str(employee) if employee else None,
        progress_percentage=max(0, min(100, percentage)),
        logged_hours=logged,
    )


def progress_to_response(update: ProgressUpdate) -> ProgressUpdateResponse:
    return ProgressUpdateResponse(
        id=update.id,
        workItemId=update.work_item_id,
        stage=update.stage,
        percentage=update.percentage,
        remarks=update.remarks,
        authorId=update.author_id,
        createdAt=update.created_at,
    )


def time_log_to_response(log: TimeLog) -> TimeLogResponse:
    return TimeLogResponse(
        id=log.id,
        workItemId=log.work_item_id,
        hours=log.hours,
        description=log.description,
        source=log.source,
        requestId=log.request_id,
        createdAt=log.created_at,
    )


def to_record(item: WorkItem, include_children: bool = True) -> WorkItemRecord:
    """ORM work item → persisted record shape"""
    return WorkItemRecord(
        id=item.id,
        kind=item.kind.value,
        customerId=item.customer_id,
        vehicleId=item.vehicle_id,
        serviceId=item.service_id,
        serviceNameOrTitle=item.title,
        description=item.description,
        date=item.date,
        startTime=item.start_time,
        endTime=item.end_time,
        startDate=item.start_date,
        endDate=item.end_date,
        servicePrice=item.service_price,
        estimatedDurationMinutes=item.estimated_duration_minutes,
        status=item.status.value,
        assignedEmployeeId=item.assigned_employee_id,
        progressPercentage=item.progress_percentage or 0,
        loggedHours=item.logged_hours or Decimal("0"),
        timerState=item.timer_state.value,
        version=item.version or 1,
        createdAt=item.created_at,
        completedAt=item.completed_at,
        cancelledAt=item.cancelled_at,
        progressHistory=(
            [progress_to_response(u) for u in item.progress_history] if include_children else []
        ),
        timeLogs=[time_log_to_response(t) for t in item.time_logs] if include_children else [],
    )
