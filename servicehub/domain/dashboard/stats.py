"""
Dashboard statistics

Counters are recomputed from the item collection on every call. The status
buckets below are kept exactly as the customer dashboard has always counted
them, because older records still carry their historical spellings.
"""

import logging
from collections.abc import Iterable
from typing import Any, Optional

from ..work_items.status import WorkItemKind, status_key
from .schemas import DashboardStats

logger = logging.getLogger(__name__)

UPCOMING_APPOINTMENT_STATUSES = frozenset({"ASSIGNED", "UPCOMING", "PENDING", "APPROVED"})
ONGOING_PROJECT_STATUSES = frozenset({"ASSIGNED", "ONGOING", "IN_PROGRESS", "PENDING"})
COMPLETED_STATUSES = frozenset({"COMPLETED"})
CANCELLED_STATUSES = frozenset({"CANCELLED", "CANCELED"})


def _field(item: Any, *names: str) -> Any:
    """Read the first present attribute/key among `names` (ORM object, pydantic record or dict)"""
    for name in names:
        if isinstance(item, dict):
            value = item.get(name)
        else:
            value = getattr(item, name, None)
        if value is not None:
            return value
    return None


def _kind(item: Any) -> Optional[str]:
    kind = status_key(_field(item, "kind"))
    if kind in (WorkItemKind.APPOINTMENT.value, WorkItemKind.PROJECT.value):
        return kind
    # Untyped legacy rows: only appointments were booked on a date
    if _field(item, "date", "appointmentDate") is not None:
        return WorkItemKind.APPOINTMENT.value
    if _field(item, "startDate", "start_date") is not None:
        return WorkItemKind.PROJECT.value
    return None


def _status(item: Any) -> str:
    return status_key(_field(item, "status"))


def dashboard_stats(items: Iterable[Any], vehicles: Optional[Iterable[Any]] = None) -> DashboardStats:
    """
    Count appointments and projects by dashboard bucket.

    Never raises: an unreadable collection is logged and yields zeroed counters.
    """
    try:
        appointments = []
        projects = []
        vehicle_ids = set()
        for item in items or []:
            kind = _kind(item)
            if kind == WorkItemKind.APPOINTMENT.value:
                appointments.append(_status(item))
            elif kind == WorkItemKind.PROJECT.value:
                projects.append(_status(item))
            vehicle_id = _field(item, "vehicle_id", "vehicleId")
            if vehicle_id is not None:
                vehicle_ids.add(str(vehicle_id))

        total_vehicles = len(list(vehicles)) if vehicles is not None else len(vehicle_ids)

        return DashboardStats(
            totalVehicles=total_vehicles,
            upcomingAppointments=sum(1 for s in appointments if s in UPCOMING_APPOINTMENT_STATUSES),
            ongoingProjects=sum(1 for s in projects if s in ONGOING_PROJECT_STATUSES),
            completedAppointments=sum(1 for s in appointments if s in COMPLETED_STATUSES),
            completedProjects=sum(1 for s in projects if s in COMPLETED_STATUSES),
            cancelledAppointments=sum(1 for s in appointments if s in CANCELLED_STATUSES),
            totalAppointments=len(appointments),
            totalProjects=len(projects),
        )
    except Exception as e:
        logger.error(f"❌ Failed to compute dashboard stats: {e}")
        return DashboardStats()
