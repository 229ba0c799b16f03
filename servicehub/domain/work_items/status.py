"""
Work item lifecycle states

Lifecycle: REQUESTING → ASSIGNED → IN_PROGRESS → COMPLETED, with CANCELLED
reachable from any non-terminal state.
- REQUESTING: created by a customer (or admin for projects), no employee yet
- ASSIGNED: an employee was bound by an admin
- IN_PROGRESS: the employee reported a nonzero percentage
- COMPLETED / CANCELLED: terminal, no further mutation accepted
"""

import enum
from typing import Optional

from ...shared.errors import ValidationError


class WorkItemKind(str, enum.Enum):
    APPOINTMENT = "APPOINTMENT"
    PROJECT = "PROJECT"


class WorkItemStatus(str, enum.Enum):
    REQUESTING = "REQUESTING"
    ASSIGNED = "ASSIGNED"
    IN_PROGRESS = "IN_PROGRESS"
    COMPLETED = "COMPLETED"
    CANCELLED = "CANCELLED"

    @property
    def is_terminal(self) -> bool:
        return self in TERMINAL_STATUSES


class TimerState(str, enum.Enum):
    STOPPED = "STOPPED"
    RUNNING = "RUNNING"


TERMINAL_STATUSES = frozenset({WorkItemStatus.COMPLETED, WorkItemStatus.CANCELLED})

# Statuses that count towards an employee's current load
ACTIVE_STATUSES = frozenset({WorkItemStatus.ASSIGNED, WorkItemStatus.IN_PROGRESS})

# Valid status changes; same-status "transitions" (reassign) are always allowed
VALID_TRANSITIONS = {
    WorkItemStatus.REQUESTING: {
        WorkItemStatus.ASSIGNED,
        WorkItemStatus.COMPLETED,
        WorkItemStatus.CANCELLED,
    },
    WorkItemStatus.ASSIGNED: {
        WorkItemStatus.REQUESTING,
        WorkItemStatus.IN_PROGRESS,
        WorkItemStatus.COMPLETED,
        WorkItemStatus.CANCELLED,
    },
    WorkItemStatus.IN_PROGRESS: {
        WorkItemStatus.REQUESTING,
        WorkItemStatus.COMPLETED,
        WorkItemStatus.CANCELLED,
    },
    WorkItemStatus.COMPLETED: set(),  # Terminal state
    WorkItemStatus.CANCELLED: set(),  # Terminal state
}


def can_transition(current: WorkItemStatus, new: WorkItemStatus) -> bool:
    """Check a status change against the lifecycle table"""
    if current == new:
        return not current.is_terminal
    return new in VALID_TRANSITIONS.get(current, set())


# Spellings found in older records, mapped once at ingestion to the canonical enum
LEGACY_STATUS_ALIASES = {
    "REQUESTING": WorkItemStatus.REQUESTING,
    "REQUESTED": WorkItemStatus.REQUESTING,
    "PENDING": WorkItemStatus.REQUESTING,
    "NEW": WorkItemStatus.REQUESTING,
    "PLANNED": WorkItemStatus.REQUESTING,
    "ASSIGNED": WorkItemStatus.ASSIGNED,
    "UPCOMING": WorkItemStatus.ASSIGNED,
    "APPROVED": WorkItemStatus.ASSIGNED,
    "SCHEDULED": WorkItemStatus.ASSIGNED,
    "IN_PROGRESS": WorkItemStatus.IN_PROGRESS,
    "ONGOING": WorkItemStatus.IN_PROGRESS,
    "STARTED": WorkItemStatus.IN_PROGRESS,
    "PAUSED": WorkItemStatus.IN_PROGRESS,
    "ON_HOLD": WorkItemStatus.IN_PROGRESS,
    "COMPLETED": WorkItemStatus.COMPLETED,
    "DONE": WorkItemStatus.COMPLETED,
    "FINISHED": WorkItemStatus.COMPLETED,
    "CANCELLED": WorkItemStatus.CANCELLED,
    "CANCELED": WorkItemStatus.CANCELLED,
}


def status_key(raw: Optional[str]) -> str:
    """Case- and separator-insensitive key for a status string ("in progress" → "IN_PROGRESS")"""
    if raw is None:
        return ""
    value = raw.value if isinstance(raw, enum.Enum) else str(raw)
    return "_".join(value.strip().upper().replace("-", " ").split())


def normalize_status(raw: Optional[str]) -> WorkItemStatus:
    """
    Map any known status spelling to the canonical enum.

    Raises:
        ValidationError: If the spelling is unknown
    """
    key = status_key(raw)
    try:
        return LEGACY_STATUS_ALIASES[key]
    except KeyError:
        raise ValidationError(f"Unknown status: {raw!r}", field="status") from None


# Recognized progress stages; anything else is an admin-defined stage label
KNOWN_STAGES = ("not started", "in progress", "paused", "completed")
