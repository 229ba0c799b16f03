"""Time parsing and slot calculations for appointment booking"""

import logging
from dataclasses import dataclass
from datetime import date
from typing import Union

from ...shared.errors import ValidationError
from ...shared.validators import parse_date, parse_time_of_day

logger = logging.getLogger(__name__)

MINUTES_PER_DAY = 24 * 60

FIRST_SLOT = "09:00"
LAST_SLOT = "17:30"
SLOT_LENGTH_MINUTES = 30


def to_minutes(hhmm: str) -> int:
    """Minutes since midnight for an HH:MM string"""
    hours, minutes = hhmm.split(":")
    return int(hours) * 60 + int(minutes)


def from_minutes(total: int) -> str:
    """HH:MM for a minute offset, wrapping around midnight"""
    total %= MINUTES_PER_DAY
    return f"{total // 60:02d}:{total % 60:02d}"


def add_minutes(hhmm: str, minutes: int) -> str:
    """
    Add minutes to a time of day.

    Wraps past midnight without carrying into the next day
    ("23:30" + 60 → "00:30").
    """
    return from_minutes(to_minutes(hhmm) + minutes)


def build_slots(first: str = FIRST_SLOT, last: str = LAST_SLOT, step: int = SLOT_LENGTH_MINUTES) -> tuple[str, ...]:
    return tuple(
        from_minutes(m) for m in range(to_minutes(first), to_minutes(last) + 1, step)
    )


# 09:00, 09:30, ... 17:30
SLOTS = build_slots()


def overlaps(start_a: str, end_a: str, start_b: str, end_b: str) -> bool:
    """Half-open interval overlap on the same day ([start, end))"""
    a0, a1 = to_minutes(start_a), to_minutes(end_a)
    b0, b1 = to_minutes(start_b), to_minutes(end_b)
    # An end time that wrapped past midnight still runs to the end of the day
    if a1 <= a0:
        a1 = MINUTES_PER_DAY
    if b1 <= b0:
        b1 = MINUTES_PER_DAY
    return a0 < b1 and b0 < a1


@dataclass(frozen=True)
class SlotPlan:
    date: date
    start_time: str
    end_time: str
    duration_minutes: int


class SlotPlanner:
    """Computes appointment start/end times from a slot and a service duration"""

    def __init__(self, slots: tuple[str, ...] = SLOTS):
        self.slots = slots

    def list_slots(self) -> list[str]:
        return list(self.slots)

    def plan(self, service, on_date: Union[date, str], start_time: str) -> SlotPlan:
        """
        Build the schedule for booking `service` at `start_time` on `on_date`.

        Past dates are accepted. The end time is the start plus the service's
        estimated duration, wrapping past midnight with no day rollover.
        """
        planned_date = parse_date(on_date, "date")
        start = parse_time_of_day(start_time, "startTime")
        if start not in self.slots:
            raise ValidationError(
                f"{start} is not a bookable slot ({self.slots[0]}-{self.slots[-1]}, every 30 minutes)",
                field="startTime",
            )

        duration = service.estimated_duration_minutes
        if not duration or duration <= 0:
            raise ValidationError("Service has no valid estimated duration", field="serviceId")

        end = add_minutes(start, duration)
        logger.debug(f"Planned slot {planned_date} {start}-{end} for service {service.id}")
        return SlotPlan(date=planned_date, start_time=start, end_time=end, duration_minutes=duration)


def plan_slot(service, on_date: Union[date, str], start_time: str) -> SlotPlan:
    """Plan against the default slot grid"""
    return SlotPlanner().plan(service, on_date, start_time)
