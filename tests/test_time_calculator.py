"""
Tests for slot planning and time arithmetic
"""
from datetime import date
from types import SimpleNamespace

import pytest

from servicehub.domain.scheduling.time_calculator import (
    SLOTS,
    SlotPlanner,
    add_minutes,
    overlaps,
    plan_slot,
)
from servicehub.shared.errors import ValidationError


def offering(minutes, service_id=1):
    return SimpleNamespace(id=service_id, estimated_duration_minutes=minutes)


@pytest.mark.unit
class TestSlots:
    """Tests for the fixed slot grid"""

    def test_slots_run_every_half_hour(self):
        assert SLOTS[0] == "09:00"
        assert SLOTS[-1] == "17:30"
        assert len(SLOTS) == 18
        assert "12:30" in SLOTS

    def test_list_slots_returns_copy(self):
        planner = SlotPlanner()
        slots = planner.list_slots()
        slots.append("23:00")
        assert "23:00" not in planner.list_slots()


@pytest.mark.unit
class TestPlan:
    """Tests for SlotPlanner.plan"""

    def test_oil_change_at_nine(self):
        plan = SlotPlanner().plan(offering(30), "2025-11-12", "09:00")
        assert plan.date == date(2025, 11, 12)
        assert plan.start_time == "09:00"
        assert plan.end_time == "09:30"
        assert plan.duration_minutes == 30

    @pytest.mark.parametrize(
        "start,minutes,end",
        [
            ("09:00", 45, "09:45"),
            ("10:30", 90, "12:00"),
            ("17:30", 20, "17:50"),
            ("16:00", 480, "00:00"),
            ("17:30", 600, "03:30"),
        ],
    )
    def test_end_is_start_plus_duration_modulo_day(self, start, minutes, end):
        assert SlotPlanner().plan(offering(minutes), date(2025, 1, 6), start).end_time == end

    def test_accepts_twelve_hour_spelling(self):
        plan = SlotPlanner().plan(offering(60), "2025-11-12", "02:30 PM")
        assert plan.start_time == "14:30"
        assert plan.end_time == "15:30"

    def test_past_dates_are_accepted(self):
        plan = plan_slot(offering(30), "2001-01-01", "09:00")
        assert plan.date == date(2001, 1, 1)

    def test_rejects_time_outside_grid(self):
        with pytest.raises(ValidationError) as exc:
            SlotPlanner().plan(offering(30), "2025-11-12", "09:15")
        assert exc.value.field == "startTime"

    def test_rejects_evening_slot(self):
        with pytest.raises(ValidationError):
            SlotPlanner().plan(offering(30), "2025-11-12", "18:00")

    def test_rejects_malformed_date(self):
        with pytest.raises(ValidationError) as exc:
            SlotPlanner().plan(offering(30), "12/11/2025", "09:00")
        assert exc.value.field == "date"

    def test_rejects_service_without_duration(self):
        with pytest.raises(ValidationError):
            SlotPlanner().plan(offering(0), "2025-11-12", "09:00")


@pytest.mark.unit
class TestTimeArithmetic:
    """Tests for minute helpers and interval overlap"""

    def test_add_minutes_wraps(self):
        assert add_minutes("23:30", 45) == "00:15"

    def test_overlapping_ranges(self):
        assert overlaps("09:00", "10:00", "09:30", "10:30") is True

    def test_touching_ranges_do_not_overlap(self):
        assert overlaps("09:00", "09:30", "09:30", "10:00") is False

    def test_wrapped_end_runs_to_midnight(self):
        assert overlaps("17:30", "03:30", "20:00", "21:00") is True
