"""
Tests for employee workload, availability and the double-booking policy
"""
import pytest

from servicehub.domain.assignments.schemas import EmployeeCreate
from servicehub.domain.assignments.service import AssignmentRegistry
from servicehub.domain.work_items.schemas import AppointmentCreate
from servicehub.domain.work_items.status import WorkItemStatus
from servicehub.shared.errors import InvalidTransition, NotFound, ValidationError


def book(lifecycle, payload, **overrides):
    return lifecycle.create_appointment(AppointmentCreate(**{**payload, **overrides}))


@pytest.fixture
def registry_factory(db, lifecycle):
    def make(policy="allow", max_daily=5):
        return AssignmentRegistry(db, conflict_policy=policy, max_daily_appointments=max_daily, lifecycle=lifecycle)

    return make


@pytest.mark.unit
class TestCurrentLoad:
    """Tests for AssignmentRegistry.current_load"""

    def test_counts_assigned_and_in_progress(self, registry_factory, lifecycle, appointment_payload):
        registry = registry_factory()
        first = book(lifecycle, appointment_payload)
        second = book(lifecycle, appointment_payload, startTime="11:00")
        third = book(lifecycle, appointment_payload, startTime="13:00")
        for item in (first, second, third):
            registry.assign(item.id, "E7")
        lifecycle.apply_progress(second, 50)
        lifecycle.repo.save(lifecycle.db, second)
        lifecycle.complete(third.id)

        assert lifecycle.get(second.id).status == WorkItemStatus.IN_PROGRESS
        assert registry.current_load("E7") == 2
        assert registry.current_load("E8") == 0

    def test_unknown_employee(self, registry_factory):
        with pytest.raises(NotFound):
            registry_factory().current_load("E404")


@pytest.mark.unit
class TestConflictPolicy:
    """Tests for overlapping appointments of the same employee"""

    def test_allow_assigns_overlapping(self, registry_factory, lifecycle, appointment_payload):
        registry = registry_factory("allow")
        a = book(lifecycle, appointment_payload)
        b = book(lifecycle, appointment_payload)
        registry.assign(a.id, "E7")
        assert registry.assign(b.id, "E7").assigned_employee_id == "E7"

    def test_warn_assigns_and_logs(self, registry_factory, lifecycle, appointment_payload, caplog):
        registry = registry_factory("warn")
        a = book(lifecycle, appointment_payload)
        b = book(lifecycle, appointment_payload)
        registry.assign(a.id, "E7")
        with caplog.at_level("WARNING"):
            item = registry.assign(b.id, "E7")
        assert item.status == WorkItemStatus.ASSIGNED
        assert "Double booking" in caplog.text

    def test_reject_refuses_overlap(self, registry_factory, lifecycle, appointment_payload, services):
        registry = registry_factory("reject")
        a = book(lifecycle, appointment_payload, serviceId=services["Engine Diagnostics"].id)
        b = book(lifecycle, appointment_payload, startTime="09:30")
        registry.assign(a.id, "E7")
        with pytest.raises(InvalidTransition):
            registry.assign(b.id, "E7")
        assert lifecycle.get(b.id).status == WorkItemStatus.REQUESTING

    def test_reject_allows_back_to_back(self, registry_factory, lifecycle, appointment_payload):
        registry = registry_factory("reject")
        a = book(lifecycle, appointment_payload)
        b = book(lifecycle, appointment_payload, startTime="09:30")
        registry.assign(a.id, "E7")
        assert registry.assign(b.id, "E7").status == WorkItemStatus.ASSIGNED

    def test_reject_ignores_cancelled_and_other_days(self, registry_factory, lifecycle, appointment_payload):
        registry = registry_factory("reject")
        a = book(lifecycle, appointment_payload)
        b = book(lifecycle, appointment_payload, date="2025-11-13")
        c = book(lifecycle, appointment_payload)
        registry.assign(a.id, "E7")
        lifecycle.cancel(a.id)
        registry.assign(b.id, "E7")
        assert registry.assign(c.id, "E7").assigned_employee_id == "E7"

    def test_reassign_to_same_employee_is_not_a_conflict(self, registry_factory, lifecycle, appointment_payload):
        registry = registry_factory("reject")
        a = book(lifecycle, appointment_payload)
        registry.assign(a.id, "E7")
        assert registry.reassign(a.id, "E7").assigned_employee_id == "E7"

    def test_assign_cancelled_item_fails(self, registry_factory, lifecycle, appointment_payload):
        registry = registry_factory()
        a = book(lifecycle, appointment_payload)
        lifecycle.cancel(a.id)
        with pytest.raises(InvalidTransition):
            registry.assign(a.id, "E7")


@pytest.mark.unit
class TestAvailability:
    """Tests for the advisory daily availability"""

    def test_counts_per_employee(self, registry_factory, lifecycle, appointment_payload):
        registry = registry_factory(max_daily=2)
        for start in ("09:00", "10:00"):
            registry.assign(book(lifecycle, appointment_payload, startTime=start).id, "E7")
        registry.assign(book(lifecycle, appointment_payload, startTime="11:00").id, "E8")

        by_id = {a.employeeId: a for a in registry.availability("2025-11-12")}
        assert by_id["E7"].currentAppointmentCount == 2
        assert by_id["E7"].available is False
        assert by_id["E8"].currentAppointmentCount == 1
        assert by_id["E8"].available is True

    def test_other_day_is_free(self, registry_factory, lifecycle, appointment_payload):
        registry = registry_factory()
        registry.assign(book(lifecycle, appointment_payload).id, "E7")
        assert all(a.currentAppointmentCount == 0 for a in registry.availability("2025-11-20"))


@pytest.mark.unit
class TestEmployees:
    """Tests for creating employees"""

    def test_create_employee(self, registry_factory):
        employee = registry_factory().create_employee(
            EmployeeCreate(firstName="Nimal", lastName="Fernando", email="Nimal@Example.com")
        )
        assert employee.id == "E3"
        assert employee.full_name == "Nimal Fernando"
        assert employee.email == "nimal@example.com"
        assert employee.role == "EMPLOYEE"
        assert employee.joined_date is not None

    def test_duplicate_email(self, registry_factory):
        with pytest.raises(ValidationError) as exc:
            registry_factory().create_employee(
                EmployeeCreate(firstName="Dana", lastName="P", email="dana@example.com")
            )
        assert exc.value.field == "email"

    def test_explicit_id_must_be_unique(self, registry_factory):
        with pytest.raises(ValidationError):
            registry_factory().create_employee(EmployeeCreate(firstName="A", lastName="B", id="E7"))
