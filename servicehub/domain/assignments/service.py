"""Assignment service - Employee workload, availability and booking conflict policy"""

import logging
from datetime import date
from typing import Optional, Union

from sqlalchemy.orm import Session

from ...config import ASSIGNMENT_CONFLICT_POLICY, MAX_DAILY_APPOINTMENTS
from ...models import Employee, WorkItem
from ...shared.errors import InvalidTransition, NotFound, ValidationError
from ...shared.validators import optional_text, parse_date, require_text, validate_email
from ..scheduling.time_calculator import overlaps
from ..work_items.repository import WorkItemRepository
from ..work_items.service import WorkItemLifecycle
from ..work_items.status import WorkItemKind
from .repository import EmployeeRepository
from .schemas import EmployeeAvailability, EmployeeCreate

logger = logging.getLogger(__name__)


class AssignmentRegistry:
    """
    Who works on what.

    Assignment itself is a lifecycle transition; the registry adds the
    workload queries and the double-booking policy in front of it:
    - allow: assign regardless of overlapping appointments
    - warn: assign and log the overlap
    - reject: refuse with InvalidTransition
    """

    def __init__(
        self,
        db: Session,
        conflict_policy: Optional[str] = None,
        max_daily_appointments: Optional[int] = None,
        lifecycle: Optional[WorkItemLifecycle] = None,
    ):
        self.db = db
        self.repo = EmployeeRepository()
        self.items = WorkItemRepository()
        self.lifecycle = lifecycle or WorkItemLifecycle(db)
        self.conflict_policy = conflict_policy or ASSIGNMENT_CONFLICT_POLICY
        self.max_daily_appointments = (
            MAX_DAILY_APPOINTMENTS if max_daily_appointments is None else max_daily_appointments
        )

    # ------------------------------------------------------------------
    # Employees
    # ------------------------------------------------------------------

    def get_employee(self, employee_id: str) -> Employee:
        employee = self.repo.get_employee_by_id(self.db, employee_id)
        if not employee:
            raise NotFound(f"Employee {employee_id} not found")
        return employee

    def list_employees(self) -> list[Employee]:
        return self.repo.list_employees(self.db)

    def create_employee(self, data: EmployeeCreate) -> Employee:
        """Create an EMPLOYEE joined today; the id defaults to the next "E<n>" value"""
        first = require_text(data.firstName, "firstName", max_length=100)
        last = require_text(data.lastName, "lastName", max_length=100)
        email = validate_email(data.email) or None
        if email and self.repo.get_employee_by_email(self.db, email):
            raise ValidationError("An employee with this email already exists", field="email")

        employee_id = optional_text(data.id, "id", max_length=64)
        if employee_id and self.repo.get_employee_by_id(self.db, employee_id):
            raise ValidationError(f"Employee {employee_id} already exists", field="id")
        if not employee_id:
            employee_id = self._next_employee_id()

        employee = self.repo.create_employee(
            self.db,
            id=employee_id,
            full_name=f"{first} {last}",
            email=email,
            role="EMPLOYEE",
            active=True,
            joined_date=date.today(),
        )
        logger.info(f"👤 Employee {employee.id} created: {employee.full_name}")
        return employee

    def _next_employee_id(self) -> str:
        n = self.repo.count_employees(self.db) + 1
        while self.repo.get_employee_by_id(self.db, f"E{n}"):
            n += 1
        return f"E{n}"

    # ------------------------------------------------------------------
    # Workload
    # ------------------------------------------------------------------

    def current_load(self, employee_id: str) -> int:
        """Number of ASSIGNED + IN_PROGRESS items referencing the employee"""
        self.get_employee(employee_id)
        return self.items.count_active_for_employee(self.db, employee_id)

    def availability(self, on_date: Union[date, str]) -> list[EmployeeAvailability]:
        """Appointments per active employee on a date, available while under the daily cap"""
        day = parse_date(on_date, "date")
        result = []
        for employee in self.repo.list_employees(self.db):
            count = self.repo.count_appointments_on(self.db, employee.id, day)
            result.append(
                EmployeeAvailability(
                    employeeId=employee.id,
                    employeeName=employee.full_name or "Unknown",
                    email=employee.email or "",
                    role=employee.role,
                    currentAppointmentCount=count,
                    available=count < self.max_daily_appointments,
                )
            )
        return result

    def find_conflicts(self, employee_id: str, item: WorkItem) -> list[WorkItem]:
        """The employee's other appointments on the same day whose time range overlaps the item's"""
        if item.kind != WorkItemKind.APPOINTMENT or not item.date or not item.start_time:
            return []
        end_time = item.end_time or item.start_time
        return [
            other
            for other in self.items.appointments_on(self.db, item.date, employee_id=employee_id)
            if other.id != item.id
            and other.start_time
            and overlaps(item.start_time, end_time, other.start_time, other.end_time or other.start_time)
        ]

    # ------------------------------------------------------------------
    # Assignment
    # ------------------------------------------------------------------

    def assign(self, item_id: str, employee_id: str) -> WorkItem:
        """Check the conflict policy, then bind the employee through the lifecycle"""
        item = self.lifecycle.get(item_id)
        self.get_employee(employee_id)
        self.lifecycle.ensure_active(item, "assign")

        if self.conflict_policy != "allow" and item.assigned_employee_id != employee_id:
            conflicts = self.find_conflicts(employee_id, item)
            if conflicts:
                clash = ", ".join(f"{c.start_time}-{c.end_time}" for c in conflicts)
                if self.conflict_policy == "reject":
                    raise InvalidTransition(
                        f"Employee {employee_id} already has appointments on {item.date} at {clash}"
                    )
                logger.warning(
                    f"⚠️ Double booking: employee {employee_id} on {item.date} at {clash} "
                    f"(assigning work item {item.id})"
                )

        return self.lifecycle.assign(item_id, employee_id)

    def reassign(self, item_id: str, employee_id: str) -> WorkItem:
        return self.assign(item_id, employee_id)
