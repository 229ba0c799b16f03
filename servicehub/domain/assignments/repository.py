"""Assignment repository - Database operations for employees and their bookings"""

from datetime import date
from typing import Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from ...models import Employee, WorkItem
from ..work_items.status import WorkItemKind, WorkItemStatus


class EmployeeRepository:
    """Repository for employee database operations"""

    @staticmethod
    def list_employees(db: Session, active_only: bool = True) -> list[Employee]:
        query = db.query(Employee)
        if active_only:
            query = query.filter(Employee.active.is_(True))
        return query.order_by(Employee.full_name, Employee.id).all()

    @staticmethod
    def get_employee_by_id(db: Session, employee_id: str) -> Optional[Employee]:
        return db.query(Employee).filter(Employee.id == employee_id).first()

    @staticmethod
    def get_employee_by_email(db: Session, email: str) -> Optional[Employee]:
        return db.query(Employee).filter(func.lower(Employee.email) == email.lower()).first()

    @staticmethod
    def count_employees(db: Session) -> int:
        return db.query(func.count(Employee.id)).scalar() or 0

    @staticmethod
    def create_employee(db: Session, **employee_data) -> Employee:
        employee = Employee(**employee_data)
        db.add(employee)
        db.commit()
        db.refresh(employee)
        return employee

    @staticmethod
    def count_appointments_on(db: Session, employee_id: str, on_date: date) -> int:
        """Non-cancelled appointments assigned to the employee on a date"""
        return (
            db.query(func.count(WorkItem.id))
            .filter(
                WorkItem.assigned_employee_id == employee_id,
                WorkItem.kind == WorkItemKind.APPOINTMENT,
                WorkItem.date == on_date,
                WorkItem.status != WorkItemStatus.CANCELLED,
            )
            .scalar()
            or 0
        )
