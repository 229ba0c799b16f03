"""Work item repository - Database operations for appointments and projects"""

from datetime import date
from typing import Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from ...models import Employee, Vehicle, WorkItem
from .status import ACTIVE_STATUSES, WorkItemKind, WorkItemStatus


class WorkItemRepository:
    """Repository for work item database operations"""

    @staticmethod
    def get_item_by_id(db: Session, item_id: str) -> Optional[WorkItem]:
        return db.query(WorkItem).filter(WorkItem.id == item_id).first()

    @staticmethod
    def list_items(
        db: Session,
        kind: Optional[WorkItemKind] = None,
        status: Optional[WorkItemStatus] = None,
    ) -> list[WorkItem]:
        """All work items, newest first, with optional filters"""
        query = db.query(WorkItem)
        if kind:
            query = query.filter(WorkItem.kind == kind)
        if status:
            query = query.filter(WorkItem.status == status)
        return query.order_by(WorkItem.created_at.desc(), WorkItem.id).all()

    @staticmethod
    def list_for_customer(
        db: Session, customer_id: str, kind: Optional[WorkItemKind] = None
    ) -> list[WorkItem]:
        query = db.query(WorkItem).filter(WorkItem.customer_id == customer_id)
        if kind:
            query = query.filter(WorkItem.kind == kind)
        return query.order_by(WorkItem.created_at.desc(), WorkItem.id).all()

    @staticmethod
    def list_assigned_to(db: Session, employee_id: str) -> list[WorkItem]:
        return (
            db.query(WorkItem)
            .filter(WorkItem.assigned_employee_id == employee_id)
            .order_by(WorkItem.created_at.desc(), WorkItem.id)
            .all()
        )

    @staticmethod
    def count_active_for_employee(db: Session, employee_id: str) -> int:
        """ASSIGNED + IN_PROGRESS items referencing the employee"""
        return (
            db.query(func.count(WorkItem.id))
            .filter(
                WorkItem.assigned_employee_id == employee_id,
                WorkItem.status.in_(list(ACTIVE_STATUSES)),
            )
            .scalar()
            or 0
        )

    @staticmethod
    def appointments_on(
        db: Session, on_date: date, employee_id: Optional[str] = None
    ) -> list[WorkItem]:
        """Non-cancelled appointments booked on a date"""
        query = db.query(WorkItem).filter(
            WorkItem.kind == WorkItemKind.APPOINTMENT,
            WorkItem.date == on_date,
            WorkItem.status != WorkItemStatus.CANCELLED,
        )
        if employee_id:
            query = query.filter(WorkItem.assigned_employee_id == employee_id)
        return query.order_by(WorkItem.start_time).all()

    @staticmethod
    def create_item(db: Session, **item_data) -> WorkItem:
        item = WorkItem(**item_data)
        db.add(item)
        db.commit()
        db.refresh(item)
        return item

    @staticmethod
    def create_items(db: Session, items: list[WorkItem]) -> list[WorkItem]:
        """Insert a batch in one transaction; nothing is stored if any insert fails"""
        try:
            db.add_all(items)
            db.commit()
        except Exception:
            db.rollback()
            raise
        for item in items:
            db.refresh(item)
        return items

    @staticmethod
    def save(db: Session, item: WorkItem) -> WorkItem:
        """Commit pending changes on an item (and any children added to the session)"""
        db.commit()
        db.refresh(item)
        return item

    @staticmethod
    def get_employee(db: Session, employee_id: str) -> Optional[Employee]:
        return db.query(Employee).filter(Employee.id == employee_id).first()

    @staticmethod
    def get_vehicle(db: Session, vehicle_id: int) -> Optional[Vehicle]:
        return db.query(Vehicle).filter(Vehicle.id == vehicle_id).first()
