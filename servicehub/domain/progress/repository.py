"""Progress repository - Database operations for progress reports and time logs"""

from typing import Optional

from sqlalchemy.orm import Session

from ...models import ProgressUpdate, TimeLog, WorkItem


class ProgressRepository:
    """Repository for progress database operations"""

    @staticmethod
    def list_updates(db: Session, work_item_id: str) -> list[ProgressUpdate]:
        return (
            db.query(ProgressUpdate)
            .filter(ProgressUpdate.work_item_id == work_item_id)
            .order_by(ProgressUpdate.id)
            .all()
        )

    @staticmethod
    def list_time_logs(db: Session, work_item_id: str) -> list[TimeLog]:
        return db.query(TimeLog).filter(TimeLog.work_item_id == work_item_id).order_by(TimeLog.id).all()

    @staticmethod
    def get_log_by_request(db: Session, work_item_id: str, request_id: str) -> Optional[TimeLog]:
        return (
            db.query(TimeLog)
            .filter(TimeLog.work_item_id == work_item_id, TimeLog.request_id == request_id)
            .first()
        )

    @staticmethod
    def save(db: Session, item: WorkItem) -> WorkItem:
        db.commit()
        db.refresh(item)
        return item
