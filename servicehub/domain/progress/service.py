"""Progress service - Stage/percentage reports, time logs and work timers"""

import logging
from datetime import datetime
from decimal import Decimal
from typing import Callable, Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from sqlalchemy.orm.exc import StaleDataError

from ...config import ENFORCE_MONOTONIC_PROGRESS
from ...models import ProgressUpdate, TimeLog, WorkItem
from ...shared.errors import ValidationError
from ...shared.validators import optional_text, require_text, validate_hours, validate_percentage
from ..work_items.service import WorkItemLifecycle, utcnow
from ..work_items.status import KNOWN_STAGES, TimerState
from .repository import ProgressRepository
from .timer import start_timer, stop_timer

logger = logging.getLogger(__name__)


class ProgressTracker:
    """
    Records execution progress of a work item.

    When built with an `employee_id`, every lookup goes through the employee
    scope, so items assigned to someone else behave as if they did not exist.
    """

    def __init__(
        self,
        db: Session,
        employee_id: Optional[str] = None,
        enforce_monotonic: Optional[bool] = None,
        timer_mode: Optional[str] = None,
        clock: Callable[[], datetime] = utcnow,
    ):
        self.db = db
        self.repo = ProgressRepository()
        self.lifecycle = WorkItemLifecycle(db, timer_mode=timer_mode, clock=clock)
        self.employee_id = employee_id
        self.enforce_monotonic = (
            ENFORCE_MONOTONIC_PROGRESS if enforce_monotonic is None else enforce_monotonic
        )

    def get_item(self, item_id: str) -> WorkItem:
        if self.employee_id:
            return self.lifecycle.get_assigned(item_id, self.employee_id)
        return self.lifecycle.get(item_id)

    # ------------------------------------------------------------------
    # Progress reports
    # ------------------------------------------------------------------

    def report_progress(
        self,
        item_id: str,
        stage: str,
        percentage,
        remarks: Optional[str] = None,
        author_id: Optional[str] = None,
    ) -> ProgressUpdate:
        """
        Append a progress report and overwrite the item's percentage.

        ASSIGNED items move to IN_PROGRESS on a nonzero value and any active
        item moves to COMPLETED at 100.

        Raises:
            NotFound: Unknown item (or not assigned to the scoped employee)
            InvalidTransition: Item is COMPLETED or CANCELLED
            ValidationError: Percentage outside 0-100, empty stage, or a
                regression while monotonic progress is enforced
        """
        item = self.get_item(item_id)
        self.lifecycle.ensure_active(item, "report progress")

        value = validate_percentage(percentage)
        stage_label = require_text(stage, "stage", max_length=100)
        if stage_label.lower() in KNOWN_STAGES:
            stage_label = stage_label.lower()
        remarks = optional_text(remarks, "remarks", max_length=500)

        if self.enforce_monotonic and value < (item.progress_percentage or 0):
            raise ValidationError(
                f"Progress cannot go back from {item.progress_percentage}% to {value}%",
                field="percentage",
            )

        update = ProgressUpdate(
            work_item_id=item.id,
            stage=stage_label,
            percentage=value,
            remarks=remarks,
            author_id=author_id or self.employee_id,
        )
        self.db.add(update)
        self.lifecycle.apply_progress(item, value)
        self.repo.save(self.db, item)
        self.db.refresh(update)

        logger.info(f"📈 Work item {item.id} progress: {stage_label} {value}% ({item.status.value})")
        return update

    def history(self, item_id: str) -> list[ProgressUpdate]:
        """Progress reports, oldest first"""
        item = self.get_item(item_id)
        return self.repo.list_updates(self.db, item.id)

    def latest_percentage(self, item_id: str) -> int:
        history = self.history(item_id)
        return history[-1].percentage if history else 0

    def average_percentage(self, item_id: str) -> float:
        history = self.history(item_id)
        if not history:
            return 0.0
        return round(sum(u.percentage for u in history) / len(history), 2)

    # ------------------------------------------------------------------
    # Time logging
    # ------------------------------------------------------------------

    def log_time(
        self,
        item_id: str,
        hours,
        description: Optional[str] = None,
        request_id: Optional[str] = None,
    ) -> TimeLog:
        """
        Add worked hours to the item.

        Hours are additive. A repeated `request_id` returns the log written the
        first time instead of adding the hours again.
        """
        item = self.get_item(item_id)
        self.lifecycle.ensure_active(item, "log time")
        amount = validate_hours(hours)
        request_id = optional_text(request_id, "requestId", max_length=64)

        if request_id:
            existing = self.repo.get_log_by_request(self.db, item.id, request_id)
            if existing:
                logger.info(f"↩️ Duplicate time log request {request_id} on work item {item.id}")
                return existing

        log = TimeLog(
            work_item_id=item.id,
            hours=amount,
            description=optional_text(description, "description", max_length=500),
            source="manual",
            request_id=request_id,
        )
        self.db.add(log)
        item.logged_hours = (item.logged_hours or Decimal("0")) + amount
        try:
            self.repo.save(self.db, item)
        except (IntegrityError, StaleDataError):
            # A concurrent retry with the same request id committed first
            self.db.rollback()
            existing = self.repo.get_log_by_request(self.db, item.id, request_id) if request_id else None
            if not existing:
                raise
            logger.info(f"↩️ Duplicate time log request {request_id} on work item {item.id}")
            return existing
        self.db.refresh(log)

        logger.info(f"🕒 Logged {amount}h on work item {item.id} (total {item.logged_hours}h)")
        return log

    def time_logs(self, item_id: str) -> list[TimeLog]:
        item = self.get_item(item_id)
        return self.repo.list_time_logs(self.db, item.id)

    # ------------------------------------------------------------------
    # Timer
    # ------------------------------------------------------------------

    def start_timer(self, item_id: str) -> WorkItem:
        """Set the timer RUNNING; a no-op when it already runs"""
        item = self.get_item(item_id)
        self.lifecycle.ensure_active(item, "start timer")
        if not start_timer(item, self.lifecycle.clock()):
            return item
        logger.info(f"▶️ Timer started on work item {item.id}")
        return self.repo.save(self.db, item)

    def pause_timer(self, item_id: str) -> WorkItem:
        """Set the timer STOPPED; a no-op when it is not running"""
        item = self.get_item(item_id)
        self.lifecycle.ensure_active(item, "pause timer")
        if item.timer_state != TimerState.RUNNING:
            return item
        stop_timer(self.db, item, self.lifecycle.timer, self.lifecycle.clock())
        logger.info(f"⏸️ Timer paused on work item {item.id}")
        return self.repo.save(self.db, item)
