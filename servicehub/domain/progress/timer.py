"""
Work timer strategies

The timer is a RUNNING/STOPPED flag on the work item. What happens to the
elapsed time when it stops depends on TIMER_MODE:
- manual: nothing, hours only come from explicit time logs
- derive_on_pause: the elapsed time is written as a TimeLog (source="timer")
"""

import logging
from datetime import datetime
from decimal import ROUND_HALF_UP, Decimal
from typing import Optional

from sqlalchemy.orm import Session

from ...config import TIMER_MODE
from ...models import TimeLog, WorkItem
from ..work_items.status import TimerState

logger = logging.getLogger(__name__)

HOURS_QUANTUM = Decimal("0.01")


class ManualTimer:
    mode = "manual"

    def elapsed_hours(self, item: WorkItem, now: datetime) -> Optional[Decimal]:
        return None


class DeriveOnPauseTimer:
    mode = "derive_on_pause"

    def elapsed_hours(self, item: WorkItem, now: datetime) -> Optional[Decimal]:
        if not item.timer_started_at:
            return None
        seconds = max(0.0, (now - item.timer_started_at).total_seconds())
        hours = (Decimal(str(seconds)) / Decimal(3600)).quantize(HOURS_QUANTUM, rounding=ROUND_HALF_UP)
        return hours if hours > 0 else None


TIMER_STRATEGIES = {
    ManualTimer.mode: ManualTimer,
    DeriveOnPauseTimer.mode: DeriveOnPauseTimer,
}


def get_timer_strategy(mode: Optional[str] = None):
    return TIMER_STRATEGIES.get(mode or TIMER_MODE, ManualTimer)()


def start_timer(item: WorkItem, now: datetime) -> bool:
    """Mark the timer RUNNING; returns False when it already was"""
    if item.timer_state == TimerState.RUNNING:
        return False
    item.timer_state = TimerState.RUNNING
    item.timer_started_at = now
    return True


def stop_timer(db: Session, item: WorkItem, strategy, now: datetime) -> Optional[TimeLog]:
    """
    Mark the timer STOPPED and let the strategy fold elapsed time into a TimeLog.

    Does not commit; the caller saves the item.
    """
    if item.timer_state != TimerState.RUNNING:
        return None

    hours = strategy.elapsed_hours(item, now)
    item.timer_state = TimerState.STOPPED
    item.timer_started_at = None

    if not hours:
        return None

    log = TimeLog(
        work_item_id=item.id,
        hours=hours,
        description="Timer session",
        source="timer",
    )
    db.add(log)
    item.logged_hours = (item.logged_hours or Decimal("0")) + hours
    logger.info(f"⏱️ Timer on work item {item.id} logged {hours}h")
    return log
