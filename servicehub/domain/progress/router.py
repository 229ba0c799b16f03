"""Progress router - Employee endpoints for work items assigned to them"""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ...database import get_db
from ..work_items.adapters import progress_to_response, time_log_to_response, to_record
from ..work_items.schemas import ProgressUpdateResponse, TimeLogResponse, WorkItemRecord
from .schemas import ProgressReport, ProgressSummary, TimeLogCreate
from .service import ProgressTracker

router = APIRouter(prefix="/employees/{employee_id}/work-items", tags=["Employee - Work Items"])


def get_tracker(employee_id: str, db: Session = Depends(get_db)) -> ProgressTracker:
    """ProgressTracker scoped to the employee in the path"""
    return ProgressTracker(db, employee_id=employee_id)


@router.get("", response_model=list[WorkItemRecord])
async def list_my_work_items(employee_id: str, tracker: ProgressTracker = Depends(get_tracker)):
    """Work items currently assigned to the employee"""
    items = tracker.lifecycle.list_assigned_to(employee_id)
    return [to_record(i, include_children=False) for i in items]


@router.get("/{item_id}", response_model=WorkItemRecord)
async def get_my_work_item(item_id: str, tracker: ProgressTracker = Depends(get_tracker)):
    return to_record(tracker.get_item(item_id))


# ============================================================================
# PROGRESS
# ============================================================================


@router.post("/{item_id}/progress", response_model=ProgressUpdateResponse, status_code=201)
async def report_progress(
    item_id: str,
    data: ProgressReport,
    tracker: ProgressTracker = Depends(get_tracker),
):
    """Report a stage and percentage; 100% completes the item"""
    update = tracker.report_progress(item_id, data.stage, data.percentage, data.remarks)
    return progress_to_response(update)


@router.get("/{item_id}/progress", response_model=ProgressSummary)
async def get_progress(item_id: str, tracker: ProgressTracker = Depends(get_tracker)):
    item = tracker.get_item(item_id)
    history = tracker.history(item_id)
    return ProgressSummary(
        workItemId=item.id,
        status=item.status.value,
        progressPercentage=item.progress_percentage or 0,
        latestPercentage=tracker.latest_percentage(item_id),
        averagePercentage=tracker.average_percentage(item_id),
        history=[progress_to_response(u) for u in history],
    )


# ============================================================================
# TIME LOGS & TIMER
# ============================================================================


@router.post("/{item_id}/time-logs", response_model=TimeLogResponse, status_code=201)
async def log_time(
    item_id: str,
    data: TimeLogCreate,
    tracker: ProgressTracker = Depends(get_tracker),
):
    """Add worked hours; resending the same requestId does not add them twice"""
    log = tracker.log_time(item_id, data.hours, data.description, request_id=data.requestId)
    return time_log_to_response(log)


@router.get("/{item_id}/time-logs", response_model=list[TimeLogResponse])
async def list_time_logs(item_id: str, tracker: ProgressTracker = Depends(get_tracker)):
    return [time_log_to_response(t) for t in tracker.time_logs(item_id)]


@router.post("/{item_id}/timer/start", response_model=WorkItemRecord)
async def start_timer(item_id: str, tracker: ProgressTracker = Depends(get_tracker)):
    return to_record(tracker.start_timer(item_id))


@router.post("/{item_id}/timer/pause", response_model=WorkItemRecord)
async def pause_timer(item_id: str, tracker: ProgressTracker = Depends(get_tracker)):
    return to_record(tracker.pause_timer(item_id))
