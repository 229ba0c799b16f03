"""Progress domain schemas - Pydantic models for validation"""

from typing import Any, Optional

from pydantic import BaseModel

from ..work_items.schemas import ProgressUpdateResponse


class ProgressReport(BaseModel):
    """Employee progress report; range checks happen in ProgressTracker"""

    stage: Optional[str] = None
    percentage: Any = None
    remarks: Optional[str] = None


class TimeLogCreate(BaseModel):
    hours: Any = None
    description: Optional[str] = None
    requestId: Optional[str] = None


class ProgressSummary(BaseModel):
    """Progress history plus the calculated latest/average percentages"""

    workItemId: str
    status: str
    progressPercentage: int
    latestPercentage: int
    averagePercentage: float
    history: list[ProgressUpdateResponse] = []
