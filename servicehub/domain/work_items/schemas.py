"""Work item schemas - Pydantic models for booking, projects and the persisted record shape"""

from datetime import date as Date
from datetime import datetime
from decimal import Decimal
from typing import Any, Optional

from pydantic import BaseModel, Field

# Request fields are optional so that missing values surface as the engine's
# ValidationError (with a per-field message) instead of a generic 422.


class AppointmentCreate(BaseModel):
    """Customer booking of a pre-defined service"""

    customerId: Optional[str] = None
    vehicleId: Optional[int] = None
    serviceId: Optional[int] = None
    date: Optional[str] = None
    startTime: Optional[str] = None
    description: Optional[str] = None
    status: Optional[str] = None  # ignored, new items always start in REQUESTING


class ProjectCreate(BaseModel):
    """Custom work request from a customer or admin"""

    customerId: Optional[str] = None
    vehicleId: Optional[int] = None
    name: Optional[str] = None
    description: Optional[str] = None
    startDate: Optional[str] = None
    endDate: Optional[str] = None
    status: Optional[str] = None  # ignored, new items always start in REQUESTING


class AssignRequest(BaseModel):
    employeeId: str = Field(..., min_length=1)


class LegacyImportRequest(BaseModel):
    """Records exported from the previous system, in any of its field spellings"""

    records: list[dict[str, Any]]


class ProgressUpdateResponse(BaseModel):
    id: int
    workItemId: str
    stage: str
    percentage: int
    remarks: Optional[str] = None
    authorId: Optional[str] = None
    createdAt: Optional[datetime] = None


class TimeLogResponse(BaseModel):
    id: int
    workItemId: str
    hours: Decimal
    description: Optional[str] = None
    source: str
    requestId: Optional[str] = None
    createdAt: Optional[datetime] = None


class WorkItemRecord(BaseModel):
    """Canonical persisted representation of an appointment or project"""

    id: str
    kind: str
    customerId: str
    vehicleId: Optional[int] = None
    serviceId: Optional[int] = None
    serviceNameOrTitle: str
    description: Optional[str] = None
    date: Optional[Date] = None
    startTime: Optional[str] = None
    endTime: Optional[str] = None
    startDate: Optional[Date] = None
    endDate: Optional[Date] = None
    servicePrice: Optional[Decimal] = None
    estimatedDurationMinutes: Optional[int] = None
    status: str
    assignedEmployeeId: Optional[str] = None
    progressPercentage: int = 0
    loggedHours: Decimal = Decimal("0")
    timerState: str = "STOPPED"
    version: int = 1
    createdAt: Optional[datetime] = None
    completedAt: Optional[datetime] = None
    cancelledAt: Optional[datetime] = None
    progressHistory: list[ProgressUpdateResponse] = []
    timeLogs: list[TimeLogResponse] = []
