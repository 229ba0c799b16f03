"""Scheduling schemas - slot planning requests and responses"""

from datetime import date as Date

from pydantic import BaseModel


class SlotPlanRequest(BaseModel):
    serviceId: int
    date: str
    startTime: str


class SlotPlanResponse(BaseModel):
    date: Date
    startTime: str
    endTime: str
    durationMinutes: int

    @classmethod
    def from_plan(cls, plan) -> "SlotPlanResponse":
        return cls(
            date=plan.date,
            startTime=plan.start_time,
            endTime=plan.end_time,
            durationMinutes=plan.duration_minutes,
        )
