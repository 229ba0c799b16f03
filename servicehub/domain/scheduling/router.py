"""Scheduling router - slot listing and schedule preview for the booking flow"""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ...database import get_db
from ..catalog.service import ServiceCatalog
from .schemas import SlotPlanRequest, SlotPlanResponse
from .time_calculator import SlotPlanner

router = APIRouter(prefix="/scheduling", tags=["Scheduling"])


@router.get("/slots", response_model=list[str])
async def list_slots():
    """Bookable half-hour start times"""
    return SlotPlanner().list_slots()


@router.post("/plan", response_model=SlotPlanResponse)
async def plan_slot(data: SlotPlanRequest, db: Session = Depends(get_db)):
    """Preview the start/end time an appointment would get"""
    service = ServiceCatalog(db).get(data.serviceId)
    plan = SlotPlanner().plan(service, data.date, data.startTime)
    return SlotPlanResponse.from_plan(plan)
