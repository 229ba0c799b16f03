"""Dashboard router - Counters for the customer and admin dashboards"""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ...database import get_db
from ..vehicles.repository import VehicleRepository
from ..work_items.repository import WorkItemRepository
from .schemas import DashboardStats
from .stats import dashboard_stats

router = APIRouter(tags=["Dashboard"])


@router.get("/customers/{customer_id}/dashboard", response_model=DashboardStats)
async def customer_dashboard(customer_id: str, db: Session = Depends(get_db)):
    items = WorkItemRepository.list_for_customer(db, customer_id)
    vehicles = VehicleRepository.list_for_customer(db, customer_id)
    return dashboard_stats(items, vehicles)


@router.get("/admin/dashboard", response_model=DashboardStats)
async def admin_dashboard(db: Session = Depends(get_db)):
    return dashboard_stats(WorkItemRepository.list_items(db), VehicleRepository.list_vehicles(db))
