"""Vehicles router - Customer vehicle registration"""

import logging

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ...database import get_db
from ...shared.validators import require_text
from .repository import VehicleRepository
from .schemas import VehicleCreate, VehicleResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/customers/{customer_id}/vehicles", tags=["Vehicles"])


@router.get("", response_model=list[VehicleResponse])
async def list_vehicles(customer_id: str, db: Session = Depends(get_db)):
    return [VehicleResponse.from_vehicle(v) for v in VehicleRepository.list_for_customer(db, customer_id)]


@router.post("", response_model=VehicleResponse, status_code=201)
async def register_vehicle(customer_id: str, data: VehicleCreate, db: Session = Depends(get_db)):
    """Register a vehicle so it can be referenced by bookings"""
    vehicle = VehicleRepository.create_vehicle(
        db,
        customer_id=require_text(customer_id, "customerId", max_length=64),
        make_model=require_text(data.makeModel, "makeModel", max_length=255),
        license_plate=require_text(data.licensePlate, "licensePlate", max_length=32).upper(),
        year=data.year,
    )
    logger.info(f"🚗 Vehicle {vehicle.id} registered for customer {customer_id}")
    return VehicleResponse.from_vehicle(vehicle)
