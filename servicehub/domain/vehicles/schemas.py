"""Vehicle schemas"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field


class VehicleCreate(BaseModel):
    makeModel: str = Field(..., min_length=1, max_length=255)
    licensePlate: str = Field(..., min_length=1, max_length=32)
    year: Optional[int] = Field(None, ge=1900, le=2100)


class VehicleResponse(BaseModel):
    id: int
    customerId: str
    makeModel: str
    licensePlate: str
    year: Optional[int] = None
    createdAt: Optional[datetime] = None

    @classmethod
    def from_vehicle(cls, vehicle) -> "VehicleResponse":
        return cls(
            id=vehicle.id,
            customerId=vehicle.customer_id,
            makeModel=vehicle.make_model,
            licensePlate=vehicle.license_plate,
            year=vehicle.year,
            createdAt=vehicle.created_at,
        )
