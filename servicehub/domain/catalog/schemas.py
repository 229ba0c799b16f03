"""Catalog domain schemas - Pydantic models for validation"""

from datetime import datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, Field


class ServiceCreate(BaseModel):
    """Schema for creating a service offering"""

    name: str = Field(..., min_length=1, max_length=255)
    description: Optional[str] = None
    price: Decimal = Field(..., ge=0)
    estimatedDurationMinutes: int = Field(..., gt=0)
    active: bool = True


class ServiceUpdate(BaseModel):
    """Schema for updating a service offering"""

    name: Optional[str] = Field(None, min_length=1, max_length=255)
    description: Optional[str] = None
    price: Optional[Decimal] = Field(None, ge=0)
    estimatedDurationMinutes: Optional[int] = Field(None, gt=0)
    active: Optional[bool] = None


class ServiceResponse(BaseModel):
    """Schema for service offering response"""

    id: int
    name: str
    description: Optional[str] = None
    price: Decimal
    estimatedDurationMinutes: int
    active: bool
    createdAt: Optional[datetime] = None

    @classmethod
    def from_offering(cls, offering) -> "ServiceResponse":
        return cls(
            id=offering.id,
            name=offering.name,
            description=offering.description,
            price=offering.price,
            estimatedDurationMinutes=offering.estimated_duration_minutes,
            active=offering.active,
            createdAt=offering.created_at,
        )
