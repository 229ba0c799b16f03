"""Default service catalog offered on the booking page"""

import logging
from decimal import Decimal

from sqlalchemy.orm import Session

from .domain.catalog.repository import ServiceRepository

logger = logging.getLogger(__name__)

DEFAULT_SERVICES = [
    {
        "name": "Oil Change",
        "description": "Engine oil and filter replacement",
        "price": Decimal("50.00"),
        "estimated_duration_minutes": 30,
    },
    {
        "name": "Brake Inspection",
        "description": "Pads, discs and fluid check",
        "price": Decimal("75.00"),
        "estimated_duration_minutes": 45,
    },
    {
        "name": "Tire Rotation",
        "description": "Rotate and balance all four tires",
        "price": Decimal("40.00"),
        "estimated_duration_minutes": 30,
    },
    {
        "name": "Engine Diagnostics",
        "description": "Computer diagnostics and fault code reading",
        "price": Decimal("100.00"),
        "estimated_duration_minutes": 60,
    },
    {
        "name": "Air Conditioning Service",
        "description": "Refrigerant recharge and system check",
        "price": Decimal("120.00"),
        "estimated_duration_minutes": 90,
    },
    {
        "name": "Battery Replacement",
        "description": "Battery test and replacement",
        "price": Decimal("150.00"),
        "estimated_duration_minutes": 20,
    },
]


def seed_services(db: Session) -> int:
    """Insert the default catalog when no service exists yet; returns the number created"""
    if ServiceRepository.count_services(db) > 0:
        return 0

    for data in DEFAULT_SERVICES:
        ServiceRepository.create_service(db, active=True, **data)

    logger.info(f"🌱 Seeded {len(DEFAULT_SERVICES)} default services")
    return len(DEFAULT_SERVICES)
