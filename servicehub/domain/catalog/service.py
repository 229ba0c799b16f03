"""Catalog service - Read side for booking plus admin maintenance of offerings"""

import logging

from sqlalchemy.orm import Session

from ...models import ServiceOffering
from ...shared.errors import NotFound, ValidationError
from ...shared.validators import optional_text, require_text
from .repository import ServiceRepository
from .schemas import ServiceCreate, ServiceUpdate

logger = logging.getLogger(__name__)


class ServiceCatalog:
    """Registry of bookable service offerings"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = ServiceRepository()

    def list_active(self) -> list[ServiceOffering]:
        """Only active offerings, ordered by id"""
        return self.repo.list_services(self.db, active_only=True)

    def list_all(self) -> list[ServiceOffering]:
        return self.repo.list_services(self.db, active_only=False)

    def get(self, service_id: int, include_inactive: bool = False) -> ServiceOffering:
        """
        Get an offering by id.

        Inactive offerings are reported as NotFound unless include_inactive is set,
        since they can no longer be booked.
        """
        service = self.repo.get_service_by_id(self.db, service_id)
        if not service or (not service.active and not include_inactive):
            raise NotFound(f"Service {service_id} not found")
        return service

    def create(self, data: ServiceCreate) -> ServiceOffering:
        name = require_text(data.name, "name", max_length=255)
        if self.repo.get_service_by_name(self.db, name):
            raise ValidationError(f"Service with name '{name}' already exists", field="name")

        service = self.repo.create_service(
            self.db,
            name=name,
            description=optional_text(data.description, "description", max_length=1000),
            price=data.price,
            estimated_duration_minutes=data.estimatedDurationMinutes,
            active=data.active,
        )
        logger.info(f"🛠️ Service created: {service.id} ({service.name})")
        return service

    def update(self, service_id: int, data: ServiceUpdate) -> ServiceOffering:
        """
        Update an offering.

        Existing appointments keep the price and duration captured when they were
        booked, so edits only affect new bookings.
        """
        service = self.get(service_id, include_inactive=True)

        updates: dict = {}
        if data.name is not None:
            name = require_text(data.name, "name", max_length=255)
            existing = self.repo.get_service_by_name(self.db, name)
            if existing and existing.id != service.id:
                raise ValidationError(f"Service with name '{name}' already exists", field="name")
            updates["name"] = name
        if data.description is not None:
            updates["description"] = optional_text(data.description, "description", max_length=1000)
        if data.price is not None:
            updates["price"] = data.price
        if data.estimatedDurationMinutes is not None:
            updates["estimated_duration_minutes"] = data.estimatedDurationMinutes
        if data.active is not None:
            updates["active"] = data.active

        service = self.repo.update_service(self.db, service, **updates)
        logger.info(f"🛠️ Service updated: {service.id}")
        return service

    def deactivate(self, service_id: int) -> ServiceOffering:
        service = self.get(service_id, include_inactive=True)
        if not service.active:
            return service
        service = self.repo.update_service(self.db, service, active=False)
        logger.info(f"🛑 Service deactivated: {service.id}")
        return service
