"""Service repository - Database operations for service offerings"""

from typing import Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from ...models import ServiceOffering


class ServiceRepository:
    """Repository for service offering database operations"""

    @staticmethod
    def list_services(db: Session, active_only: bool = True) -> list[ServiceOffering]:
        """List services in a stable order (by id)"""
        query = db.query(ServiceOffering)
        if active_only:
            query = query.filter(ServiceOffering.active.is_(True))
        return query.order_by(ServiceOffering.id.asc()).all()

    @staticmethod
    def get_service_by_id(db: Session, service_id: int) -> Optional[ServiceOffering]:
        return db.query(ServiceOffering).filter(ServiceOffering.id == service_id).first()

    @staticmethod
    def get_service_by_name(db: Session, name: str) -> Optional[ServiceOffering]:
        """Case-insensitive name lookup"""
        return (
            db.query(ServiceOffering)
            .filter(func.lower(ServiceOffering.name) == name.strip().lower())
            .first()
        )

    @staticmethod
    def count_services(db: Session) -> int:
        return db.query(func.count(ServiceOffering.id)).scalar() or 0

    @staticmethod
    def create_service(db: Session, **service_data) -> ServiceOffering:
        service = ServiceOffering(**service_data)
        db.add(service)
        db.commit()
        db.refresh(service)
        return service

    @staticmethod
    def update_service(db: Session, service: ServiceOffering, **updates) -> ServiceOffering:
        """Update a service with provided fields"""
        for key, value in updates.items():
            if hasattr(service, key):
                setattr(service, key, value)

        db.commit()
        db.refresh(service)
        return service
