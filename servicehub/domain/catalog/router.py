"""Catalog router - FastAPI endpoints for service offerings"""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ...database import get_db
from .schemas import ServiceCreate, ServiceResponse, ServiceUpdate
from .service import ServiceCatalog

router = APIRouter(prefix="/services", tags=["Services"])
admin_router = APIRouter(prefix="/admin/services", tags=["Admin - Services"])


def get_catalog(db: Session = Depends(get_db)) -> ServiceCatalog:
    """Dependency injection for ServiceCatalog"""
    return ServiceCatalog(db)


# ============================================================================
# CUSTOMER ENDPOINTS
# ============================================================================


@router.get("", response_model=list[ServiceResponse])
async def list_active_services(catalog: ServiceCatalog = Depends(get_catalog)):
    """List services available for booking"""
    return [ServiceResponse.from_offering(s) for s in catalog.list_active()]


@router.get("/{service_id}", response_model=ServiceResponse)
async def get_service(service_id: int, catalog: ServiceCatalog = Depends(get_catalog)):
    """Get a bookable service"""
    return ServiceResponse.from_offering(catalog.get(service_id))


# ============================================================================
# ADMIN ENDPOINTS
# ============================================================================


@admin_router.get("", response_model=list[ServiceResponse])
async def list_all_services(catalog: ServiceCatalog = Depends(get_catalog)):
    """List all services including inactive ones"""
    return [ServiceResponse.from_offering(s) for s in catalog.list_all()]


@admin_router.post("", response_model=ServiceResponse, status_code=201)
async def create_service(data: ServiceCreate, catalog: ServiceCatalog = Depends(get_catalog)):
    """Create a new service offering"""
    return ServiceResponse.from_offering(catalog.create(data))


@admin_router.patch("/{service_id}", response_model=ServiceResponse)
async def update_service(
    service_id: int,
    data: ServiceUpdate,
    catalog: ServiceCatalog = Depends(get_catalog),
):
    """Update a service offering"""
    return ServiceResponse.from_offering(catalog.update(service_id, data))


@admin_router.delete("/{service_id}", response_model=ServiceResponse)
async def deactivate_service(service_id: int, catalog: ServiceCatalog = Depends(get_catalog)):
    """Deactivate a service (kept for existing bookings)"""
    return ServiceResponse.from_offering(catalog.deactivate(service_id))
