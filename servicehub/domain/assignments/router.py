"""Assignments router - Admin endpoints for employees and workload"""

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ...database import get_db
from .schemas import EmployeeAvailability, EmployeeCreate, EmployeeLoad, EmployeeResponse
from .service import AssignmentRegistry

router = APIRouter(prefix="/admin/employees", tags=["Admin - Employees"])


def get_registry(db: Session = Depends(get_db)) -> AssignmentRegistry:
    """Dependency injection for AssignmentRegistry"""
    return AssignmentRegistry(db)


@router.get("", response_model=list[EmployeeResponse])
async def list_employees(registry: AssignmentRegistry = Depends(get_registry)):
    return [EmployeeResponse.from_employee(e) for e in registry.list_employees()]


@router.post("", response_model=EmployeeResponse, status_code=201)
async def create_employee(data: EmployeeCreate, registry: AssignmentRegistry = Depends(get_registry)):
    """Create an employee account record"""
    return EmployeeResponse.from_employee(registry.create_employee(data))


@router.get("/availability", response_model=list[EmployeeAvailability])
async def get_available_employees(
    date: str = Query(..., description="Day to check (YYYY-MM-DD)"),
    registry: AssignmentRegistry = Depends(get_registry),
):
    """Appointments per employee on a day; advisory only"""
    return registry.availability(date)


@router.get("/{employee_id}/load", response_model=EmployeeLoad)
async def get_employee_load(employee_id: str, registry: AssignmentRegistry = Depends(get_registry)):
    return EmployeeLoad(employeeId=employee_id, currentLoad=registry.current_load(employee_id))
