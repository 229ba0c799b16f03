"""Assignment domain schemas - Pydantic models for employees and their workload"""

from datetime import date
from typing import Optional

from pydantic import BaseModel, Field


class EmployeeCreate(BaseModel):
    """Schema for an admin creating an employee"""

    firstName: str = Field(..., min_length=1, max_length=100)
    lastName: str = Field(..., min_length=1, max_length=100)
    email: Optional[str] = None
    id: Optional[str] = Field(None, max_length=64)


class EmployeeResponse(BaseModel):
    id: str
    fullName: str
    email: Optional[str] = None
    role: str
    active: bool
    joinedDate: Optional[date] = None

    @classmethod
    def from_employee(cls, employee) -> "EmployeeResponse":
        return cls(
            id=employee.id,
            fullName=employee.full_name,
            email=employee.email,
            role=employee.role,
            active=employee.active,
            joinedDate=employee.joined_date,
        )


class EmployeeAvailability(BaseModel):
    """Advisory daily availability; never blocks an assignment"""

    employeeId: str
    employeeName: str
    email: str = ""
    role: str
    currentAppointmentCount: int
    available: bool


class EmployeeLoad(BaseModel):
    employeeId: str
    currentLoad: int
