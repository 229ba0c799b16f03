import uuid
from decimal import Decimal

from sqlalchemy import (
    Boolean,
    Column,
    Date,
    DateTime,
    Enum,
    ForeignKey,
    Integer,
    Numeric,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from .database import Base
from .domain.work_items.status import TimerState, WorkItemKind, WorkItemStatus


def generate_public_id():
    """Generate a unique public ID for secure public access"""
    return str(uuid.uuid4())


class ServiceOffering(Base):
    """Pre-defined service customers can book as an appointment"""

    __tablename__ = "services"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), unique=True, nullable=False)
    description = Column(Text, nullable=True)
    price = Column(Numeric(10, 2), nullable=False, default=Decimal("0"))
    estimated_duration_minutes = Column(Integer, nullable=False)
    active = Column(Boolean, default=True, nullable=False)

    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())


class Vehicle(Base):
    __tablename__ = "vehicles"

    id = Column(Integer, primary_key=True, index=True)
    customer_id = Column(String(64), nullable=False, index=True)
    make_model = Column(String(255), nullable=False)
    license_plate = Column(String(32), nullable=False)
    year = Column(Integer, nullable=True)

    created_at = Column(DateTime, server_default=func.now())


class Employee(Base):
    __tablename__ = "employees"

    id = Column(String(64), primary_key=True)  # opaque id, e.g. "E7"
    full_name = Column(String(255), nullable=False)
    email = Column(String(255), unique=True, nullable=True)
    role = Column(String(50), default="EMPLOYEE", nullable=False)
    active = Column(Boolean, default=True, nullable=False)
    joined_date = Column(Date, nullable=True)

    work_items = relationship("WorkItem", back_populates="assigned_employee")


class WorkItem(Base):
    """Appointment or project, both driven by the same lifecycle"""

    __tablename__ = "work_items"

    id = Column(String(36), primary_key=True, default=generate_public_id)
    kind = Column(Enum(WorkItemKind, native_enum=False, length=20), nullable=False, index=True)

    customer_id = Column(String(64), nullable=False, index=True)
    vehicle_id = Column(Integer, ForeignKey("vehicles.id"), nullable=True)
    service_id = Column(Integer, ForeignKey("services.id"), nullable=True)

    title = Column(String(255), nullable=False)  # service name or project name
    description = Column(Text, nullable=True)

    # Appointment schedule (HH:MM strings, end derived from the service duration)
    date = Column(Date, nullable=True)
    start_time = Column(String(5), nullable=True)
    end_time = Column(String(5), nullable=True)

    # Project schedule
    start_date = Column(Date, nullable=True)
    end_date = Column(Date, nullable=True)

    # Booking-time snapshot of the service offering
    service_price = Column(Numeric(10, 2), nullable=True)
    estimated_duration_minutes = Column(Integer, nullable=True)

    # Status workflow: REQUESTING → ASSIGNED → IN_PROGRESS → COMPLETED (or CANCELLED)
    status = Column(
        Enum(WorkItemStatus, native_enum=False, length=20),
        default=WorkItemStatus.REQUESTING,
        nullable=False,
        index=True,
    )
    assigned_employee_id = Column(String(64), ForeignKey("employees.id"), nullable=True, index=True)

    # Progress tracking
    progress_percentage = Column(Integer, default=0, nullable=False)
    logged_hours = Column(Numeric(10, 2), default=Decimal("0"), nullable=False)
    timer_state = Column(
        Enum(TimerState, native_enum=False, length=10), default=TimerState.STOPPED, nullable=False
    )
    timer_started_at = Column(DateTime, nullable=True)

    # Optimistic concurrency: bumped on every UPDATE, stale writers get StaleDataError
    version = Column(Integer, nullable=False, default=1)

    # Timestamps
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())
    completed_at = Column(DateTime, nullable=True)
    cancelled_at = Column(DateTime, nullable=True)

    # Relationships
    assigned_employee = relationship("Employee", back_populates="work_items")
    service = relationship("ServiceOffering")
    vehicle = relationship("Vehicle")
    progress_history = relationship(
        "ProgressUpdate",
        back_populates="work_item",
        order_by="ProgressUpdate.id",
        cascade="all, delete-orphan",
    )
    time_logs = relationship(
        "TimeLog",
        back_populates="work_item",
        order_by="TimeLog.id",
        cascade="all, delete-orphan",
    )

    __mapper_args__ = {"version_id_col": version}

    @property
    def is_terminal(self) -> bool:
        return self.status in (WorkItemStatus.COMPLETED, WorkItemStatus.CANCELLED)


class ProgressUpdate(Base):
    """Append-only stage/percentage report for a work item"""

    __tablename__ = "progress_updates"

    id = Column(Integer, primary_key=True, index=True)
    work_item_id = Column(String(36), ForeignKey("work_items.id"), nullable=False, index=True)
    stage = Column(String(100), nullable=False)
    percentage = Column(Integer, nullable=False)
    remarks = Column(String(500), nullable=True)
    author_id = Column(String(64), nullable=True)  # employee id

    created_at = Column(DateTime, server_default=func.now())

    work_item = relationship("WorkItem", back_populates="progress_history")


class TimeLog(Base):
    __tablename__ = "time_logs"
    __table_args__ = (UniqueConstraint("work_item_id", "request_id", name="uq_time_log_request"),)

    id = Column(Integer, primary_key=True, index=True)
    work_item_id = Column(String(36), ForeignKey("work_items.id"), nullable=False, index=True)
    hours = Column(Numeric(10, 2), nullable=False)
    description = Column(String(500), nullable=True)
    source = Column(String(20), default="manual", nullable=False)  # manual, timer
    request_id = Column(String(64), nullable=True)  # client-generated idempotency key

    created_at = Column(DateTime, server_default=func.now())

    work_item = relationship("WorkItem", back_populates="time_logs")
