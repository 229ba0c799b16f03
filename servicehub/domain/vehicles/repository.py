"""Vehicle repository - Database operations for customer vehicles"""

from sqlalchemy.orm import Session

from ...models import Vehicle


class VehicleRepository:
    """Repository for vehicle database operations"""

    @staticmethod
    def list_for_customer(db: Session, customer_id: str) -> list[Vehicle]:
        return db.query(Vehicle).filter(Vehicle.customer_id == customer_id).order_by(Vehicle.id).all()

    @staticmethod
    def list_vehicles(db: Session) -> list[Vehicle]:
        return db.query(Vehicle).order_by(Vehicle.id).all()

    @staticmethod
    def create_vehicle(db: Session, **vehicle_data) -> Vehicle:
        vehicle = Vehicle(**vehicle_data)
        db.add(vehicle)
        db.commit()
        db.refresh(vehicle)
        return vehicle
