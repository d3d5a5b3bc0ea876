# app/models/vehicle.py
"""
Fleet vehicles table.
Each vehicle owns its documents, an append-only status history and an
append-only assignment ledger (see vehicle_history.py).
"""

from datetime import datetime
from sqlalchemy import Column, Integer, String, DateTime
from sqlalchemy.orm import relationship
from app.database import Base
from app.models.enums import VehicleStatus
from app.utils.ids import generate_id


class Vehicle(Base):
    __tablename__ = "vehicles"

    id = Column(String(32), primary_key=True, default=generate_id)
    license_plate = Column(String(50), unique=True, nullable=False, index=True)
    vin = Column(String(50), nullable=False)
    make = Column(String(100))
    model = Column(String(100))
    year = Column(Integer)
    status = Column(String(20), nullable=False, default=VehicleStatus.ACTIVE, index=True)
    mileage = Column(Integer, nullable=False, default=0)     # odometer, km
    car_type = Column(String(20))                            # M-Car | Pool Cars | Test Cars
    assigned_employee_id = Column(String(32), index=True)    # users.id (nullable)
    assigned_chauffeur_id = Column(String(32), index=True)   # chauffeurs.id (nullable)
    created_at = Column(DateTime, default=datetime.utcnow)

    documents = relationship(
        "VehicleDocument", cascade="all, delete-orphan",
        order_by="VehicleDocument.id",
    )
    status_history = relationship(
        "VehicleStatusChange", cascade="all, delete-orphan",
        order_by="VehicleStatusChange.id",
    )
    assignment_history = relationship(
        "VehicleAssignment", cascade="all, delete-orphan",
        order_by="VehicleAssignment.id",
    )

    @property
    def open_assignment(self):
        """The assignment entry currently in effect, if any."""
        for entry in reversed(self.assignment_history):
            if entry.end_date is None:
                return entry
        return None

    def current_document(self, doc_type):
        """Latest document of the given type; later rows supersede earlier ones."""
        for doc in reversed(self.documents):
            if doc.doc_type == doc_type:
                return doc
        return None

    def __repr__(self):
        return f"<Vehicle {self.license_plate} status={self.status} km={self.mileage}>"
