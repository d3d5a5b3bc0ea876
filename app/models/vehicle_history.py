# app/models/vehicle_history.py
"""
Append-only vehicle history tables.

VehicleStatusChange: one row per status the vehicle has been in, earliest first.
VehicleAssignment:   the assignment ledger. A row with end_date NULL is the
                     open assignment; at most one exists per vehicle.
"""

from sqlalchemy import Column, Integer, String, DateTime, Text, ForeignKey
from app.database import Base
from app.models.enums import AssigneeType


class VehicleStatusChange(Base):
    __tablename__ = "vehicle_status_history"

    id = Column(Integer, primary_key=True, autoincrement=True)
    vehicle_id = Column(String(32), ForeignKey("vehicles.id", ondelete="CASCADE"), nullable=False, index=True)
    status = Column(String(20), nullable=False)
    changed_at = Column(DateTime, nullable=False)

    def __repr__(self):
        return f"<VehicleStatusChange vehicle={self.vehicle_id} {self.status} @ {self.changed_at}>"


class VehicleAssignment(Base):
    __tablename__ = "vehicle_assignments"

    id = Column(Integer, primary_key=True, autoincrement=True)
    vehicle_id = Column(String(32), ForeignKey("vehicles.id", ondelete="CASCADE"), nullable=False, index=True)
    assigned_to_id = Column(String(32), nullable=False, index=True)
    assigned_to_name = Column(String(200), nullable=False)
    assignee_type = Column(String(20), nullable=False, default=AssigneeType.EMPLOYEE)
    start_date = Column(DateTime, nullable=False)
    end_date = Column(DateTime)                  # NULL = open assignment
    start_mileage = Column(Integer)
    end_mileage = Column(Integer)                # set when the assignment is closed
    transfer_reason = Column(Text)

    @property
    def is_open(self) -> bool:
        return self.end_date is None

    def __repr__(self):
        return (f"<VehicleAssignment vehicle={self.vehicle_id} to={self.assigned_to_id} "
                f"open={self.is_open}>")
