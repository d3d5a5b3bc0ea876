# app/models/trip.py
"""
Trips table.
dispatch_status is only set for dispatchable (pool) trips and follows
Pending → Awaiting Acceptance → Accepted | Rejected; Rejected trips can be
dispatched again.
"""

from datetime import datetime
from sqlalchemy import Column, String, DateTime, Text
from app.database import Base
from app.models.enums import TripStatus
from app.utils.ids import generate_id


class Trip(Base):
    __tablename__ = "trips"

    id = Column(String(32), primary_key=True, default=generate_id)
    trip_name = Column(String(200), nullable=False)
    origin = Column(String(300))
    destination = Column(String(300))
    scheduled_start = Column(DateTime)
    vehicle_id = Column(String(32), index=True)
    chauffeur_id = Column(String(32), index=True)
    status = Column(String(20), nullable=False, default=TripStatus.PLANNED, index=True)
    dispatch_status = Column(String(30), index=True)
    trip_purpose = Column(String(30))
    booking_made_for_employee_id = Column(String(32))
    guest_name = Column(String(200))
    offered_to_chauffeur_id = Column(String(32))
    offered_vehicle_id = Column(String(32))
    rejection_reason = Column(Text)
    created_at = Column(DateTime, default=datetime.utcnow)

    def __repr__(self):
        return f"<Trip {self.id} status={self.status} dispatch={self.dispatch_status}>"
