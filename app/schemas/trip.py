# app/schemas/trip.py
from pydantic import BaseModel
from datetime import datetime
from typing import Optional
from app.models.enums import TripPurpose, TripStatus


class TripCreate(BaseModel):
    trip_name: str
    origin: Optional[str] = None
    destination: Optional[str] = None
    scheduled_start: Optional[datetime] = None
    trip_purpose: Optional[TripPurpose] = None
    booking_made_for_employee_id: Optional[str] = None
    guest_name: Optional[str] = None
    vehicle_id: Optional[str] = None
    chauffeur_id: Optional[str] = None


class DispatchRequest(BaseModel):
    chauffeur_id: str
    vehicle_id: str
    trip_purpose: TripPurpose
    booking_made_for_employee_id: Optional[str] = None


class DispatchResponse(BaseModel):
    """Inbound answer from the chauffeur's app."""
    chauffeur_id: Optional[str] = None
    reason: Optional[str] = None


class TripStatusUpdate(BaseModel):
    status: TripStatus


class TripOut(BaseModel):
    id: str
    trip_name: str
    origin: Optional[str]
    destination: Optional[str]
    scheduled_start: Optional[datetime]
    vehicle_id: Optional[str]
    chauffeur_id: Optional[str]
    status: str
    dispatch_status: Optional[str]
    trip_purpose: Optional[str]
    booking_made_for_employee_id: Optional[str]
    guest_name: Optional[str]
    offered_to_chauffeur_id: Optional[str]
    offered_vehicle_id: Optional[str]
    rejection_reason: Optional[str]

    class Config:
        from_attributes = True
