# app/schemas/notification.py
from pydantic import BaseModel
from datetime import datetime
from typing import Optional


class NotificationOut(BaseModel):
    id: str
    type: str
    subject: str
    details: Optional[str]
    timestamp: datetime
    is_read: bool
    related_trip_id: Optional[str]
    related_chauffeur_id: Optional[str]
    related_vehicle_id: Optional[str]

    class Config:
        from_attributes = True


class EmailOut(BaseModel):
    id: str
    recipient: str
    subject: str
    body: str
    timestamp: datetime
    vehicle_id: Optional[str]
    alert_type: Optional[str]

    class Config:
        from_attributes = True
