# app/models/notification.py
"""
System notifications shown in the operator's notification list.
Immutable once created apart from is_read.
"""

from sqlalchemy import Column, String, DateTime, Text, Boolean
from app.database import Base
from app.utils.ids import generate_id


class SystemNotification(Base):
    __tablename__ = "system_notifications"

    id = Column(String(32), primary_key=True, default=generate_id)
    type = Column(String(30), nullable=False, index=True)
    subject = Column(String(300), nullable=False)
    details = Column(Text)
    timestamp = Column(DateTime, nullable=False, index=True)
    is_read = Column(Boolean, default=False, nullable=False)
    related_trip_id = Column(String(32))
    related_chauffeur_id = Column(String(32))
    related_vehicle_id = Column(String(32))

    def __repr__(self):
        return f"<SystemNotification {self.id} type={self.type} read={self.is_read}>"
