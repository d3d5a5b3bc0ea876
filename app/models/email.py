# app/models/email.py
"""
Simulated outbound emails. Nothing is delivered; the table stands in for an
SMTP/notification-service integration and is the de-duplication source for
the compliance notifier.
"""

from sqlalchemy import Column, String, DateTime, Text
from app.database import Base
from app.utils.ids import generate_id


class SimulatedEmail(Base):
    __tablename__ = "simulated_emails"

    id = Column(String(32), primary_key=True, default=generate_id)
    recipient = Column(Text, nullable=False)
    subject = Column(String(300), nullable=False, index=True)
    body = Column(Text, nullable=False)
    timestamp = Column(DateTime, nullable=False, index=True)
    vehicle_id = Column(String(32), index=True)
    alert_type = Column(String(50))

    def __repr__(self):
        return f"<SimulatedEmail {self.id} subject={self.subject!r}>"
