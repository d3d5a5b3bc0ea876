# app/models/vehicle_document.py
"""Vehicle compliance documents (RC, Insurance, PUC, Fitness, Permit)."""

from sqlalchemy import Column, Integer, String, Date, ForeignKey
from app.database import Base


class VehicleDocument(Base):
    __tablename__ = "vehicle_documents"

    id = Column(Integer, primary_key=True, autoincrement=True)
    vehicle_id = Column(String(32), ForeignKey("vehicles.id", ondelete="CASCADE"), nullable=False, index=True)
    doc_type = Column(String(50), nullable=False)
    number = Column(String(100))
    vendor = Column(String(200))
    start_date = Column(Date)
    expiry_date = Column(Date, nullable=False, index=True)

    def __repr__(self):
        return f"<VehicleDocument {self.doc_type} vehicle={self.vehicle_id} expires={self.expiry_date}>"
