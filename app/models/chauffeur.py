# app/models/chauffeur.py
"""
Chauffeurs table.
assigned_vehicle_id mirrors vehicles.assigned_chauffeur_id; the services keep
both sides in step.
"""

from datetime import datetime
from sqlalchemy import Column, String, Date, DateTime
from app.database import Base
from app.models.enums import ChauffeurOnboardingStatus
from app.utils.ids import generate_id


class Chauffeur(Base):
    __tablename__ = "chauffeurs"

    id = Column(String(32), primary_key=True, default=generate_id)
    name = Column(String(200), nullable=False)
    license_number = Column(String(50), nullable=False, index=True)
    contact = Column(String(50))
    email = Column(String(200))
    dl_expiry_date = Column(Date)
    assigned_vehicle_id = Column(String(32), index=True)
    onboarding_status = Column(String(30), nullable=False, default=ChauffeurOnboardingStatus.INVITED)
    chauffeur_type = Column(String(30))                 # M-Car Chauffeur | Pool Chauffeur
    reporting_manager_id = Column(String(32))           # users.id, M-Car chauffeurs only
    created_at = Column(DateTime, default=datetime.utcnow)

    def __repr__(self):
        return f"<Chauffeur {self.id} name={self.name} vehicle={self.assigned_vehicle_id}>"
