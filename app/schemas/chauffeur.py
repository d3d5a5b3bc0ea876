# app/schemas/chauffeur.py
from pydantic import BaseModel
from datetime import date
from typing import Optional
from app.models.enums import ChauffeurType


class ChauffeurCreate(BaseModel):
    name: str
    license_number: str
    contact: Optional[str] = None
    email: Optional[str] = None
    dl_expiry_date: Optional[date] = None
    chauffeur_type: Optional[ChauffeurType] = None
    reporting_manager_id: Optional[str] = None
    assigned_vehicle_id: Optional[str] = None


class ChauffeurUpdate(BaseModel):
    name: Optional[str] = None
    license_number: Optional[str] = None
    contact: Optional[str] = None
    email: Optional[str] = None
    dl_expiry_date: Optional[date] = None
    chauffeur_type: Optional[ChauffeurType] = None
    reporting_manager_id: Optional[str] = None
    assigned_vehicle_id: Optional[str] = None


class ChauffeurOut(BaseModel):
    id: str
    name: str
    license_number: str
    contact: Optional[str]
    email: Optional[str]
    dl_expiry_date: Optional[date]
    assigned_vehicle_id: Optional[str]
    onboarding_status: str
    chauffeur_type: Optional[str]
    reporting_manager_id: Optional[str]

    class Config:
        from_attributes = True
