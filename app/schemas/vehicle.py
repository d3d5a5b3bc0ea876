# app/schemas/vehicle.py
from pydantic import BaseModel, Field
from datetime import date, datetime
from typing import Optional
from app.models.enums import CarType, DocumentType, VehicleStatus


class DocumentIn(BaseModel):
    doc_type: DocumentType
    expiry_date: date
    number: Optional[str] = None
    vendor: Optional[str] = None
    start_date: Optional[date] = None


class DocumentOut(DocumentIn):
    id: int

    class Config:
        from_attributes = True


class VehicleCreate(BaseModel):
    license_plate: str
    vin: str
    make: Optional[str] = None
    model: Optional[str] = None
    year: Optional[int] = None
    status: VehicleStatus = VehicleStatus.ACTIVE
    mileage: int = 0
    car_type: Optional[CarType] = None
    assigned_employee_id: Optional[str] = None
    assigned_chauffeur_id: Optional[str] = None
    documents: list[DocumentIn] = Field(default_factory=list)


class VehicleUpdate(BaseModel):
    """
    Omitted or null fields are left unchanged. assigned_employee_id and
    assigned_chauffeur_id are the exceptions: an explicit null unassigns.
    """
    license_plate: Optional[str] = None
    vin: Optional[str] = None
    make: Optional[str] = None
    model: Optional[str] = None
    year: Optional[int] = None
    status: Optional[VehicleStatus] = None
    mileage: Optional[int] = None
    car_type: Optional[CarType] = None
    assigned_employee_id: Optional[str] = None
    assigned_chauffeur_id: Optional[str] = None
    documents: Optional[list[DocumentIn]] = None
    transfer_reason: Optional[str] = None


class StatusChangeOut(BaseModel):
    status: str
    changed_at: datetime

    class Config:
        from_attributes = True


class AssignmentOut(BaseModel):
    assigned_to_id: str
    assigned_to_name: str
    assignee_type: str
    start_date: datetime
    end_date: Optional[datetime]
    start_mileage: Optional[int]
    end_mileage: Optional[int]
    transfer_reason: Optional[str]

    class Config:
        from_attributes = True


class VehicleOut(BaseModel):
    id: str
    license_plate: str
    vin: str
    make: Optional[str]
    model: Optional[str]
    year: Optional[int]
    status: str
    mileage: int
    car_type: Optional[str]
    assigned_employee_id: Optional[str]
    assigned_chauffeur_id: Optional[str]
    documents: list[DocumentOut] = []
    status_history: list[StatusChangeOut] = []
    assignment_history: list[AssignmentOut] = []

    class Config:
        from_attributes = True
