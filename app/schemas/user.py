# app/schemas/user.py
from pydantic import BaseModel
from datetime import datetime
from typing import Optional
from app.models.enums import UserRole


class UserCreate(BaseModel):
    name: str
    email: str
    role: UserRole = UserRole.EMPLOYEE
    emp_id: Optional[str] = None
    department: Optional[str] = None


class EmployeeOnboard(BaseModel):
    name: str
    email: str
    emp_id: Optional[str] = None
    department: Optional[str] = None
    vehicle_id: Optional[str] = None
    chauffeur_id: Optional[str] = None
    transfer_reason: Optional[str] = None


class UserOut(BaseModel):
    id: str
    name: str
    email: str
    role: str
    status: str
    emp_id: Optional[str]
    department: Optional[str]
    created_at: Optional[datetime]

    class Config:
        from_attributes = True
