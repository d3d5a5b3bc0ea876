# app/schemas/policy.py
from pydantic import BaseModel
from datetime import datetime
from typing import Optional


class AssignmentUsageOut(BaseModel):
    vehicle_id: str
    license_plate: str
    start_date: datetime
    end_date: Optional[datetime]
    start_mileage: Optional[int]
    end_mileage: Optional[int]
    km_driven: int
    transfer_reason: Optional[str]

    class Config:
        from_attributes = True


class PolicyOut(BaseModel):
    employee_id: str
    total_km_driven: int
    months_elapsed: int
    policy_start_date: Optional[datetime]
    status: str
    km_percentage: float
    time_percentage: float
    assignments: list[AssignmentUsageOut]

    class Config:
        from_attributes = True
