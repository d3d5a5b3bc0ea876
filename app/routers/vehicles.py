"""Vehicle onboarding, edits, removal and history."""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from app.database import get_db
from app.schemas.vehicle import AssignmentOut, StatusChangeOut, VehicleCreate, VehicleOut, VehicleUpdate
from app.services import vehicle_service

router = APIRouter()


@router.get("/vehicles", response_model=list[VehicleOut], summary="List vehicles")
def list_vehicles(status: str = None, assigned_employee_id: str = None, db: Session = Depends(get_db)):
    return vehicle_service.list_vehicles(db, status=status, assigned_employee_id=assigned_employee_id)


@router.post("/vehicles", response_model=VehicleOut, status_code=201, summary="Onboard a vehicle")
def onboard_vehicle(body: VehicleCreate, db: Session = Depends(get_db)):
    return vehicle_service.onboard_vehicle(db, body)


@router.get("/vehicles/{vehicle_id}", response_model=VehicleOut)
def get_vehicle(vehicle_id: str, db: Session = Depends(get_db)):
    return vehicle_service.get_vehicle(db, vehicle_id)


@router.put("/vehicles/{vehicle_id}", response_model=VehicleOut, summary="Update a vehicle")
def update_vehicle(vehicle_id: str, body: VehicleUpdate, db: Session = Depends(get_db)):
    """
    Reassigning to a different employee closes the current assignment at the
    given mileage. Moving a vehicle between two employees needs transfer_reason.
    """
    return vehicle_service.update_vehicle(db, vehicle_id, body)


@router.delete("/vehicles/{vehicle_id}", summary="Remove a vehicle")
def remove_vehicle(vehicle_id: str, db: Session = Depends(get_db)):
    vehicle_service.delete_vehicle(db, vehicle_id)
    return {"status": "removed", "id": vehicle_id}


@router.get("/vehicles/{vehicle_id}/assignments", response_model=list[AssignmentOut],
            summary="Assignment ledger for a vehicle")
def get_assignment_history(vehicle_id: str, db: Session = Depends(get_db)):
    return vehicle_service.get_vehicle(db, vehicle_id).assignment_history


@router.get("/vehicles/{vehicle_id}/status-history", response_model=list[StatusChangeOut])
def get_status_history(vehicle_id: str, db: Session = Depends(get_db)):
    return vehicle_service.get_vehicle(db, vehicle_id).status_history
