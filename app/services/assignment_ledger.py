# app/services/assignment_ledger.py
"""
Assignment Ledger: history bookkeeping that runs whenever a vehicle changes hands.

Rules:
  - At most one open (end_date NULL) assignment per vehicle.
  - Changing the assigned employee closes the open entry at the current
    odometer reading and opens a new one for the new assignee.
  - Every status change appends to the status history.
  - vehicle.assigned_chauffeur_id and chauffeur.assigned_vehicle_id always
    agree; link_chauffeur() writes both sides in the same session.

reassign_vehicle() and record_status_change() only touch the vehicle object,
so they work on detached vehicles as well as session-bound ones.
"""

from datetime import datetime
from typing import Optional
from sqlalchemy.orm import Session
from app.exceptions import NotFoundError
from app.models.chauffeur import Chauffeur
from app.models.enums import AssigneeType
from app.models.vehicle import Vehicle
from app.models.vehicle_history import VehicleAssignment, VehicleStatusChange
from app.utils.logger import get_logger

logger = get_logger(__name__)

UNKNOWN_ASSIGNEE = "Unknown"


def is_transfer(old_employee_id: Optional[str], new_employee_id: Optional[str]) -> bool:
    """A transfer moves a vehicle directly from one employee to another."""
    return bool(old_employee_id) and bool(new_employee_id) and old_employee_id != new_employee_id


def reassign_vehicle(vehicle: Vehicle, new_assigned_employee_id: Optional[str],
                     current_mileage: Optional[int], transfer_reason: Optional[str] = None,
                     assignee_name: Optional[str] = None,
                     now: Optional[datetime] = None) -> Vehicle:
    """
    Move the vehicle to a new employee (or to nobody) and record it in the ledger.
    Assigning the current assignee again leaves the history untouched.
    A missing transfer reason is recorded as-is; callers decide whether to
    require one.
    """
    if new_assigned_employee_id == vehicle.assigned_employee_id:
        return vehicle

    now = now or datetime.utcnow()
    for entry in vehicle.assignment_history:
        if entry.end_date is None:
            entry.end_date = now
            entry.end_mileage = current_mileage

    if new_assigned_employee_id:
        vehicle.assignment_history.append(VehicleAssignment(
            assigned_to_id=new_assigned_employee_id,
            assigned_to_name=assignee_name or UNKNOWN_ASSIGNEE,
            assignee_type=AssigneeType.EMPLOYEE,
            start_date=now,
            end_date=None,
            start_mileage=current_mileage,
            end_mileage=None,
            transfer_reason=transfer_reason,
        ))

    logger.info(
        f"[LEDGER] {vehicle.license_plate}: {vehicle.assigned_employee_id or '-'} → "
        f"{new_assigned_employee_id or '-'} at {current_mileage} km"
        + (f" ({transfer_reason})" if transfer_reason else "")
    )
    vehicle.assigned_employee_id = new_assigned_employee_id
    return vehicle


def record_status_change(vehicle: Vehicle, new_status, now: Optional[datetime] = None) -> bool:
    """Set the status, appending to the status history when it actually changes."""
    if new_status == vehicle.status and vehicle.status_history:
        return False
    vehicle.status = new_status
    vehicle.status_history.append(VehicleStatusChange(status=new_status, changed_at=now or datetime.utcnow()))
    return True


def seed_vehicle_history(vehicle: Vehicle, assignee_name: Optional[str] = None,
                         now: Optional[datetime] = None) -> Vehicle:
    """Initial history for a freshly onboarded vehicle."""
    now = now or datetime.utcnow()
    vehicle.status_history.append(VehicleStatusChange(status=vehicle.status, changed_at=now))
    if vehicle.assigned_employee_id:
        vehicle.assignment_history.append(VehicleAssignment(
            assigned_to_id=vehicle.assigned_employee_id,
            assigned_to_name=assignee_name or UNKNOWN_ASSIGNEE,
            assignee_type=AssigneeType.EMPLOYEE,
            start_date=now,
            end_date=None,
            start_mileage=vehicle.mileage or 0,
            end_mileage=None,
        ))
    return vehicle


def link_chauffeur(db: Session, vehicle: Vehicle, chauffeur_id: Optional[str]) -> Optional[Chauffeur]:
    """
    Point the vehicle at chauffeur_id (or at nobody) and repair every back-reference:
    chauffeurs that held this vehicle are released, vehicles that held the
    chauffeur are released. Raises NotFoundError before touching anything when
    the chauffeur does not exist. Does not commit.
    """
    chauffeur = None
    if chauffeur_id is not None:
        chauffeur = db.query(Chauffeur).filter(Chauffeur.id == chauffeur_id).first()
        if chauffeur is None:
            raise NotFoundError("Chauffeur", chauffeur_id)

    db.flush()
    for holder in db.query(Chauffeur).filter(Chauffeur.assigned_vehicle_id == vehicle.id).all():
        if chauffeur is None or holder.id != chauffeur.id:
            holder.assigned_vehicle_id = None

    if chauffeur is not None:
        previous = (
            db.query(Vehicle)
            .filter(Vehicle.assigned_chauffeur_id == chauffeur.id, Vehicle.id != vehicle.id)
            .all()
        )
        for other in previous:
            other.assigned_chauffeur_id = None
        chauffeur.assigned_vehicle_id = vehicle.id

    vehicle.assigned_chauffeur_id = chauffeur.id if chauffeur else None
    logger.info(f"[LEDGER] {vehicle.license_plate}: chauffeur → {vehicle.assigned_chauffeur_id or '-'}")
    return chauffeur


def release_chauffeur(db: Session, chauffeur: Chauffeur) -> None:
    """Detach a chauffeur from whichever vehicle it drives, on both sides. Does not commit."""
    db.flush()
    for vehicle in db.query(Vehicle).filter(Vehicle.assigned_chauffeur_id == chauffeur.id).all():
        vehicle.assigned_chauffeur_id = None
    chauffeur.assigned_vehicle_id = None
