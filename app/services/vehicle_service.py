# app/services/vehicle_service.py
"""
Vehicle onboarding, update and removal.
Every write runs the assignment ledger rules and keeps the vehicle ↔ chauffeur
link consistent; the whole operation is committed once or rolled back.
"""

from datetime import datetime
from typing import Optional
from sqlalchemy.orm import Session
from app.config import settings
from app.exceptions import NotFoundError, ValidationError
from app.models.chauffeur import Chauffeur
from app.models.email import SimulatedEmail
from app.models.enums import RENEWAL_TRACKED_DOCUMENTS
from app.models.user import User
from app.models.vehicle import Vehicle
from app.models.vehicle_document import VehicleDocument
from app.schemas.vehicle import VehicleCreate, VehicleUpdate
from app.services.assignment_ledger import (
    is_transfer, link_chauffeur, reassign_vehicle, record_status_change, seed_vehicle_history,
)
from app.services.compliance_service import document_update_emails
from app.services.notification_service import record_emails
from app.utils.logger import get_logger

logger = get_logger(__name__)

_SIMPLE_FIELDS = ("license_plate", "vin", "make", "model", "year", "mileage", "car_type")


def get_vehicle(db: Session, vehicle_id: str) -> Vehicle:
    vehicle = db.query(Vehicle).filter(Vehicle.id == vehicle_id).first()
    if vehicle is None:
        raise NotFoundError("Vehicle", vehicle_id)
    return vehicle


def lookup_vehicle_by_plate(db: Session, license_plate: str) -> Optional[Vehicle]:
    """Find a vehicle by license plate. Returns None if not found."""
    return db.query(Vehicle).filter(Vehicle.license_plate == license_plate).first()


def list_vehicles(db: Session, status: Optional[str] = None, assigned_employee_id: Optional[str] = None):
    q = db.query(Vehicle)
    if status:
        q = q.filter(Vehicle.status == status)
    if assigned_employee_id:
        q = q.filter(Vehicle.assigned_employee_id == assigned_employee_id)
    return q.order_by(Vehicle.created_at.desc()).all()


def _require_employee(db: Session, employee_id: Optional[str]) -> Optional[User]:
    if not employee_id:
        return None
    user = db.query(User).filter(User.id == employee_id).first()
    if user is None:
        raise NotFoundError("Employee", employee_id)
    return user


def _document(doc) -> VehicleDocument:
    return VehicleDocument(doc_type=doc.doc_type, number=doc.number, vendor=doc.vendor,
                           start_date=doc.start_date, expiry_date=doc.expiry_date)


def onboard_vehicle(db: Session, data: VehicleCreate, now: Optional[datetime] = None) -> Vehicle:
    """Register a new vehicle with its initial status and assignment history."""
    if lookup_vehicle_by_plate(db, data.license_plate):
        raise ValidationError(f"Plate {data.license_plate} already registered")
    employee = _require_employee(db, data.assigned_employee_id)

    vehicle = Vehicle(
        license_plate=data.license_plate,
        vin=data.vin,
        make=data.make,
        model=data.model,
        year=data.year,
        status=data.status,
        mileage=data.mileage,
        car_type=data.car_type,
        assigned_employee_id=data.assigned_employee_id,
        documents=[_document(d) for d in data.documents],
    )
    try:
        seed_vehicle_history(vehicle, employee.name if employee else None, now=now)
        db.add(vehicle)
        if data.assigned_chauffeur_id:
            link_chauffeur(db, vehicle, data.assigned_chauffeur_id)
        db.commit()
    except Exception:
        db.rollback()
        raise

    db.refresh(vehicle)
    logger.info(f"[LEDGER] Onboarded {vehicle.license_plate} ({vehicle.id})")
    return vehicle


def update_vehicle(db: Session, vehicle_id: str, changes: VehicleUpdate,
                   transfer_reason: Optional[str] = None, now: Optional[datetime] = None) -> Vehicle:
    """
    Apply an edit to a vehicle. Runs, in one transaction:
      - assignment ledger (close/open entries when the employee changes)
      - status history
      - chauffeur dual link
      - document-change confirmation / urgent emails
    """
    now = now or datetime.utcnow()
    vehicle = get_vehicle(db, vehicle_id)
    data = changes.model_dump(exclude_unset=True)
    body_reason = data.pop("transfer_reason", None)
    transfer_reason = transfer_reason or body_reason

    new_employee_id = data.get("assigned_employee_id", vehicle.assigned_employee_id)
    if (settings.REQUIRE_TRANSFER_REASON and is_transfer(vehicle.assigned_employee_id, new_employee_id)
            and not (transfer_reason or "").strip()):
        raise ValidationError("A transfer reason is required when moving a vehicle between employees")
    employee = _require_employee(db, new_employee_id) if new_employee_id != vehicle.assigned_employee_id else None
    if "assigned_chauffeur_id" in data and data["assigned_chauffeur_id"] is not None:
        if db.query(Chauffeur).filter(Chauffeur.id == data["assigned_chauffeur_id"]).first() is None:
            raise NotFoundError("Chauffeur", data["assigned_chauffeur_id"])

    previous_expiries = {
        doc_type: doc.expiry_date
        for doc_type in RENEWAL_TRACKED_DOCUMENTS
        if (doc := vehicle.current_document(doc_type)) is not None
    }

    try:
        for name in _SIMPLE_FIELDS:
            if name in data and data[name] is not None:
                setattr(vehicle, name, data[name])

        reassign_vehicle(vehicle, new_employee_id, vehicle.mileage, transfer_reason,
                         assignee_name=employee.name if employee else None, now=now)

        if data.get("status") is not None:
            record_status_change(vehicle, data["status"], now=now)

        documents_changed = data.get("documents") is not None
        if documents_changed:
            vehicle.documents = [_document(d) for d in changes.documents]

        if "assigned_chauffeur_id" in data and data["assigned_chauffeur_id"] != vehicle.assigned_chauffeur_id:
            link_chauffeur(db, vehicle, data["assigned_chauffeur_id"])

        if documents_changed:
            emails = document_update_emails(
                previous_expiries, vehicle, db.query(User).all(),
                db.query(SimulatedEmail).filter(SimulatedEmail.vehicle_id == vehicle.id).all(),
                now=now,
            )
            record_emails(db, emails)

        db.commit()
    except Exception:
        db.rollback()
        raise

    db.refresh(vehicle)
    return vehicle


def delete_vehicle(db: Session, vehicle_id: str) -> None:
    """Remove a vehicle and release any chauffeur still pointing at it."""
    vehicle = get_vehicle(db, vehicle_id)
    for chauffeur in db.query(Chauffeur).filter(Chauffeur.assigned_vehicle_id == vehicle_id).all():
        chauffeur.assigned_vehicle_id = None
    db.delete(vehicle)
    db.commit()
    logger.info(f"[LEDGER] Removed vehicle {vehicle.license_plate} ({vehicle_id})")
