# app/services/chauffeur_service.py
"""
Chauffeur onboarding and vehicle linking.

Onboarding: Invited → Awaiting Approval (chauffeur completed signup in the
app) → Approved (fleet manager action). Rejected is set by a manager instead
of approval.
"""

from typing import Optional
from sqlalchemy.orm import Session
from app.exceptions import NotFoundError, ValidationError
from app.models.chauffeur import Chauffeur
from app.models.enums import ChauffeurOnboardingStatus, NotificationType
from app.models.vehicle import Vehicle
from app.schemas.chauffeur import ChauffeurCreate, ChauffeurUpdate
from app.services.assignment_ledger import link_chauffeur, release_chauffeur
from app.services.notification_service import create_notification
from app.utils.logger import get_logger

logger = get_logger(__name__)


def get_chauffeur(db: Session, chauffeur_id: str) -> Chauffeur:
    chauffeur = db.query(Chauffeur).filter(Chauffeur.id == chauffeur_id).first()
    if chauffeur is None:
        raise NotFoundError("Chauffeur", chauffeur_id)
    return chauffeur


def list_chauffeurs(db: Session, onboarding_status: Optional[str] = None):
    q = db.query(Chauffeur)
    if onboarding_status:
        q = q.filter(Chauffeur.onboarding_status == onboarding_status)
    return q.order_by(Chauffeur.created_at.desc()).all()


def _assign_vehicle(db: Session, chauffeur: Chauffeur, vehicle_id: Optional[str]) -> None:
    if vehicle_id is None:
        release_chauffeur(db, chauffeur)
        return
    vehicle = db.query(Vehicle).filter(Vehicle.id == vehicle_id).first()
    if vehicle is None:
        raise NotFoundError("Vehicle", vehicle_id)
    link_chauffeur(db, vehicle, chauffeur.id)


def invite_chauffeur(db: Session, data: ChauffeurCreate) -> Chauffeur:
    """Create a chauffeur in Invited state and announce the invitation."""
    chauffeur = Chauffeur(
        name=data.name,
        license_number=data.license_number,
        contact=data.contact,
        email=data.email,
        dl_expiry_date=data.dl_expiry_date,
        chauffeur_type=data.chauffeur_type,
        reporting_manager_id=data.reporting_manager_id,
        onboarding_status=ChauffeurOnboardingStatus.INVITED,
    )
    try:
        db.add(chauffeur)
        db.flush()
        if data.assigned_vehicle_id:
            _assign_vehicle(db, chauffeur, data.assigned_vehicle_id)
        create_notification(
            db, NotificationType.GENERIC_ALERT,
            f"Chauffeur Invited: {chauffeur.name}",
            f"An invitation has been sent to {chauffeur.name} ({chauffeur.contact or chauffeur.email or 'no contact'}). "
            f"They need to download the app and sign up.",
            chauffeur_id=chauffeur.id,
        )
        db.commit()
    except Exception:
        db.rollback()
        raise
    db.refresh(chauffeur)
    logger.info(f"[ONBOARDING] Invited chauffeur {chauffeur.name} ({chauffeur.id})")
    return chauffeur


def mark_awaiting_approval(db: Session, chauffeur_id: str) -> Chauffeur:
    """The chauffeur finished signing up; a manager now has to approve them."""
    chauffeur = get_chauffeur(db, chauffeur_id)
    if chauffeur.onboarding_status != ChauffeurOnboardingStatus.INVITED:
        logger.info(f"[ONBOARDING] {chauffeur.name} already {chauffeur.onboarding_status} — signup ignored")
        return chauffeur
    chauffeur.onboarding_status = ChauffeurOnboardingStatus.AWAITING_APPROVAL
    create_notification(
        db, NotificationType.CHAUFFEUR_ONBOARD,
        f"Approval Needed: {chauffeur.name}",
        f"{chauffeur.name} has completed the signup process and is awaiting your approval to join the fleet.",
        chauffeur_id=chauffeur.id,
    )
    db.commit()
    return chauffeur


def approve_chauffeur(db: Session, chauffeur_id: str) -> Chauffeur:
    chauffeur = get_chauffeur(db, chauffeur_id)
    if chauffeur.onboarding_status == ChauffeurOnboardingStatus.REJECTED:
        raise ValidationError(f"Chauffeur {chauffeur.name} was rejected and cannot be approved")
    chauffeur.onboarding_status = ChauffeurOnboardingStatus.APPROVED
    create_notification(
        db, NotificationType.CHAUFFEUR_ONBOARD,
        f"Chauffeur Approved: {chauffeur.name}",
        f"{chauffeur.name} has been approved and is now an active chauffeur in the fleet.",
        chauffeur_id=chauffeur.id,
    )
    db.commit()
    logger.info(f"[ONBOARDING] Approved {chauffeur.name}")
    return chauffeur


def reject_chauffeur(db: Session, chauffeur_id: str) -> Chauffeur:
    chauffeur = get_chauffeur(db, chauffeur_id)
    chauffeur.onboarding_status = ChauffeurOnboardingStatus.REJECTED
    db.commit()
    logger.info(f"[ONBOARDING] Rejected {chauffeur.name}")
    return chauffeur


def update_chauffeur(db: Session, chauffeur_id: str, changes: ChauffeurUpdate) -> Chauffeur:
    """Edit chauffeur details; a changed assigned_vehicle_id re-links both sides."""
    chauffeur = get_chauffeur(db, chauffeur_id)
    data = changes.model_dump(exclude_unset=True)
    new_vehicle_id = data.pop("assigned_vehicle_id", chauffeur.assigned_vehicle_id)
    try:
        for name, value in data.items():
            setattr(chauffeur, name, value)
        if new_vehicle_id != chauffeur.assigned_vehicle_id:
            _assign_vehicle(db, chauffeur, new_vehicle_id)
        db.commit()
    except Exception:
        db.rollback()
        raise
    db.refresh(chauffeur)
    return chauffeur


def delete_chauffeur(db: Session, chauffeur_id: str) -> None:
    """Remove a chauffeur and clear the vehicle that pointed at them."""
    chauffeur = get_chauffeur(db, chauffeur_id)
    release_chauffeur(db, chauffeur)
    db.delete(chauffeur)
    db.commit()
    logger.info(f"[ONBOARDING] Removed chauffeur {chauffeur.name} ({chauffeur_id})")
