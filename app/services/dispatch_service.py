# app/services/dispatch_service.py
"""
Trip Dispatch Workflow.

dispatch_status:  Pending ──dispatch──▶ Awaiting Acceptance ──accept──▶ Accepted
                     ▲                         │
                     └──── re-dispatch ◀── Rejected ◀──reject──┘

Accept/reject are inbound commands from the chauffeur's side (the app, or
the demo simulator in response_simulator.py). Each one resolves an offer
exactly once: a second answer to the same offer raises DispatchStateError.
Re-dispatching an offer that is still awaiting an answer withdraws it, so an
offer to a chauffeur who left or never answers can be handed to someone else.
On acceptance the trip, the chauffeur and the vehicle are updated together.
"""

from typing import Optional
from sqlalchemy.orm import Session
from app.exceptions import DispatchStateError, NotFoundError
from app.models.chauffeur import Chauffeur
from app.models.enums import (
    NotificationType, TERMINAL_TRIP_STATUSES, TripDispatchStatus, TripPurpose, TripStatus,
)
from app.models.trip import Trip
from app.models.vehicle import Vehicle
from app.schemas.trip import TripCreate
from app.services.assignment_ledger import link_chauffeur
from app.services.notification_service import create_notification
from app.utils.logger import get_logger

logger = get_logger(__name__)

DEFAULT_REJECTION_REASON = "Scheduling conflict with another appointment."
DISPATCHABLE_STATES = (
    None, TripDispatchStatus.PENDING, TripDispatchStatus.AWAITING_ACCEPTANCE, TripDispatchStatus.REJECTED,
)


def get_trip(db: Session, trip_id: str) -> Trip:
    trip = db.query(Trip).filter(Trip.id == trip_id).first()
    if trip is None:
        raise NotFoundError("Trip", trip_id)
    return trip


def list_trips(db: Session, status: Optional[str] = None, dispatch_status: Optional[str] = None,
               limit: int = 100):
    q = db.query(Trip)
    if status:
        q = q.filter(Trip.status == status)
    if dispatch_status:
        q = q.filter(Trip.dispatch_status == dispatch_status)
    return q.order_by(Trip.created_at.desc()).limit(limit).all()


def create_trip(db: Session, data: TripCreate) -> Trip:
    """New trips start Planned; pool requests also start Pending Dispatch."""
    trip = Trip(
        trip_name=data.trip_name,
        origin=data.origin,
        destination=data.destination,
        scheduled_start=data.scheduled_start,
        trip_purpose=data.trip_purpose,
        booking_made_for_employee_id=data.booking_made_for_employee_id,
        guest_name=data.guest_name,
        vehicle_id=data.vehicle_id,
        chauffeur_id=data.chauffeur_id,
        status=TripStatus.PLANNED,
        dispatch_status=TripDispatchStatus.PENDING if data.trip_purpose == TripPurpose.POOL else None,
    )
    db.add(trip)
    db.commit()
    db.refresh(trip)
    logger.info(f"[DISPATCH] Created trip {trip.trip_name} ({trip.id}) dispatch={trip.dispatch_status}")
    return trip


def dispatch_trip_to_chauffeur(db: Session, trip_id: str, chauffeur_id: str, vehicle_id: str,
                               trip_purpose, booking_made_for_employee_id: Optional[str] = None) -> Trip:
    """
    Offer a trip to a chauffeur/vehicle pair. The trip then awaits the chauffeur's answer.
    An offer still awaiting an answer is withdrawn and replaced; accepted and
    finished trips are refused.
    """
    trip = get_trip(db, trip_id)
    chauffeur = db.query(Chauffeur).filter(Chauffeur.id == chauffeur_id).first()
    if chauffeur is None:
        raise NotFoundError("Chauffeur", chauffeur_id)
    vehicle = db.query(Vehicle).filter(Vehicle.id == vehicle_id).first()
    if vehicle is None:
        raise NotFoundError("Vehicle", vehicle_id)

    if trip.status in TERMINAL_TRIP_STATUSES:
        raise DispatchStateError(f"Trip {trip.id} is {trip.status} and cannot be dispatched")
    if trip.dispatch_status not in DISPATCHABLE_STATES:
        raise DispatchStateError(f"Trip {trip.id} is already {trip.dispatch_status}")
    if trip.dispatch_status == TripDispatchStatus.AWAITING_ACCEPTANCE:
        logger.info(f"[DISPATCH] Trip {trip.id}: withdrawing offer to {trip.offered_to_chauffeur_id}")

    trip.dispatch_status = TripDispatchStatus.AWAITING_ACCEPTANCE
    trip.offered_to_chauffeur_id = chauffeur.id
    trip.offered_vehicle_id = vehicle.id
    trip.rejection_reason = None
    trip.trip_purpose = trip_purpose
    trip.booking_made_for_employee_id = booking_made_for_employee_id

    create_notification(
        db, NotificationType.TRIP_DISPATCH,
        f"Trip offered to {chauffeur.name}",
        f'A new trip "{trip.trip_name}" from {trip.origin} to {trip.destination} with vehicle '
        f"{vehicle.license_plate} has been offered to {chauffeur.name}. Awaiting response.",
        trip_id=trip.id, chauffeur_id=chauffeur.id, vehicle_id=vehicle.id,
    )
    db.commit()
    logger.info(f"[DISPATCH] Trip {trip.id} offered to {chauffeur.id} with {vehicle.license_plate}")
    return trip


def _open_offer(db: Session, trip_id: str, chauffeur_id: Optional[str]) -> Trip:
    trip = get_trip(db, trip_id)
    if trip.status in TERMINAL_TRIP_STATUSES:
        raise DispatchStateError(f"Trip {trip.id} is {trip.status}; the offer is void")
    if trip.dispatch_status != TripDispatchStatus.AWAITING_ACCEPTANCE:
        raise DispatchStateError(f"Trip {trip.id} is not awaiting acceptance ({trip.dispatch_status})")
    if chauffeur_id is not None and chauffeur_id != trip.offered_to_chauffeur_id:
        raise DispatchStateError(f"Trip {trip.id} is not offered to chauffeur {chauffeur_id}")
    return trip


def accept_dispatch(db: Session, trip_id: str, chauffeur_id: Optional[str] = None) -> Trip:
    """The offered chauffeur takes the trip: trip, chauffeur and vehicle are bound together."""
    trip = _open_offer(db, trip_id, chauffeur_id)
    chauffeur = db.query(Chauffeur).filter(Chauffeur.id == trip.offered_to_chauffeur_id).first()
    if chauffeur is None:
        raise NotFoundError("Chauffeur", trip.offered_to_chauffeur_id)
    vehicle = db.query(Vehicle).filter(Vehicle.id == trip.offered_vehicle_id).first()
    if vehicle is None:
        raise NotFoundError("Vehicle", trip.offered_vehicle_id)

    try:
        trip.status = TripStatus.PLANNED
        trip.dispatch_status = TripDispatchStatus.ACCEPTED
        trip.chauffeur_id = chauffeur.id
        trip.vehicle_id = vehicle.id
        trip.offered_to_chauffeur_id = None
        trip.offered_vehicle_id = None
        link_chauffeur(db, vehicle, chauffeur.id)

        create_notification(
            db, NotificationType.TRIP_ACCEPTED,
            f"Trip Accepted: {chauffeur.name}",
            f'Chauffeur {chauffeur.name} has accepted trip "{trip.trip_name}".',
            trip_id=trip.id, chauffeur_id=chauffeur.id, vehicle_id=vehicle.id,
        )
        db.commit()
    except Exception:
        db.rollback()
        raise
    logger.info(f"[DISPATCH] Trip {trip.id} accepted by {chauffeur.id}")
    return trip


def reject_dispatch(db: Session, trip_id: str, reason: Optional[str] = None,
                    chauffeur_id: Optional[str] = None) -> Trip:
    """The offered chauffeur declines; the trip can be dispatched again."""
    trip = _open_offer(db, trip_id, chauffeur_id)
    offered_to = trip.offered_to_chauffeur_id
    chauffeur = db.query(Chauffeur).filter(Chauffeur.id == offered_to).first()
    name = chauffeur.name if chauffeur else offered_to
    reason = reason or DEFAULT_REJECTION_REASON

    trip.dispatch_status = TripDispatchStatus.REJECTED
    trip.offered_to_chauffeur_id = None
    trip.offered_vehicle_id = None
    trip.rejection_reason = reason

    create_notification(
        db, NotificationType.TRIP_REJECTED,
        f"Trip Rejected: {name}",
        f'Chauffeur {name} rejected trip "{trip.trip_name}". Reason: {reason}',
        trip_id=trip.id, chauffeur_id=offered_to,
    )
    db.commit()
    logger.info(f"[DISPATCH] Trip {trip.id} rejected by {offered_to}: {reason}")
    return trip


def update_trip_status(db: Session, trip_id: str, status) -> Trip:
    """Move a trip through Planned / Ongoing / Delayed / Completed / Cancelled. Terminal states stick."""
    trip = get_trip(db, trip_id)
    if trip.status in TERMINAL_TRIP_STATUSES and status != trip.status:
        raise DispatchStateError(f"Trip {trip.id} is {trip.status} and cannot become {status}")
    trip.status = status
    db.commit()
    logger.info(f"[DISPATCH] Trip {trip.id} → {status}")
    return trip


def cancel_trip(db: Session, trip_id: str) -> Trip:
    return update_trip_status(db, trip_id, TripStatus.CANCELLED)
