"""Trips and the dispatch handshake."""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from app.database import get_db
from app.schemas.trip import DispatchRequest, DispatchResponse, TripCreate, TripOut, TripStatusUpdate
from app.services import dispatch_service
from app.services.response_simulator import cancel_trip_response, schedule_dispatch_response

router = APIRouter()


@router.get("/trips", response_model=list[TripOut])
def list_trips(status: str = None, dispatch_status: str = None, limit: int = 100,
               db: Session = Depends(get_db)):
    return dispatch_service.list_trips(db, status=status, dispatch_status=dispatch_status, limit=limit)


@router.post("/trips", response_model=TripOut, status_code=201)
def create_trip(body: TripCreate, db: Session = Depends(get_db)):
    return dispatch_service.create_trip(db, body)


@router.get("/trips/{trip_id}", response_model=TripOut)
def get_trip(trip_id: str, db: Session = Depends(get_db)):
    return dispatch_service.get_trip(db, trip_id)


@router.post("/trips/{trip_id}/dispatch", response_model=TripOut, summary="Offer a trip to a chauffeur")
async def dispatch_trip(trip_id: str, body: DispatchRequest, db: Session = Depends(get_db)):
    trip = dispatch_service.dispatch_trip_to_chauffeur(
        db, trip_id, body.chauffeur_id, body.vehicle_id,
        body.trip_purpose, body.booking_made_for_employee_id,
    )
    schedule_dispatch_response(trip.id, body.chauffeur_id)
    return trip


@router.post("/trips/{trip_id}/accept", response_model=TripOut, summary="Chauffeur accepts the offer")
async def accept_trip(trip_id: str, body: DispatchResponse = None, db: Session = Depends(get_db)):
    trip = dispatch_service.accept_dispatch(db, trip_id, chauffeur_id=body.chauffeur_id if body else None)
    cancel_trip_response(trip_id)
    return trip


@router.post("/trips/{trip_id}/reject", response_model=TripOut, summary="Chauffeur rejects the offer")
async def reject_trip(trip_id: str, body: DispatchResponse = None, db: Session = Depends(get_db)):
    trip = dispatch_service.reject_dispatch(
        db, trip_id,
        reason=body.reason if body else None,
        chauffeur_id=body.chauffeur_id if body else None,
    )
    cancel_trip_response(trip_id)
    return trip


@router.put("/trips/{trip_id}/status", response_model=TripOut)
def update_trip_status(trip_id: str, body: TripStatusUpdate, db: Session = Depends(get_db)):
    return dispatch_service.update_trip_status(db, trip_id, body.status)


@router.put("/trips/{trip_id}/cancel", response_model=TripOut)
async def cancel_trip(trip_id: str, db: Session = Depends(get_db)):
    trip = dispatch_service.cancel_trip(db, trip_id)
    cancel_trip_response(trip_id)
    return trip
