"""Chauffeur invitation, approval and vehicle linking."""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from app.database import get_db
from app.schemas.chauffeur import ChauffeurCreate, ChauffeurOut, ChauffeurUpdate
from app.services import chauffeur_service
from app.services.response_simulator import schedule_chauffeur_signup

router = APIRouter()


@router.get("/chauffeurs", response_model=list[ChauffeurOut])
def list_chauffeurs(onboarding_status: str = None, db: Session = Depends(get_db)):
    return chauffeur_service.list_chauffeurs(db, onboarding_status=onboarding_status)


@router.post("/chauffeurs", response_model=ChauffeurOut, status_code=201, summary="Invite a chauffeur")
async def invite_chauffeur(body: ChauffeurCreate, db: Session = Depends(get_db)):
    chauffeur = chauffeur_service.invite_chauffeur(db, body)
    schedule_chauffeur_signup(chauffeur.id)
    return chauffeur


@router.put("/chauffeurs/{chauffeur_id}", response_model=ChauffeurOut)
def update_chauffeur(chauffeur_id: str, body: ChauffeurUpdate, db: Session = Depends(get_db)):
    return chauffeur_service.update_chauffeur(db, chauffeur_id, body)


@router.put("/chauffeurs/{chauffeur_id}/signup", response_model=ChauffeurOut,
            summary="Chauffeur completed signup in the app")
def complete_signup(chauffeur_id: str, db: Session = Depends(get_db)):
    return chauffeur_service.mark_awaiting_approval(db, chauffeur_id)


@router.put("/chauffeurs/{chauffeur_id}/approve", response_model=ChauffeurOut)
def approve_chauffeur(chauffeur_id: str, db: Session = Depends(get_db)):
    return chauffeur_service.approve_chauffeur(db, chauffeur_id)


@router.put("/chauffeurs/{chauffeur_id}/reject", response_model=ChauffeurOut)
def reject_chauffeur(chauffeur_id: str, db: Session = Depends(get_db)):
    return chauffeur_service.reject_chauffeur(db, chauffeur_id)


@router.delete("/chauffeurs/{chauffeur_id}")
def delete_chauffeur(chauffeur_id: str, db: Session = Depends(get_db)):
    chauffeur_service.delete_chauffeur(db, chauffeur_id)
    return {"status": "removed", "id": chauffeur_id}
