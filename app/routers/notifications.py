"""Operator notifications and the simulated email outbox."""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from app.database import get_db
from app.models.email import SimulatedEmail
from app.schemas.notification import EmailOut, NotificationOut
from app.services import notification_service
from app.services.compliance_service import run_compliance_check

router = APIRouter()


@router.get("/notifications", response_model=list[NotificationOut])
def get_notifications(unread_only: bool = False, limit: int = 50, db: Session = Depends(get_db)):
    return notification_service.list_notifications(db, unread_only=unread_only, limit=limit)


@router.put("/notifications/read", summary="Mark every notification as read")
async def mark_all_read(db: Session = Depends(get_db)):
    changed = await notification_service.mark_all_read(db)
    return {"status": "ok", "marked_read": changed}


@router.get("/emails", response_model=list[EmailOut], summary="Simulated email outbox")
def get_emails(vehicle_id: str = None, limit: int = 50, db: Session = Depends(get_db)):
    q = db.query(SimulatedEmail)
    if vehicle_id:
        q = q.filter(SimulatedEmail.vehicle_id == vehicle_id)
    return q.order_by(SimulatedEmail.timestamp.desc()).limit(limit).all()


@router.post("/compliance/check", response_model=list[EmailOut],
             summary="Run the document-expiry check now")
def run_check(db: Session = Depends(get_db)):
    return run_compliance_check(db)
