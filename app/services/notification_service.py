# app/services/notification_service.py
"""
Shared notification and email sinks.
Used by the chauffeur, dispatch, vehicle and compliance services.
Extend here to add push notifications, SMS or real email delivery.
"""

import asyncio
from datetime import datetime
from typing import Iterable, Optional
from sqlalchemy.orm import Session
from app.config import settings
from app.models.email import SimulatedEmail
from app.models.notification import SystemNotification
from app.utils.ids import generate_id
from app.utils.logger import get_logger

logger = get_logger(__name__)


def create_notification(db: Session, notification_type, subject: str, details: str,
                        trip_id: Optional[str] = None, chauffeur_id: Optional[str] = None,
                        vehicle_id: Optional[str] = None) -> SystemNotification:
    """
    Stage a notification on the session. The caller commits it together with
    the state change that caused it.
    """
    notification = SystemNotification(
        id=generate_id(),
        type=notification_type,
        subject=subject,
        details=details,
        timestamp=datetime.utcnow(),
        is_read=False,
        related_trip_id=trip_id,
        related_chauffeur_id=chauffeur_id,
        related_vehicle_id=vehicle_id,
    )
    db.add(notification)
    logger.warning(f"[NOTIFY][{notification_type}] {subject}")
    return notification


def record_emails(db: Session, emails: Iterable[SimulatedEmail]) -> list[SimulatedEmail]:
    """Stage simulated emails on the session."""
    staged = []
    for email in emails:
        db.add(email)
        staged.append(email)
        logger.warning(f"[EMAIL] to={email.recipient} | {email.subject}")
    return staged


def list_notifications(db: Session, unread_only: bool = False, limit: int = 50):
    q = db.query(SystemNotification)
    if unread_only:
        q = q.filter(SystemNotification.is_read == False)  # noqa: E712
    return q.order_by(SystemNotification.timestamp.desc()).limit(limit).all()


async def mark_all_read(db: Session, delay: Optional[float] = None) -> int:
    """
    Flag every notification as read after a short delay, as the operator
    console expects. Returns the number of notifications changed.
    """
    delay = settings.NOTIFICATION_READ_DELAY_SECONDS if delay is None else delay
    if delay > 0:
        await asyncio.sleep(delay)
    changed = (
        db.query(SystemNotification)
        .filter(SystemNotification.is_read == False)  # noqa: E712
        .update({SystemNotification.is_read: True}, synchronize_session=False)
    )
    db.commit()
    logger.info(f"[NOTIFY] Marked {changed} notifications as read")
    return changed
