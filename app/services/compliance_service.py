# app/services/compliance_service.py
"""
Compliance Notifier: Insurance / PUC expiry emails.

Two independent rules, evaluated once per logical day:
  A. Monthly reminder (days 1–7 and the 20th): one email to the fleet team
     listing every tracked document expiring during next calendar month.
     Sent at most once per calendar month per subject.
  B. Urgent warning: for each vehicle with an assigned employee, every tracked
     document already expired or expiring within 7 days triggers an email to
     the employee (fleet team in CC). At most one per vehicle + doc type + day.

check_and_generate_renewal_emails() and document_update_emails() are pure:
they return unsaved SimulatedEmail objects and never touch the session.
"""

import asyncio
import calendar
from datetime import date, datetime, timedelta
from typing import Iterable, Optional
from sqlalchemy.orm import Session
from app.config import settings
from app.models.email import SimulatedEmail
from app.models.enums import AlertType, FLEET_TEAM_ROLES, RENEWAL_TRACKED_DOCUMENTS
from app.models.user import User
from app.models.vehicle import Vehicle
from app.services.notification_service import record_emails
from app.utils.ids import generate_id
from app.utils.logger import get_logger

logger = get_logger(__name__)

REMINDER_DAYS = set(range(1, 8)) | {20}
URGENT_WINDOW_DAYS = 7


def _format_date(value: date) -> str:
    return f"{value.day}/{value.month}/{value.year}"


def _as_date(value) -> date:
    return value.date() if isinstance(value, datetime) else value


def _next_month_bounds(today: date) -> tuple[date, date]:
    year, month = (today.year + 1, 1) if today.month == 12 else (today.year, today.month + 1)
    return date(year, month, 1), date(year, month, calendar.monthrange(year, month)[1])


def _vehicle_label(vehicle) -> str:
    name = " ".join(part for part in (vehicle.make, vehicle.model) if part)
    return f"{name} ({vehicle.license_plate})" if name else vehicle.license_plate


def _fleet_team(users: Iterable) -> list:
    return [u for u in users if u.role in FLEET_TEAM_ROLES]


def _tracked_documents(vehicle) -> list:
    """Current Insurance / PUC document per type; superseded rows are ignored."""
    return [
        doc for doc_type in RENEWAL_TRACKED_DOCUMENTS
        if (doc := vehicle.current_document(doc_type)) is not None and doc.expiry_date
    ]


def _email(recipient: str, subject: str, body: str, now: datetime,
           vehicle_id: Optional[str] = None) -> SimulatedEmail:
    return SimulatedEmail(
        id=generate_id(),
        recipient=recipient,
        subject=subject,
        body=body,
        timestamp=now,
        vehicle_id=vehicle_id,
        alert_type=AlertType.INSURANCE_PERMIT_RENEWAL,
    )


def urgent_subject(doc_type, license_plate: str) -> str:
    return f"URGENT: {doc_type} Expiry for Vehicle {license_plate}"


def reminder_subject(today: date) -> str:
    first, _ = _next_month_bounds(today)
    return f"Vehicle Document Expiry Reminder for {calendar.month_name[first.month]}"


def urgent_already_sent(existing_emails: Iterable, vehicle_id: str, doc_type, today: date) -> bool:
    marker = f"URGENT: {doc_type} Expiry"
    return any(
        e.vehicle_id == vehicle_id and marker in e.subject and _as_date(e.timestamp) == today
        for e in existing_emails
    )


def urgent_email(vehicle, doc_type, expiry: date, assignee, fleet_emails: str,
                 now: datetime) -> Optional[SimulatedEmail]:
    """Urgent warning for a document expired or expiring within the window, else None."""
    today = now.date()
    if expiry > today + timedelta(days=URGENT_WINDOW_DAYS):
        return None

    expiry_text = _format_date(expiry)
    warning = (f"has EXPIRED on {expiry_text}" if expiry < today
               else f"is expiring in less than {URGENT_WINDOW_DAYS} days on {expiry_text}")
    body = (
        f"Dear {assignee.name},\n\n** URGENT WARNING **\n\n"
        f"The {doc_type} for your assigned vehicle, {_vehicle_label(vehicle)}, {warning}.\n\n"
        f"Please ensure the document is renewed and uploaded to the {settings.FLEET_SYSTEM_NAME} "
        f"portal immediately to avoid compliance issues.\n\n"
        f"This email has been copied to the fleet management team.\n\n"
        f"Regards,\n{settings.FLEET_SYSTEM_NAME} System"
    )
    return _email(f"{assignee.email}; CC: {fleet_emails}", urgent_subject(doc_type, vehicle.license_plate),
                  body, now, vehicle_id=vehicle.id)


def _monthly_reminder(vehicles: list, fleet_emails: str, existing_emails: list,
                      now: datetime) -> Optional[SimulatedEmail]:
    today = now.date()
    if today.day not in REMINDER_DAYS:
        return None

    subject = reminder_subject(today)
    already_sent = any(
        e.subject == subject and e.timestamp.month == today.month and e.timestamp.year == today.year
        for e in existing_emails
    )
    if already_sent:
        return None

    first, last = _next_month_bounds(today)
    expiring = [
        (vehicle, doc)
        for vehicle in vehicles
        for doc in _tracked_documents(vehicle)
        if first <= _as_date(doc.expiry_date) <= last
    ]
    if not expiring:
        return None

    month_name = calendar.month_name[first.month]
    lines = "\n".join(
        f"- {_vehicle_label(v)}: {d.doc_type} expires on {_format_date(_as_date(d.expiry_date))}"
        for v, d in expiring
    )
    body = (
        f"Dear Fleet Team,\n\nThis is a reminder that the following vehicle documents are "
        f"expiring next month ({month_name}):\n\n{lines}\n\n"
        f"Please take the necessary action.\n\nRegards,\n{settings.FLEET_SYSTEM_NAME} System"
    )
    return _email(fleet_emails, subject, body, now)


def check_and_generate_renewal_emails(vehicles: Iterable, users: Iterable, existing_emails: Iterable,
                                      now: Optional[datetime] = None) -> list[SimulatedEmail]:
    """Run both compliance rules and return the emails that still need sending."""
    now = now or datetime.utcnow()
    today = now.date()
    vehicles, users, existing = list(vehicles), list(users), list(existing_emails)

    fleet_team = _fleet_team(users)
    if not fleet_team:
        logger.warning("[COMPLIANCE] No Admin or Fleet Manager users — skipping checks")
        return []
    fleet_emails = ", ".join(u.email for u in fleet_team)

    new_emails = []
    reminder = _monthly_reminder(vehicles, fleet_emails, existing, now)
    if reminder:
        new_emails.append(reminder)

    users_by_id = {u.id: u for u in users}
    for vehicle in vehicles:
        assignee = users_by_id.get(vehicle.assigned_employee_id) if vehicle.assigned_employee_id else None
        if assignee is None:
            continue
        for doc in _tracked_documents(vehicle):
            if urgent_already_sent(existing + new_emails, vehicle.id, doc.doc_type, today):
                continue
            email = urgent_email(vehicle, doc.doc_type, _as_date(doc.expiry_date), assignee, fleet_emails, now)
            if email:
                new_emails.append(email)

    return new_emails


def document_update_emails(previous_expiries: dict, vehicle, users: Iterable, existing_emails: Iterable,
                           now: Optional[datetime] = None) -> list[SimulatedEmail]:
    """
    Emails for an edited vehicle whose Insurance/PUC expiry date changed:
    a confirmation to the assignee, plus the urgent warning if the new date
    is already inside the urgent window. previous_expiries maps doc type to
    the expiry date before the edit.
    """
    now = now or datetime.utcnow()
    users, existing = list(users), list(existing_emails)
    assignee = next((u for u in users if u.id == vehicle.assigned_employee_id), None) \
        if vehicle.assigned_employee_id else None
    fleet_team = _fleet_team(users)
    if assignee is None or not fleet_team:
        return []
    fleet_emails = ", ".join(u.email for u in fleet_team)

    new_emails = []
    for doc in _tracked_documents(vehicle):
        expiry = _as_date(doc.expiry_date)
        if previous_expiries.get(doc.doc_type) == expiry:
            continue

        body = (
            f"Dear {assignee.name},\n\nThis is a confirmation that the {doc.doc_type} for your "
            f"assigned vehicle, {_vehicle_label(vehicle)}, has been updated in the system.\n\n"
            f"New Expiry Date: {_format_date(expiry)}\n\n"
            f"A copy of this confirmation has been sent to the fleet team.\n\n"
            f"Thank you,\n{settings.FLEET_SYSTEM_NAME} System"
        )
        new_emails.append(_email(
            f"{assignee.email}; CC: {fleet_emails}",
            f"Confirmation: {doc.doc_type} Updated for Vehicle {vehicle.license_plate}",
            body, now, vehicle_id=vehicle.id,
        ))

        if urgent_already_sent(existing + new_emails, vehicle.id, doc.doc_type, now.date()):
            continue
        urgent = urgent_email(vehicle, doc.doc_type, expiry, assignee, fleet_emails, now)
        if urgent:
            new_emails.append(urgent)

    return new_emails


def run_compliance_check(db: Session, now: Optional[datetime] = None) -> list[SimulatedEmail]:
    """Load the fleet, generate due emails, persist them."""
    vehicles = db.query(Vehicle).all()
    users = db.query(User).all()
    existing = db.query(SimulatedEmail).all()

    emails = check_and_generate_renewal_emails(vehicles, users, existing, now=now)
    if emails:
        record_emails(db, emails)
        db.commit()
    logger.info(f"[COMPLIANCE] Daily check produced {len(emails)} emails")
    return emails


async def start_compliance_loop(session_factory, interval_seconds: Optional[int] = None):
    """
    Run the compliance check at startup and then once per interval.
    Called once at backend startup; loops until cancelled.
    """
    interval = interval_seconds or settings.COMPLIANCE_CHECK_INTERVAL_SECONDS
    while True:
        db = session_factory()
        try:
            run_compliance_check(db)
        except Exception as e:
            db.rollback()
            logger.error(f"[COMPLIANCE] Check failed: {e}", exc_info=True)
        finally:
            db.close()
        await asyncio.sleep(interval)
