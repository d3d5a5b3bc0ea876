# app/services/employee_service.py
"""Employee records and onboarding with an optional vehicle + chauffeur assignment."""

from typing import Optional
from sqlalchemy.orm import Session
from app.exceptions import NotFoundError
from app.models.enums import UserRole, UserStatus
from app.models.user import User
from app.models.vehicle import Vehicle
from app.schemas.user import EmployeeOnboard, UserCreate
from app.services.assignment_ledger import link_chauffeur, reassign_vehicle
from app.services.policy_service import evaluate_all_policies, evaluate_employee_policy
from app.utils.logger import get_logger

logger = get_logger(__name__)

DEFAULT_ONBOARDING_REASON = "Assigned on employee onboarding"


def get_user(db: Session, user_id: str) -> User:
    user = db.query(User).filter(User.id == user_id).first()
    if user is None:
        raise NotFoundError("User", user_id)
    return user


def list_users(db: Session, role: Optional[str] = None):
    q = db.query(User)
    if role:
        q = q.filter(User.role == role)
    return q.order_by(User.created_at.desc()).all()


def create_user(db: Session, data: UserCreate) -> User:
    user = User(name=data.name, email=data.email, role=data.role, emp_id=data.emp_id,
                department=data.department, status=UserStatus.ACTIVE)
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


def toggle_user_status(db: Session, user_id: str) -> User:
    user = get_user(db, user_id)
    user.status = UserStatus.INACTIVE if user.status == UserStatus.ACTIVE else UserStatus.ACTIVE
    db.commit()
    return user


def onboard_employee(db: Session, data: EmployeeOnboard) -> User:
    """
    Create an Employee and, when a vehicle is given, hand it over through the
    assignment ledger and link the chauffeur to it.
    """
    vehicle = None
    if data.vehicle_id:
        vehicle = db.query(Vehicle).filter(Vehicle.id == data.vehicle_id).first()
        if vehicle is None:
            raise NotFoundError("Vehicle", data.vehicle_id)

    employee = User(name=data.name, email=data.email, role=UserRole.EMPLOYEE, status=UserStatus.ACTIVE,
                    emp_id=data.emp_id, department=data.department)
    try:
        db.add(employee)
        db.flush()
        if vehicle is not None:
            reassign_vehicle(vehicle, employee.id, vehicle.mileage,
                             data.transfer_reason or DEFAULT_ONBOARDING_REASON,
                             assignee_name=employee.name)
            if data.chauffeur_id:
                link_chauffeur(db, vehicle, data.chauffeur_id)
        db.commit()
    except Exception:
        db.rollback()
        raise

    db.refresh(employee)
    logger.info(f"[LEDGER] Onboarded employee {employee.name} ({employee.id})")
    return employee


def employee_policy(db: Session, employee_id: str):
    """Policy status for one employee against the current fleet."""
    get_user(db, employee_id)
    return evaluate_employee_policy(employee_id, db.query(Vehicle).all())


def all_policies(db: Session):
    return evaluate_all_policies(db.query(Vehicle).all(), db.query(User).all())
