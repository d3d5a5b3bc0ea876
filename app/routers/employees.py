"""Users, employee onboarding and vehicle-usage policy."""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from app.database import get_db
from app.schemas.policy import PolicyOut
from app.schemas.user import EmployeeOnboard, UserCreate, UserOut
from app.services import employee_service

router = APIRouter()


@router.get("/users", response_model=list[UserOut])
def list_users(role: str = None, db: Session = Depends(get_db)):
    return employee_service.list_users(db, role=role)


@router.post("/users", response_model=UserOut, status_code=201)
def create_user(body: UserCreate, db: Session = Depends(get_db)):
    return employee_service.create_user(db, body)


@router.put("/users/{user_id}/toggle-status", response_model=UserOut)
def toggle_user_status(user_id: str, db: Session = Depends(get_db)):
    return employee_service.toggle_user_status(db, user_id)


@router.post("/employees/onboard", response_model=UserOut, status_code=201,
             summary="Create an employee and assign a vehicle")
def onboard_employee(body: EmployeeOnboard, db: Session = Depends(get_db)):
    return employee_service.onboard_employee(db, body)


@router.get("/employees/{employee_id}/policy", response_model=PolicyOut,
            summary="Vehicle-usage policy status for one employee")
def get_employee_policy(employee_id: str, db: Session = Depends(get_db)):
    return employee_service.employee_policy(db, employee_id)


@router.get("/policy", response_model=list[PolicyOut], summary="Policy status for every assigned employee")
def get_all_policies(status: str = None, db: Session = Depends(get_db)):
    results = employee_service.all_policies(db)
    if status:
        results = [r for r in results if r.status == status]
    return results
