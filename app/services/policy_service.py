# app/services/policy_service.py
"""
Employee vehicle-usage policy: 60,000 km or 3 years, whichever comes first.

Distance is summed across every Employee entry in every vehicle's assignment
ledger; tenure is counted from the earliest entry's start date. Results are
computed on demand from the vehicles passed in and never cached.

Month counting uses whole calendar months: (years × 12) + month difference,
with no adjustment for the day of the month.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Iterable, Optional
from app.models.enums import AssigneeType, UserRole
from app.utils.logger import get_logger

logger = get_logger(__name__)

POLICY_KM_LIMIT = 60000
POLICY_YEAR_LIMIT = 3
POLICY_MONTH_LIMIT = POLICY_YEAR_LIMIT * 12
APPROACHING_PERCENT = 85

EXCEEDED = "Exceeded"
APPROACHING_LIMIT = "Approaching Limit"
WITHIN_LIMIT = "Within Limit"
NO_POLICY = "No Policy"


@dataclass
class AssignmentUsage:
    vehicle_id: str
    license_plate: str
    start_date: datetime
    end_date: Optional[datetime]
    start_mileage: Optional[int]
    end_mileage: Optional[int]
    km_driven: int
    transfer_reason: Optional[str] = None


@dataclass
class PolicyResult:
    employee_id: str
    total_km_driven: int = 0
    months_elapsed: int = 0
    policy_start_date: Optional[datetime] = None
    status: str = NO_POLICY
    km_percentage: float = 0.0
    time_percentage: float = 0.0
    assignments: list[AssignmentUsage] = field(default_factory=list)

    @property
    def has_policy(self) -> bool:
        return self.status != NO_POLICY


def whole_calendar_months(start: datetime, end: datetime) -> int:
    return (end.year - start.year) * 12 + (end.month - start.month)


def km_for_entry(entry, vehicle) -> int:
    """Distance covered during one assignment; open entries run to the current odometer."""
    end = entry.end_mileage if entry.end_mileage is not None else (vehicle.mileage or 0)
    start = entry.start_mileage if entry.start_mileage is not None else 0
    return max(0, end - start)


def classify(km_percentage: float, time_percentage: float) -> str:
    if km_percentage >= 100 or time_percentage >= 100:
        return EXCEEDED
    if km_percentage > APPROACHING_PERCENT or time_percentage > APPROACHING_PERCENT:
        return APPROACHING_LIMIT
    return WITHIN_LIMIT


def evaluate_employee_policy(employee_id: str, vehicles: Iterable, now: Optional[datetime] = None) -> PolicyResult:
    """
    Evaluate one employee against the usage policy.
    An employee with no ledger entries (or an unknown id) gets status "No Policy".
    """
    result = PolicyResult(employee_id=employee_id)
    for vehicle in vehicles:
        for entry in vehicle.assignment_history:
            if entry.assigned_to_id != employee_id or entry.assignee_type != AssigneeType.EMPLOYEE:
                continue
            result.assignments.append(AssignmentUsage(
                vehicle_id=vehicle.id,
                license_plate=vehicle.license_plate,
                start_date=entry.start_date,
                end_date=entry.end_date,
                start_mileage=entry.start_mileage,
                end_mileage=entry.end_mileage,
                km_driven=km_for_entry(entry, vehicle),
                transfer_reason=entry.transfer_reason,
            ))

    if not result.assignments:
        return result

    result.assignments.sort(key=lambda a: a.start_date)
    result.policy_start_date = result.assignments[0].start_date
    result.total_km_driven = sum(a.km_driven for a in result.assignments)
    result.months_elapsed = whole_calendar_months(result.policy_start_date, now or datetime.utcnow())

    result.km_percentage = result.total_km_driven / POLICY_KM_LIMIT * 100
    result.time_percentage = result.months_elapsed / POLICY_MONTH_LIMIT * 100
    result.status = classify(result.km_percentage, result.time_percentage)
    return result


def evaluate_all_policies(vehicles: Iterable, users: Iterable, now: Optional[datetime] = None) -> list[PolicyResult]:
    """Policy results for every employee with at least one assignment, highest mileage first."""
    vehicles = list(vehicles)
    results = []
    for user in users:
        if user.role != UserRole.EMPLOYEE:
            continue
        result = evaluate_employee_policy(user.id, vehicles, now=now)
        if result.has_policy:
            results.append(result)

    results.sort(key=lambda r: r.total_km_driven, reverse=True)
    exceeded = sum(1 for r in results if r.status == EXCEEDED)
    logger.info(f"[POLICY] Evaluated {len(results)} employees — {exceeded} exceeded")
    return results
