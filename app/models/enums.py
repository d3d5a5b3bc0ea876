# app/models/enums.py
"""
String enums shared by models, schemas and services.
Values are the labels stored in the database and shown to fleet staff.
"""

from enum import StrEnum


class VehicleStatus(StrEnum):
    ACTIVE = "Active"
    MAINTENANCE = "Maintenance"
    INACTIVE = "Inactive"
    RETIRED = "Retired"
    REMOVED = "Removed"


class CarType(StrEnum):
    M_CAR = "M-Car"
    POOL = "Pool Cars"
    TEST = "Test Cars"


class DocumentType(StrEnum):
    RC = "Registration Certificate"
    INSURANCE = "Insurance"
    FITNESS = "Fitness Certificate"
    PUC = "PUC Certificate"
    PERMIT = "Permit"
    OTHER = "Other"


# Only these document types are watched by the compliance notifier
RENEWAL_TRACKED_DOCUMENTS = (DocumentType.INSURANCE, DocumentType.PUC)


class AssigneeType(StrEnum):
    EMPLOYEE = "Employee"
    CHAUFFEUR = "Chauffeur"


class UserRole(StrEnum):
    ADMIN = "Admin"
    FLEET_MANAGER = "Fleet Manager"
    EMPLOYEE = "Employee"


FLEET_TEAM_ROLES = (UserRole.ADMIN, UserRole.FLEET_MANAGER)


class UserStatus(StrEnum):
    ACTIVE = "Active"
    INACTIVE = "Inactive"


class ChauffeurOnboardingStatus(StrEnum):
    INVITED = "Invited"
    AWAITING_APPROVAL = "Awaiting Approval"
    APPROVED = "Approved"
    REJECTED = "Rejected"


class ChauffeurType(StrEnum):
    M_CAR = "M-Car Chauffeur"
    POOL = "Pool Chauffeur"


class TripStatus(StrEnum):
    PLANNED = "Planned"
    ONGOING = "Ongoing"
    COMPLETED = "Completed"
    CANCELLED = "Cancelled"
    DELAYED = "Delayed"


TERMINAL_TRIP_STATUSES = (TripStatus.COMPLETED, TripStatus.CANCELLED)


class TripDispatchStatus(StrEnum):
    PENDING = "Pending Dispatch"
    AWAITING_ACCEPTANCE = "Awaiting Acceptance"
    ACCEPTED = "Accepted"
    REJECTED = "Rejected"


class TripPurpose(StrEnum):
    EMPLOYEE = "Employee Trip"
    GUEST = "Guest Trip"
    POOL = "Pool Trip"


class NotificationType(StrEnum):
    TRIP_DISPATCH = "Trip Dispatch"
    TRIP_ACCEPTED = "Trip Accepted"
    TRIP_REJECTED = "Trip Rejected"
    CHAUFFEUR_ONBOARD = "Chauffeur Onboarded"
    POLICY_BREACH = "Policy Breach"
    GENERIC_ALERT = "Generic Alert"


class AlertType(StrEnum):
    INSURANCE_PERMIT_RENEWAL = "Insurance/Permit Renewal"
