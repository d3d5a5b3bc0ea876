# FleetPro Policy Engine — Database Models
# Import all models here for SQLAlchemy discovery

from app.models.user import User                                              # noqa
from app.models.vehicle import Vehicle                                        # noqa
from app.models.vehicle_document import VehicleDocument                       # noqa
from app.models.vehicle_history import VehicleAssignment, VehicleStatusChange  # noqa
from app.models.chauffeur import Chauffeur                                    # noqa
from app.models.trip import Trip                                              # noqa
from app.models.notification import SystemNotification                        # noqa
from app.models.email import SimulatedEmail                                   # noqa
