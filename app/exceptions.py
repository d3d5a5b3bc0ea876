# app/exceptions.py
"""
Domain errors raised by the services.
Routers translate them to HTTP status codes in app/main.py; background
simulators log and drop them.
"""


class FleetError(Exception):
    """Base class for every error raised by the policy engine."""
    status_code = 400


class NotFoundError(FleetError):
    status_code = 404

    def __init__(self, entity: str, entity_id):
        self.entity = entity
        self.entity_id = entity_id
        super().__init__(f"{entity} '{entity_id}' not found")


class ValidationError(FleetError):
    status_code = 422


class DispatchStateError(FleetError):
    """A dispatch command arrived while the trip was in a state that cannot take it."""
    status_code = 409
