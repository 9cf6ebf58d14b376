"""
Domain errors raised by the service layer.

Each error carries the HTTP status it is rendered with; the application
registers a single handler for ``ServiceError`` in ``main.py``.
"""


class ServiceError(Exception):
    status_code = 500
    default_message = "Internal server error."

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class InvalidInput(ServiceError):
    status_code = 400
    default_message = "Invalid input."


class Unauthorized(ServiceError):
    status_code = 401
    default_message = "Not authenticated."


class Forbidden(ServiceError):
    status_code = 403
    default_message = "Not allowed."


class NotFound(ServiceError):
    status_code = 404
    default_message = "Not found."


class Conflict(ServiceError):
    # Duplicate favorites are reported as a bad request on the public API
    status_code = 400
    default_message = "Already exists."


class Unavailable(ServiceError):
    status_code = 400
    default_message = "This destination is not currently available."


class FullyBooked(ServiceError):
    status_code = 400
    default_message = "Sorry, the destination is fully booked."
