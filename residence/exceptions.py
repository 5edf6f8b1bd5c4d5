"""Domain errors raised by the residence services.

Each error carries the HTTP status the API layer should answer with, so the
services never need to know about responses.
"""


class ResidenceError(Exception):
    status_code = 400
    default_message = "Request could not be completed."

    def __init__(self, message: str | None = None, *, field: str | None = None):
        self.message = message or self.default_message
        self.field = field
        super().__init__(self.message)


class ValidationError(ResidenceError):
    status_code = 400
    default_message = "Invalid input."


class ConflictError(ResidenceError):
    status_code = 409
    default_message = "The request conflicts with the current state."


class NotFoundError(ResidenceError):
    status_code = 404
    default_message = "Not found."


class AllocationError(ConflictError):
    default_message = "No available rooms to auto-allocate"


class StorageError(ResidenceError):
    status_code = 500
    default_message = "A storage error occurred. Please try again later."
