"""Error types raised by the food entry engine."""


class CaloricsError(Exception):
    """Base class for engine errors."""


class ValidationError(CaloricsError):
    """Local input was rejected before reaching the backend."""


class InvalidInput(ValidationError):
    """Calculator input does not describe a valid portion."""


class RequestFailed(CaloricsError):
    """The backend answered with a non-2xx status."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class NotFound(RequestFailed):
    """The backend reported that the addressed resource does not exist."""


class NetworkError(CaloricsError):
    """The request never produced a response."""
