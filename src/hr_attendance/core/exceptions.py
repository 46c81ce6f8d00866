class DomainError(Exception):
    """Base exception for business rule violations."""

    status_code = 400


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class GeofenceError(ValidationError):
    """Raised when a GPS position is outside the allowed project radius."""

    def __init__(self, message: str, *, distance_meters: float, radius_meters: float):
        super().__init__(message)
        self.distance_meters = distance_meters
        self.radius_meters = radius_meters


class AuthenticationError(DomainError):
    """Raised when login credentials are invalid."""

    status_code = 401


class AuthorizationError(DomainError):
    """Raised when a user lacks permission for an action."""

    status_code = 403


class NotFoundError(DomainError):
    """Raised when a requested record does not exist."""

    status_code = 404
