"""Custom exceptions for ride management."""

from common.exceptions import InvalidStateError, NotFoundError


class RideNotFoundError(NotFoundError):
    """Raised when a ride cannot be found."""
    default_message = "Ride not found"


class RideNotAvailableError(InvalidStateError):
    """Raised when a ride is not in an available state for the operation."""
    pass
