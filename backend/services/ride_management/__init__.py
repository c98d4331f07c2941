"""
Ride management service - Core ride lifecycle operations.

This module handles:
    - Requesting rides
    - Listing pending rides for drivers
    - Accepting rides
    - Completing rides
    - Listing a rider's own rides
"""

from .ride_lifecycle import (
    resolve_caller,
    request_ride,
    list_pending_rides,
    accept_ride,
    complete_ride,
    list_my_rides,
)

from .exceptions import (
    RideNotFoundError,
    RideNotAvailableError,
)

__all__ = [
    # Lifecycle operations
    "resolve_caller",
    "request_ride",
    "list_pending_rides",
    "accept_ride",
    "complete_ride",
    "list_my_rides",
    # Exceptions
    "RideNotFoundError",
    "RideNotAvailableError",
]
