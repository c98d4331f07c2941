"""
Services package - Business logic layer.

This package contains all business logic services that operate on Django models
but are decoupled from the HTTP layer.

Modules:
    - ride_management: Core ride lifecycle operations
"""

from .ride_management import (
    request_ride,
    list_pending_rides,
    accept_ride,
    complete_ride,
    list_my_rides,
    RideNotFoundError,
    RideNotAvailableError,
)

__all__ = [
    "request_ride",
    "list_pending_rides",
    "accept_ride",
    "complete_ride",
    "list_my_rides",
    "RideNotFoundError",
    "RideNotAvailableError",
]
