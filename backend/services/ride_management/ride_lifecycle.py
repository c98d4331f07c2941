"""
Core ride lifecycle operations.

This module contains all the business logic for managing rides,
extracted from the views layer for better testability and reuse.

Every operation takes the caller's username explicitly and resolves it
against the user store on each call. Status changes are written with a
conditional update, so two drivers racing for the same ride cannot both win.
"""

import logging
from typing import List

from django.db import transaction

from accounts.models import Role, User
from accounts.services import get_user_by_username
from common.exceptions import ForbiddenError, UnauthorizedError
from rides.models import Ride, RideStatus
from . import repository
from .exceptions import RideNotFoundError, RideNotAvailableError

logger = logging.getLogger(__name__)

NOT_AVAILABLE_FOR_ACCEPTANCE = "Ride is not available for acceptance"
NOT_READY_TO_COMPLETE = "Ride must be in ACCEPTED status to be completed"


# ===================== Helpers =====================

def resolve_caller(username: str) -> User:
    """Look up the user behind an authenticated principal name."""
    user = get_user_by_username(username)
    if user is None:
        raise UnauthorizedError("User not found")
    return user


def _require_role(user: User, role: Role, message: str):
    if user.role != role:
        logger.warning("Rejected %s (%s): %s", user.username, user.role, message)
        raise ForbiddenError(message)


def _get_ride(ride_id) -> Ride:
    ride = repository.get_ride(ride_id)
    if ride is None:
        raise RideNotFoundError("Ride not found")
    return ride


def _advance(ride: Ride, target: RideStatus, message: str, **changes) -> Ride:
    """Move ``ride`` one step forward to ``target`` or fail with ``message``."""
    if not ride.can_transition_to(target):
        raise RideNotAvailableError(message)

    if not repository.update_status_if(ride, ride.status, target, **changes):
        # Someone else moved the ride between our read and our write
        logger.warning("Lost race moving ride %s to %s", ride.id, target)
        raise RideNotAvailableError(message)

    return ride


# ===================== Rider Operations =====================

@transaction.atomic
def request_ride(username: str, pickup_location: str, drop_location: str) -> Ride:
    """
    Create a new ride request for a rider.

    Args:
        username: Authenticated principal name of the caller
        pickup_location: Where the rider wants to be picked up
        drop_location: Where the rider wants to go

    Returns:
        The created ride, in REQUESTED status with no driver

    Raises:
        UnauthorizedError: If the caller has no user record
        ForbiddenError: If the caller is not a rider
    """
    rider = resolve_caller(username)
    _require_role(rider, Role.RIDER, "Only riders can request rides")

    ride = repository.create_ride(rider, pickup_location, drop_location)
    logger.info("Ride %s requested by %s", ride.id, rider.username)
    return ride


def list_my_rides(username: str) -> List[Ride]:
    """All rides requested by the calling rider, oldest first."""
    rider = resolve_caller(username)
    _require_role(rider, Role.RIDER, "Only riders can view their rides")
    return list(repository.rides_for_rider(rider))


# ===================== Driver Operations =====================

def list_pending_rides(username: str) -> List[Ride]:
    """Rides still waiting for a driver, oldest first."""
    driver = resolve_caller(username)
    _require_role(driver, Role.DRIVER, "Only drivers can view pending ride requests")
    return list(repository.rides_with_status(RideStatus.REQUESTED))


@transaction.atomic
def accept_ride(username: str, ride_id) -> Ride:
    """
    Accept a pending ride and assign the calling driver to it.

    Raises:
        UnauthorizedError: If the caller has no user record
        ForbiddenError: If the caller is not a driver
        RideNotFoundError: If the ride does not exist
        RideNotAvailableError: If the ride is not (or no longer) REQUESTED
    """
    driver = resolve_caller(username)
    _require_role(driver, Role.DRIVER, "Only drivers can accept rides")

    ride = _get_ride(ride_id)
    _advance(ride, RideStatus.ACCEPTED, NOT_AVAILABLE_FOR_ACCEPTANCE, driver=driver)

    logger.info("Ride %s accepted by %s", ride.id, driver.username)
    return ride


# ===================== Shared Operations =====================

@transaction.atomic
def complete_ride(username: str, ride_id) -> Ride:
    """
    Complete an accepted ride. Either the rider or the assigned driver may
    do this.

    Raises:
        UnauthorizedError: If the caller has no user record
        RideNotFoundError: If the ride does not exist
        RideNotAvailableError: If the ride is not ACCEPTED
        ForbiddenError: If the caller is not a party to the ride
    """
    caller = resolve_caller(username)
    ride = _get_ride(ride_id)

    if not ride.can_transition_to(RideStatus.COMPLETED):
        raise RideNotAvailableError(NOT_READY_TO_COMPLETE)

    if not ride.involves(caller):
        logger.warning("Rejected completion of ride %s by %s", ride.id, caller.username)
        raise ForbiddenError("You are not authorized to complete this ride")

    _advance(ride, RideStatus.COMPLETED, NOT_READY_TO_COMPLETE)

    logger.info("Ride %s completed by %s", ride.id, caller.username)
    return ride
