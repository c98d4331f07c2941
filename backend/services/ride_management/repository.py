"""
Ride persistence.

Thin wrappers over the ORM. Nothing here knows who is calling or whether a
transition is allowed; that is decided in ``ride_lifecycle``.
"""

from typing import Optional

from django.db.models import QuerySet

from rides.models import Ride, RideStatus


def create_ride(rider, pickup_location: str, drop_location: str) -> Ride:
    return Ride.objects.create(
        rider=rider,
        pickup_location=pickup_location,
        drop_location=drop_location,
        status=RideStatus.REQUESTED,
    )


def get_ride(ride_id) -> Optional[Ride]:
    return Ride.objects.filter(pk=ride_id).first()


def rides_with_status(status) -> QuerySet:
    """Rides in ``status``, oldest first."""
    return Ride.objects.filter(status=status).order_by('created_at', 'id')


def rides_for_rider(rider) -> QuerySet:
    return Ride.objects.filter(rider=rider).order_by('created_at', 'id')


def update_status_if(ride: Ride, expected, target, **changes) -> bool:
    """
    Move ``ride`` from ``expected`` to ``target`` in a single conditional UPDATE.

    Returns False when the stored status is no longer ``expected``, i.e.
    another request changed the ride after it was read. On success the
    instance is refreshed from the database.
    """
    updated = Ride.objects.filter(pk=ride.pk, status=expected).update(
        status=target,
        **changes
    )
    if updated:
        ride.refresh_from_db()
    return bool(updated)
