from django.db import models
from django.conf import settings


class RideStatus(models.TextChoices):
    REQUESTED = 'REQUESTED', 'Requested'
    ACCEPTED = 'ACCEPTED', 'Accepted'
    COMPLETED = 'COMPLETED', 'Completed'


# Rides only move forward, one step at a time. COMPLETED is terminal.
NEXT_STATUS = {
    RideStatus.REQUESTED: RideStatus.ACCEPTED,
    RideStatus.ACCEPTED: RideStatus.COMPLETED,
}


def can_transition(current, target) -> bool:
    """Return True if a ride in ``current`` may move to ``target``."""
    return NEXT_STATUS.get(RideStatus(current)) == RideStatus(target)


class Ride(models.Model):
    """A ride requested by a rider and, once accepted, served by a driver."""

    rider = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='rides'
    )

    # Set once, when the ride is accepted
    driver = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='accepted_rides'
    )

    pickup_location = models.CharField(max_length=255)
    drop_location = models.CharField(max_length=255)

    status = models.CharField(
        max_length=20,
        choices=RideStatus.choices,
        default=RideStatus.REQUESTED,
        db_index=True,
    )

    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'rides'
        ordering = ['created_at', 'id']

    def can_transition_to(self, target) -> bool:
        return can_transition(self.status, target)

    def involves(self, user) -> bool:
        """True if ``user`` is this ride's rider or its assigned driver."""
        return user.pk is not None and user.pk in (self.rider_id, self.driver_id)

    def __str__(self):
        return f"Ride #{self.id} - {self.rider} - {self.status}"
