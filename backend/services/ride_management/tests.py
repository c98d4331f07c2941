from unittest.mock import patch

from django.db import DatabaseError
from django.test import TestCase

from accounts.models import Role, User
from common.exceptions import ForbiddenError, UnauthorizedError
from rides.models import Ride, RideStatus
from services.ride_management import ride_lifecycle
from services.ride_management.exceptions import RideNotFoundError, RideNotAvailableError


class RideLifecycleTestCase(TestCase):
    def setUp(self):
        self.alice = User.objects.create_user(username='alice', password='pass1234', role=Role.RIDER)
        self.dave = User.objects.create_user(username='dave', password='pass1234', role=Role.RIDER)
        self.bob = User.objects.create_user(username='bob', password='pass1234', role=Role.DRIVER)
        self.carol = User.objects.create_user(username='carol', password='pass1234', role=Role.DRIVER)

    def _accepted_ride(self):
        ride = ride_lifecycle.request_ride('alice', 'A', 'B')
        return ride_lifecycle.accept_ride('bob', ride.id)


class RequestRideTests(RideLifecycleTestCase):
    def test_rider_requests_ride(self):
        ride = ride_lifecycle.request_ride('alice', pickup_location='A', drop_location='B')

        ride.refresh_from_db()
        self.assertEqual(ride.status, RideStatus.REQUESTED)
        self.assertEqual(ride.rider, self.alice)
        self.assertIsNone(ride.driver_id)
        self.assertEqual(ride.pickup_location, 'A')
        self.assertEqual(ride.drop_location, 'B')
        self.assertIsNotNone(ride.created_at)

    def test_driver_cannot_request_ride(self):
        with self.assertRaises(ForbiddenError):
            ride_lifecycle.request_ride('bob', 'A', 'B')

        self.assertFalse(Ride.objects.exists())

    def test_unknown_caller_is_unauthorized(self):
        with self.assertRaises(UnauthorizedError):
            ride_lifecycle.request_ride('ghost', 'A', 'B')

        self.assertFalse(Ride.objects.exists())

    def test_empty_principal_is_unauthorized(self):
        with self.assertRaises(UnauthorizedError):
            ride_lifecycle.request_ride('', 'A', 'B')


class ListPendingRidesTests(RideLifecycleTestCase):
    def test_only_requested_rides_are_listed_oldest_first(self):
        first = ride_lifecycle.request_ride('alice', 'A', 'B')
        second = ride_lifecycle.request_ride('dave', 'C', 'D')
        taken = ride_lifecycle.request_ride('alice', 'E', 'F')
        ride_lifecycle.accept_ride('carol', taken.id)

        pending = ride_lifecycle.list_pending_rides('bob')

        self.assertEqual([r.id for r in pending], [first.id, second.id])
        self.assertTrue(all(r.status == RideStatus.REQUESTED for r in pending))

    def test_rider_cannot_list_pending_rides(self):
        with self.assertRaises(ForbiddenError):
            ride_lifecycle.list_pending_rides('alice')


class AcceptRideTests(RideLifecycleTestCase):
    def test_driver_accepts_requested_ride(self):
        ride = ride_lifecycle.request_ride('alice', 'A', 'B')

        accepted = ride_lifecycle.accept_ride('bob', ride.id)

        self.assertEqual(accepted.status, RideStatus.ACCEPTED)
        self.assertEqual(accepted.driver_id, self.bob.id)
        self.assertEqual(accepted.rider_id, self.alice.id)

    def test_second_driver_cannot_accept_accepted_ride(self):
        ride = self._accepted_ride()

        with self.assertRaises(RideNotAvailableError) as ctx:
            ride_lifecycle.accept_ride('carol', ride.id)

        self.assertEqual(str(ctx.exception), 'Ride is not available for acceptance')
        ride.refresh_from_db()
        self.assertEqual(ride.status, RideStatus.ACCEPTED)
        self.assertEqual(ride.driver, self.bob)

    def test_completed_ride_cannot_be_accepted(self):
        ride = self._accepted_ride()
        ride_lifecycle.complete_ride('bob', ride.id)

        with self.assertRaises(RideNotAvailableError):
            ride_lifecycle.accept_ride('carol', ride.id)

        ride.refresh_from_db()
        self.assertEqual(ride.status, RideStatus.COMPLETED)
        self.assertEqual(ride.driver, self.bob)

    def test_rider_cannot_accept(self):
        ride = ride_lifecycle.request_ride('alice', 'A', 'B')

        with self.assertRaises(ForbiddenError):
            ride_lifecycle.accept_ride('dave', ride.id)

        ride.refresh_from_db()
        self.assertEqual(ride.status, RideStatus.REQUESTED)
        self.assertIsNone(ride.driver_id)

    def test_missing_ride_is_not_found(self):
        with self.assertRaises(RideNotFoundError):
            ride_lifecycle.accept_ride('bob', 9999)

    def test_stale_read_loses_race(self):
        ride = ride_lifecycle.request_ride('alice', 'A', 'B')
        stale = Ride.objects.get(pk=ride.pk)

        ride_lifecycle.accept_ride('bob', ride.id)

        # carol read the ride before bob's write landed
        with patch('services.ride_management.repository.get_ride', return_value=stale):
            with self.assertRaises(RideNotAvailableError):
                ride_lifecycle.accept_ride('carol', ride.id)

        ride.refresh_from_db()
        self.assertEqual(ride.driver, self.bob)
        self.assertEqual(ride.status, RideStatus.ACCEPTED)


class CompleteRideTests(RideLifecycleTestCase):
    def test_driver_completes_ride(self):
        ride = self._accepted_ride()

        completed = ride_lifecycle.complete_ride('bob', ride.id)

        self.assertEqual(completed.status, RideStatus.COMPLETED)
        self.assertEqual(completed.driver_id, self.bob.id)

    def test_rider_completes_ride(self):
        ride = self._accepted_ride()

        completed = ride_lifecycle.complete_ride('alice', ride.id)

        self.assertEqual(completed.status, RideStatus.COMPLETED)

    def test_unrelated_rider_is_forbidden(self):
        ride = self._accepted_ride()

        with self.assertRaises(ForbiddenError):
            ride_lifecycle.complete_ride('dave', ride.id)

        ride.refresh_from_db()
        self.assertEqual(ride.status, RideStatus.ACCEPTED)

    def test_unrelated_driver_is_forbidden(self):
        ride = self._accepted_ride()

        with self.assertRaises(ForbiddenError):
            ride_lifecycle.complete_ride('carol', ride.id)

    def test_requested_ride_cannot_be_completed(self):
        ride = ride_lifecycle.request_ride('alice', 'A', 'B')

        with self.assertRaises(RideNotAvailableError) as ctx:
            ride_lifecycle.complete_ride('alice', ride.id)

        self.assertEqual(str(ctx.exception), 'Ride must be in ACCEPTED status to be completed')
        ride.refresh_from_db()
        self.assertEqual(ride.status, RideStatus.REQUESTED)

    def test_status_checked_before_party(self):
        ride = ride_lifecycle.request_ride('alice', 'A', 'B')

        with self.assertRaises(RideNotAvailableError):
            ride_lifecycle.complete_ride('dave', ride.id)

    def test_completed_ride_cannot_be_completed_again(self):
        ride = self._accepted_ride()
        ride_lifecycle.complete_ride('bob', ride.id)

        with self.assertRaises(RideNotAvailableError):
            ride_lifecycle.complete_ride('alice', ride.id)

    def test_missing_ride_is_not_found(self):
        with self.assertRaises(RideNotFoundError):
            ride_lifecycle.complete_ride('alice', 9999)

    def test_stale_read_loses_completion_race(self):
        ride = self._accepted_ride()
        stale = Ride.objects.get(pk=ride.pk)

        ride_lifecycle.complete_ride('bob', ride.id)

        # alice read the ride while it was still ACCEPTED
        with patch('services.ride_management.repository.get_ride', return_value=stale):
            with self.assertRaises(RideNotAvailableError) as ctx:
                ride_lifecycle.complete_ride('alice', ride.id)

        self.assertEqual(str(ctx.exception), 'Ride must be in ACCEPTED status to be completed')
        ride.refresh_from_db()
        self.assertEqual(ride.status, RideStatus.COMPLETED)
        self.assertEqual(ride.driver, self.bob)


class ListMyRidesTests(RideLifecycleTestCase):
    def test_rider_sees_only_own_rides(self):
        mine = ride_lifecycle.request_ride('alice', 'A', 'B')
        ride_lifecycle.request_ride('dave', 'C', 'D')

        rides = ride_lifecycle.list_my_rides('alice')

        self.assertEqual([r.id for r in rides], [mine.id])

    def test_driver_cannot_list_my_rides(self):
        with self.assertRaises(ForbiddenError):
            ride_lifecycle.list_my_rides('bob')


class StoreFailureTests(RideLifecycleTestCase):
    @patch('services.ride_management.repository.create_ride', side_effect=DatabaseError('down'))
    def test_store_errors_propagate(self, mock_create):
        with self.assertRaises(DatabaseError):
            ride_lifecycle.request_ride('alice', 'A', 'B')

        mock_create.assert_called_once()
