from unittest.mock import patch

from django.db import DatabaseError
from django.test import TestCase
from rest_framework.test import APIClient

from accounts.models import Role, User
from .models import Ride, RideStatus, can_transition


class RideStatusTransitionTests(TestCase):
    def test_forward_steps_are_allowed(self):
        self.assertTrue(can_transition(RideStatus.REQUESTED, RideStatus.ACCEPTED))
        self.assertTrue(can_transition(RideStatus.ACCEPTED, RideStatus.COMPLETED))

    def test_skipping_is_rejected(self):
        self.assertFalse(can_transition(RideStatus.REQUESTED, RideStatus.COMPLETED))

    def test_regressing_is_rejected(self):
        self.assertFalse(can_transition(RideStatus.ACCEPTED, RideStatus.REQUESTED))
        self.assertFalse(can_transition(RideStatus.COMPLETED, RideStatus.ACCEPTED))

    def test_completed_is_terminal(self):
        for status in RideStatus:
            self.assertFalse(can_transition(RideStatus.COMPLETED, status))

    def test_accepts_stored_string_values(self):
        self.assertTrue(can_transition('REQUESTED', 'ACCEPTED'))


class RideApiTests(TestCase):
    def setUp(self):
        self.client = APIClient()
        self.alice = User.objects.create_user(username='alice', password='pass1234', role=Role.RIDER)
        self.dave = User.objects.create_user(username='dave', password='pass1234', role=Role.RIDER)
        self.bob = User.objects.create_user(username='bob', password='pass1234', role=Role.DRIVER)
        self.carol = User.objects.create_user(username='carol', password='pass1234', role=Role.DRIVER)

    def _as(self, user):
        self.client.force_authenticate(user=user)

    def _request_ride(self):
        self._as(self.alice)
        response = self.client.post('/api/v1/rides', {'pickupLocation': 'A', 'dropLocation': 'B'}, format='json')
        self.assertEqual(response.status_code, 201)
        return response.data['id']

    def assertError(self, response, status_code, error):
        self.assertEqual(response.status_code, status_code)
        self.assertEqual(response.data['error'], error)
        self.assertIn('message', response.data)
        self.assertIn('timestamp', response.data)

    def test_full_ride_flow(self):
        self._as(self.alice)
        response = self.client.post('/api/v1/rides', {'pickupLocation': 'A', 'dropLocation': 'B'}, format='json')

        self.assertEqual(response.status_code, 201)
        self.assertEqual(response.data['status'], 'REQUESTED')
        self.assertEqual(response.data['userId'], self.alice.id)
        self.assertIsNone(response.data['driverId'])
        self.assertEqual(response.data['pickupLocation'], 'A')
        self.assertEqual(response.data['dropLocation'], 'B')
        self.assertIn('createdAt', response.data)
        ride_id = response.data['id']

        self._as(self.bob)
        response = self.client.get('/api/v1/driver/rides/requests')
        self.assertEqual(response.status_code, 200)
        self.assertEqual([r['id'] for r in response.data], [ride_id])

        response = self.client.post(f'/api/v1/driver/rides/{ride_id}/accept')
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.data['status'], 'ACCEPTED')
        self.assertEqual(response.data['driverId'], self.bob.id)

        response = self.client.post(f'/api/v1/rides/{ride_id}/complete')
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.data['status'], 'COMPLETED')

        self._as(self.alice)
        response = self.client.get('/api/v1/user/rides')
        self.assertEqual(response.status_code, 200)
        self.assertEqual(len(response.data), 1)
        self.assertEqual(response.data[0]['status'], 'COMPLETED')

    def test_driver_cannot_request_ride(self):
        self._as(self.bob)
        response = self.client.post('/api/v1/rides', {'pickupLocation': 'A', 'dropLocation': 'B'}, format='json')

        self.assertError(response, 403, 'FORBIDDEN')
        self.assertFalse(Ride.objects.exists())

    def test_missing_fields_are_rejected(self):
        self._as(self.alice)
        response = self.client.post('/api/v1/rides', {'pickupLocation': 'A'}, format='json')

        self.assertError(response, 400, 'BAD_REQUEST')
        self.assertIn('dropLocation', response.data['message'])

    def test_rider_cannot_accept(self):
        ride_id = self._request_ride()

        response = self.client.post(f'/api/v1/driver/rides/{ride_id}/accept')

        self.assertError(response, 403, 'FORBIDDEN')

    def test_second_accept_is_invalid_state(self):
        ride_id = self._request_ride()
        self._as(self.bob)
        self.client.post(f'/api/v1/driver/rides/{ride_id}/accept')

        self._as(self.carol)
        response = self.client.post(f'/api/v1/driver/rides/{ride_id}/accept')

        self.assertError(response, 409, 'INVALID_STATE')
        self.assertEqual(response.data['message'], 'Ride is not available for acceptance')
        self.assertEqual(Ride.objects.get(pk=ride_id).driver, self.bob)

    def test_accept_unknown_ride_is_not_found(self):
        self._as(self.bob)
        response = self.client.post('/api/v1/driver/rides/9999/accept')

        self.assertError(response, 404, 'NOT_FOUND')

    def test_unrelated_rider_cannot_complete(self):
        ride_id = self._request_ride()
        self._as(self.bob)
        self.client.post(f'/api/v1/driver/rides/{ride_id}/accept')

        self._as(self.dave)
        response = self.client.post(f'/api/v1/rides/{ride_id}/complete')

        self.assertError(response, 403, 'FORBIDDEN')
        self.assertEqual(Ride.objects.get(pk=ride_id).status, RideStatus.ACCEPTED)

    def test_rider_cannot_list_pending(self):
        self._as(self.alice)
        response = self.client.get('/api/v1/driver/rides/requests')

        self.assertError(response, 403, 'FORBIDDEN')

    def test_driver_cannot_list_user_rides(self):
        self._as(self.bob)
        response = self.client.get('/api/v1/user/rides')

        self.assertError(response, 403, 'FORBIDDEN')

    def test_unauthenticated_request_is_rejected(self):
        response = self.client.get('/api/v1/user/rides')

        self.assertError(response, 401, 'UNAUTHORIZED')

    def test_principal_without_user_record_is_unauthorized(self):
        self._as(User(username='ghost', role=Role.RIDER))
        response = self.client.get('/api/v1/user/rides')

        self.assertError(response, 401, 'UNAUTHORIZED')
        self.assertEqual(response.data['message'], 'User not found')

    @patch('services.ride_management.repository.rides_with_status', side_effect=DatabaseError('store down'))
    def test_store_failure_is_internal_error(self, mock_query):
        self._as(self.bob)
        response = self.client.get('/api/v1/driver/rides/requests')

        self.assertError(response, 500, 'INTERNAL_ERROR')
        mock_query.assert_called_once()


class HealthCheckTests(TestCase):
    def test_health_reports_database(self):
        response = APIClient().get('/health/')

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.data['status'], 'healthy')
        self.assertEqual(response.data['services']['database'], 'healthy')
