from unittest.mock import patch

from django.test import TestCase
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import AccessToken

from .models import Role, User
from .serializers import RegisterSerializer
from .services import get_user_by_username


class RegisterTests(TestCase):
    def setUp(self):
        self.client = APIClient()

    def test_register_returns_tokens(self):
        response = self.client.post('/api/auth/register', {
            'username': 'alice',
            'password': 'S3cure-pass!',
            'role': 'RIDER',
        }, format='json')

        self.assertEqual(response.status_code, 201)
        self.assertEqual(response.data['user']['username'], 'alice')
        self.assertEqual(response.data['user']['role'], 'RIDER')
        self.assertIn('access', response.data['tokens'])
        self.assertIn('refresh', response.data['tokens'])

        user = User.objects.get(username='alice')
        self.assertEqual(user.role, Role.RIDER)
        self.assertNotEqual(user.password, 'S3cure-pass!')
        self.assertTrue(user.check_password('S3cure-pass!'))

    def test_access_token_carries_username_and_role(self):
        response = self.client.post('/api/auth/register', {
            'username': 'bob',
            'password': 'S3cure-pass!',
            'role': 'DRIVER',
        }, format='json')

        token = AccessToken(response.data['tokens']['access'])
        self.assertEqual(token['username'], 'bob')
        self.assertEqual(token['role'], 'DRIVER')

    def test_duplicate_username_is_rejected(self):
        User.objects.create_user(username='alice', password='pass1234', role=Role.RIDER)

        response = self.client.post('/api/auth/register', {
            'username': 'alice',
            'password': 'S3cure-pass!',
            'role': 'DRIVER',
        }, format='json')

        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.data['error'], 'BAD_REQUEST')
        self.assertIn('Username already exists', response.data['message'])

    def test_concurrent_duplicate_username_is_rejected(self):
        # Another request inserts 'alice' after this one passed validation
        User.objects.create_user(username='alice', password='pass1234', role=Role.RIDER)

        with patch.object(RegisterSerializer, 'validate_username', side_effect=lambda value: value):
            response = self.client.post('/api/auth/register', {
                'username': 'alice',
                'password': 'S3cure-pass!',
                'role': 'DRIVER',
            }, format='json')

        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.data['error'], 'BAD_REQUEST')
        self.assertIn('Username already exists', response.data['message'])
        self.assertEqual(User.objects.filter(username='alice').count(), 1)
        self.assertEqual(User.objects.get(username='alice').role, Role.RIDER)

    def test_weak_password_is_rejected(self):
        response = self.client.post('/api/auth/register', {
            'username': 'frank',
            'password': 'password',
            'role': 'RIDER',
        }, format='json')

        self.assertEqual(response.status_code, 400)
        self.assertIn('password', response.data['message'])
        self.assertFalse(User.objects.filter(username='frank').exists())

    def test_unknown_role_is_rejected(self):
        response = self.client.post('/api/auth/register', {
            'username': 'erin',
            'password': 'S3cure-pass!',
            'role': 'ADMIN',
        }, format='json')

        self.assertEqual(response.status_code, 400)
        self.assertFalse(User.objects.filter(username='erin').exists())


class LoginTests(TestCase):
    def setUp(self):
        self.client = APIClient()
        User.objects.create_user(username='alice', password='pass1234', role=Role.RIDER)

    def test_login_and_use_token(self):
        response = self.client.post('/api/auth/login', {'username': 'alice', 'password': 'pass1234'}, format='json')

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.data['message'], 'Login successful')

        self.client.credentials(HTTP_AUTHORIZATION=f"Bearer {response.data['tokens']['access']}")
        response = self.client.get('/api/v1/user/rides')

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.data, [])

    def test_bad_password_is_unauthorized(self):
        response = self.client.post('/api/auth/login', {'username': 'alice', 'password': 'wrong'}, format='json')

        self.assertEqual(response.status_code, 401)
        self.assertEqual(response.data['error'], 'UNAUTHORIZED')
        self.assertEqual(response.data['message'], 'Invalid username or password')

    def test_unknown_user_is_unauthorized(self):
        response = self.client.post('/api/auth/login', {'username': 'nobody', 'password': 'pass1234'}, format='json')

        self.assertEqual(response.status_code, 401)

    def test_refresh_issues_new_access_token(self):
        login = self.client.post('/api/auth/login', {'username': 'alice', 'password': 'pass1234'}, format='json')

        response = self.client.post('/api/auth/refresh', {'refresh': login.data['tokens']['refresh']}, format='json')

        self.assertEqual(response.status_code, 200)
        self.assertIn('access', response.data)

    def test_refresh_requires_token(self):
        response = self.client.post('/api/auth/refresh', {}, format='json')

        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.data['message'], 'Refresh token is required')

    def test_invalid_refresh_token_is_unauthorized(self):
        response = self.client.post('/api/auth/refresh', {'refresh': 'not-a-token'}, format='json')

        self.assertEqual(response.status_code, 401)


class UserLookupTests(TestCase):
    def test_lookup_by_username(self):
        alice = User.objects.create_user(username='alice', password='pass1234', role=Role.RIDER)

        self.assertEqual(get_user_by_username('alice'), alice)
        self.assertIsNone(get_user_by_username('bob'))
        self.assertIsNone(get_user_by_username(''))
