import logging

from rest_framework import status
from rest_framework.views import APIView
from rest_framework.response import Response
from rest_framework.permissions import AllowAny
from rest_framework_simplejwt.exceptions import TokenError
from rest_framework_simplejwt.tokens import RefreshToken

from common.exception_handler import error_response
from .serializers import RegisterSerializer, LoginSerializer, UserSerializer
from .services import issue_tokens

logger = logging.getLogger(__name__)


class RegisterView(APIView):
    """
    Register a new user (rider or driver)

    POST Body:
    {
        "username": "alice",
        "password": "password123",
        "role": "RIDER"  // or "DRIVER"
    }
    """
    permission_classes = (AllowAny,)
    authentication_classes = []

    def post(self, request):
        serializer = RegisterSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        user = serializer.save()
        logger.info("Registered %s as %s", user.username, user.role)

        return Response({
            'message': 'User registered successfully',
            'user': UserSerializer(user).data,
            'tokens': issue_tokens(user),
        }, status=status.HTTP_201_CREATED)


class LoginView(APIView):
    """
    Login with username and password to get JWT tokens

    POST Body:
    {
        "username": "alice",
        "password": "password123"
    }
    """
    permission_classes = (AllowAny,)
    authentication_classes = []

    def post(self, request):
        serializer = LoginSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        user = serializer.get_user()
        if user is None:
            return error_response(
                'UNAUTHORIZED',
                'Invalid username or password',
                status.HTTP_401_UNAUTHORIZED,
            )

        return Response({
            'message': 'Login successful',
            'user': UserSerializer(user).data,
            'tokens': issue_tokens(user),
        }, status=status.HTTP_200_OK)


class RefreshTokenView(APIView):
    """
    Refresh JWT access token

    POST Body:
    {
        "refresh": "your_refresh_token"
    }
    """
    permission_classes = (AllowAny,)
    authentication_classes = []

    def post(self, request):
        refresh_token = request.data.get('refresh')

        if not refresh_token:
            return error_response(
                'BAD_REQUEST',
                'Refresh token is required',
                status.HTTP_400_BAD_REQUEST,
            )

        try:
            refresh = RefreshToken(refresh_token)
        except TokenError:
            return error_response(
                'UNAUTHORIZED',
                'Invalid refresh token',
                status.HTTP_401_UNAUTHORIZED,
            )

        return Response({'access': str(refresh.access_token)})
