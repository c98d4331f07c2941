"""User store lookups and token issuing."""

from typing import Optional

from rest_framework_simplejwt.tokens import RefreshToken

from .models import User


def get_user_by_username(username: str) -> Optional[User]:
    """Return the user registered under ``username``, or None."""
    if not username:
        return None
    return User.objects.filter(username=username).first()


def issue_tokens(user: User) -> dict:
    """Issue a refresh/access pair carrying the username and role claims."""
    refresh = RefreshToken.for_user(user)
    refresh['username'] = user.username
    refresh['role'] = user.role

    return {
        'refresh': str(refresh),
        'access': str(refresh.access_token),
    }
