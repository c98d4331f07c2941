from django.db import models
from django.contrib.auth.models import AbstractUser


class Role(models.TextChoices):
    RIDER = 'RIDER', 'Rider'
    DRIVER = 'DRIVER', 'Driver'


class User(AbstractUser):
    """Extended user model with role selection"""

    role = models.CharField(max_length=10, choices=Role.choices)

    REQUIRED_FIELDS = ['email', 'role']

    class Meta:
        db_table = 'users'

    def __str__(self):
        return f"{self.username} ({self.get_role_display()})"
