from rest_framework import serializers
from django.contrib.auth import authenticate
from django.contrib.auth.password_validation import validate_password
from django.core.exceptions import ValidationError as DjangoValidationError
from django.db import IntegrityError, transaction

from .models import Role, User

USERNAME_TAKEN = "Username already exists"


class UserSerializer(serializers.ModelSerializer):
    class Meta:
        model = User
        fields = ["id", "username", "role"]
        read_only_fields = fields


class LoginSerializer(serializers.Serializer):
    username = serializers.CharField()
    password = serializers.CharField(write_only=True)

    def get_user(self):
        """Return the matching user, or None for bad credentials."""
        return authenticate(
            username=self.validated_data["username"],
            password=self.validated_data["password"],
        )


class RegisterSerializer(serializers.ModelSerializer):
    password = serializers.CharField(write_only=True)
    role = serializers.ChoiceField(choices=Role.choices)

    class Meta:
        model = User
        fields = ['username', 'password', 'role']
        extra_kwargs = {
            # Replace the model's unique validator so the message is ours
            'username': {'validators': []},
        }

    def validate_username(self, value):
        if User.objects.filter(username=value).exists():
            raise serializers.ValidationError(USERNAME_TAKEN)
        return value

    def validate(self, data):
        candidate = User(username=data['username'], role=data['role'])
        try:
            validate_password(data['password'], user=candidate)
        except DjangoValidationError as exc:
            raise serializers.ValidationError({'password': list(exc.messages)})
        return data

    def create(self, validated_data):
        # The unique constraint decides when two registrations race
        try:
            with transaction.atomic():
                return User.objects.create_user(
                    username=validated_data['username'],
                    password=validated_data['password'],
                    role=validated_data['role'],
                )
        except IntegrityError:
            raise serializers.ValidationError({'username': [USERNAME_TAKEN]})
