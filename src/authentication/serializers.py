"""Serializers for authentication flows (register, login, profile)."""

from typing import cast

from django.contrib.auth import get_user_model
from django.db import transaction
from rest_framework import serializers
from rest_framework.exceptions import AuthenticationFailed

from members.models import Member

from .managers import UserManager

User = get_user_model()


class RegisterSerializer(serializers.Serializer):
    """Create a login account and its member record with the plain member role."""

    email = serializers.EmailField()
    password = serializers.CharField(write_only=True, min_length=8)
    repeat_password = serializers.CharField(write_only=True, min_length=8)
    full_name = serializers.CharField(required=True, allow_blank=False, max_length=255)
    phone = serializers.CharField(required=False, allow_blank=True, max_length=32)

    @staticmethod
    def validate_email(value):
        """Ensure email is unique before creation."""
        if User.objects.filter(email__iexact=value).exists():
            raise serializers.ValidationError("Email already in use")
        return value

    def validate(self, attrs):
        """Ensure provided passwords match before creation."""
        if attrs.get("password") != attrs.get("repeat_password"):
            raise serializers.ValidationError("Passwords do not match")
        return attrs

    def create(self, validated_data):
        manager = cast(UserManager, User.objects)
        with transaction.atomic():
            account = manager.create_user(validated_data["email"], validated_data["password"])
            Member.objects.create(
                auth=account,
                full_name=validated_data["full_name"],
                email=account.email,
                phone=validated_data.get("phone", ""),
            )
        return account


class LoginSerializer(serializers.Serializer):
    """Authenticate an account via email/password using bcrypt verification."""

    email = serializers.EmailField()
    password = serializers.CharField(write_only=True)

    def validate(self, attrs):
        """Authenticate credentials and attach the account to validated_data."""
        email = attrs.get("email")
        password = attrs.get("password")
        try:
            user = User.objects.get(email__iexact=email)
        except User.DoesNotExist:
            raise AuthenticationFailed("Invalid credentials")

        if not user.is_active:
            raise AuthenticationFailed("User is inactive")

        if not UserManager.verify_password(user, password):
            raise AuthenticationFailed("Invalid credentials")

        attrs["user"] = user
        return attrs


class AccountSerializer(serializers.ModelSerializer):
    """Read-only account payload."""

    class Meta:
        model = User
        fields = ["id", "email", "date_joined"]
        read_only_fields = fields


__all__ = ["RegisterSerializer", "LoginSerializer", "AccountSerializer"]
