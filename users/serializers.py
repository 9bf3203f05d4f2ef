from django.contrib.auth import authenticate, password_validation
from rest_framework import serializers
from rest_framework.exceptions import AuthenticationFailed
from rest_framework_simplejwt.tokens import RefreshToken

from .models import User


class RegisterIn(serializers.Serializer):
    username = serializers.RegexField(r"^[A-Za-z0-9_.-]{3,30}$", max_length=30, error_messages={"invalid": "Username must be 3-30 letters, digits, '.', '_' or '-'."})
    email = serializers.EmailField()
    password = serializers.CharField(write_only=True, min_length=6, trim_whitespace=False)
    phone = serializers.CharField(required=False, allow_blank=True, max_length=32, default="")
    nid_front_image = serializers.CharField(required=False, allow_blank=True, max_length=512, default="")
    nid_back_image = serializers.CharField(required=False, allow_blank=True, max_length=512, default="")
    selfie_image = serializers.CharField(required=False, allow_blank=True, max_length=512, default="")

    def validate_email(self, value):
        value = User.objects.normalize_email(value).lower()
        if User.objects.filter(email__iexact=value).exists():
            raise serializers.ValidationError("User with this email already exists.")
        return value

    def validate_username(self, value):
        if User.objects.filter(username__iexact=value).exists():
            raise serializers.ValidationError("User with this username already exists.")
        return value

    def validate_password(self, value):
        password_validation.validate_password(value)
        return value


class LoginIn(serializers.Serializer):
    email = serializers.EmailField()
    password = serializers.CharField(write_only=True, trim_whitespace=False)

    def validate(self, attrs):
        user = authenticate(request=self.context.get("request"), email=attrs["email"].lower(), password=attrs["password"])
        if user is None:
            raise AuthenticationFailed("Invalid credentials")
        attrs["user"] = user
        return attrs


class LogoutIn(serializers.Serializer):
    refresh = serializers.CharField()


class MeOut(serializers.ModelSerializer):
    class Meta:
        model = User
        fields = (
            "id",
            "username",
            "email",
            "phone",
            "avatar",
            "role",
            "verification_status",
            "rejection_reason",
            "is_banned",
            "created_at",
            "updated_at",
        )
        read_only_fields = fields


class PublicProfileOut(serializers.ModelSerializer):
    class Meta:
        model = User
        fields = ("id", "username", "avatar", "verification_status", "created_at")
        read_only_fields = fields


class ProfileUpdateIn(serializers.ModelSerializer):
    # 역할/인증/정지 필드는 여기서 바꿀 수 없다
    username = serializers.RegexField(r"^[A-Za-z0-9_.-]{3,30}$", max_length=30, required=False)

    class Meta:
        model = User
        fields = ("username", "phone", "avatar")

    def validate_username(self, value):
        qs = User.objects.filter(username__iexact=value).exclude(pk=self.instance.pk)
        if qs.exists():
            raise serializers.ValidationError("User with this username already exists.")
        return value


class ChangePasswordIn(serializers.Serializer):
    current_password = serializers.CharField(write_only=True, trim_whitespace=False)
    new_password = serializers.CharField(write_only=True, min_length=6, trim_whitespace=False, error_messages={"min_length": "Password must be at least 6 characters"})

    def validate_new_password(self, value):
        password_validation.validate_password(value, self.context["request"].user)
        return value


class VerificationSubmitIn(serializers.Serializer):
    # 공백/누락 판정은 서비스(MissingDocuments)가 담당
    nid_front_image = serializers.CharField(required=False, allow_blank=True, max_length=512, default="")
    nid_back_image = serializers.CharField(required=False, allow_blank=True, max_length=512, default="")
    selfie_image = serializers.CharField(required=False, allow_blank=True, max_length=512, default="")


class VerificationStatusOut(serializers.ModelSerializer):
    class Meta:
        model = User
        fields = ("verification_status", "rejection_reason", "verified_at")
        read_only_fields = fields


def issue_tokens(user: User) -> dict:
    refresh = RefreshToken.for_user(user)
    return {"access": str(refresh.access_token), "refresh": str(refresh)}
