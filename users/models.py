import uuid

from django.contrib.auth.models import AbstractBaseUser, BaseUserManager, PermissionsMixin
from django.db import models


class Role(models.TextChoices):
    USER = "user", "User"
    ADMIN = "admin", "Admin"


class VerificationStatus(models.TextChoices):
    UNVERIFIED = "unverified", "Unverified"
    PENDING = "pending", "Pending"
    VERIFIED = "verified", "Verified"
    REJECTED = "rejected", "Rejected"


class UserManager(BaseUserManager):
    def create_user(self, email, username, password=None, **extra_fields):
        if not email:
            raise ValueError("Email is required")
        user = self.model(email=self.normalize_email(email), username=username, **extra_fields)
        if password:
            user.set_password(password)
        else:
            user.set_unusable_password()
        user.save(using=self._db)
        return user

    def create_superuser(self, email, username, password=None, **extra_fields):
        extra_fields.setdefault("role", Role.ADMIN)
        extra_fields.setdefault("is_staff", True)
        extra_fields.setdefault("is_superuser", True)
        extra_fields.setdefault("verification_status", VerificationStatus.VERIFIED)
        return self.create_user(email, username, password, **extra_fields)


class User(AbstractBaseUser, PermissionsMixin):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    username = models.CharField(max_length=30, unique=True)
    email = models.EmailField(unique=True)
    phone = models.CharField(max_length=32, blank=True, default="")
    avatar = models.CharField(max_length=512, blank=True, default="")  # 스토리지 참조 문자열
    role = models.CharField(max_length=16, choices=Role.choices, default=Role.USER, db_index=True)

    # 신원 인증 (NID 앞/뒤 + 셀카는 항상 세트로만 보관)
    verification_status = models.CharField(max_length=16, choices=VerificationStatus.choices, default=VerificationStatus.UNVERIFIED, db_index=True)
    nid_front_image = models.CharField(max_length=512, blank=True, default="")
    nid_back_image = models.CharField(max_length=512, blank=True, default="")
    selfie_image = models.CharField(max_length=512, blank=True, default="")
    rejection_reason = models.TextField(blank=True, default="")
    verification_note = models.TextField(blank=True, default="")
    verified_at = models.DateTimeField(null=True, blank=True)
    verified_by = models.ForeignKey("self", on_delete=models.SET_NULL, null=True, blank=True, related_name="+")

    # 정지(ban)는 인증 상태와 독립적으로 모든 인증 요청을 막는다
    is_banned = models.BooleanField(default=False, db_index=True)
    ban_reason = models.TextField(blank=True, default="")
    banned_at = models.DateTimeField(null=True, blank=True)
    banned_by = models.ForeignKey("self", on_delete=models.SET_NULL, null=True, blank=True, related_name="+")

    is_active = models.BooleanField(default=True)
    is_staff = models.BooleanField(default=False)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = UserManager()

    USERNAME_FIELD = "email"
    EMAIL_FIELD = "email"
    REQUIRED_FIELDS = ["username"]

    class Meta:
        db_table = "users"
        indexes = [
            models.Index(fields=["verification_status", "created_at"], name="idx_user_status_created"),
            models.Index(fields=["role", "-created_at"], name="idx_user_role_created"),
        ]

    def __str__(self):
        return self.username or str(self.id)

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN

    @property
    def is_verified(self) -> bool:
        return self.verification_status == VerificationStatus.VERIFIED

    @property
    def has_all_documents(self) -> bool:
        return bool(self.nid_front_image and self.nid_back_image and self.selfie_image)
