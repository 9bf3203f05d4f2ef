import uuid
from datetime import timedelta

import pytest
from django.contrib.auth import get_user_model
from django.urls import reverse
from django.utils import timezone
from rest_framework.test import APIClient

from common.exceptions import AccountSuspended, Forbidden, MissingReason, VerificationRequired
from users.models import Role, VerificationStatus
from users.services.bans import ban_user, unban_user
from users.services.gating import GatedAction, gate_write, require_verified

pytestmark = pytest.mark.django_db

User = get_user_model()


def _mk_user(status=VerificationStatus.UNVERIFIED, role=Role.USER, **extra):
    name = f"u{uuid.uuid4().hex[:8]}"
    return User.objects.create_user(email=f"{name}@example.com", username=name, password="secret12", verification_status=status, role=role, **extra)


@pytest.fixture
def admin():
    return _mk_user(status=VerificationStatus.VERIFIED, role=Role.ADMIN)


class TestGateWrite:
    def test_verified_allowed(self):
        u = _mk_user(status=VerificationStatus.VERIFIED)
        decision = gate_write(u.pk, GatedAction.CREATE_POST)
        assert decision.allowed is True
        assert decision.requires_verification is False

    @pytest.mark.parametrize(
        "status,expected",
        [
            (VerificationStatus.PENDING, "Your verification is pending. Please wait for approval to create posts."),
            (VerificationStatus.REJECTED, "Your verification was rejected. Please resubmit your documents to create posts."),
            (VerificationStatus.UNVERIFIED, "You need to be a verified user to create posts. Please submit your verification documents."),
        ],
    )
    def test_denied_messages_per_status(self, status, expected):
        u = _mk_user(status=status)
        decision = gate_write(u.pk, GatedAction.CREATE_POST)
        assert decision.allowed is False
        assert decision.requires_verification is True
        assert decision.verification_status == status
        assert decision.message == expected

    def test_comment_action_label(self):
        u = _mk_user(status=VerificationStatus.PENDING)
        assert gate_write(u.pk, GatedAction.CREATE_COMMENT).message.endswith("approval to comment.")

    def test_unknown_actor_fails_closed(self):
        decision = gate_write(uuid.uuid4(), GatedAction.CREATE_POST)
        assert decision.allowed is False
        assert decision.verification_status == VerificationStatus.UNVERIFIED

    def test_banned_takes_precedence_over_verification(self):
        u = _mk_user(status=VerificationStatus.VERIFIED, is_banned=True, ban_reason="spam")
        with pytest.raises(AccountSuspended) as exc:
            gate_write(u.pk, GatedAction.CREATE_POST)
        assert exc.value.extra == {"ban_reason": "spam"}

    def test_reads_current_state_every_time(self):
        u = _mk_user(status=VerificationStatus.PENDING)
        assert gate_write(u.pk, GatedAction.CREATE_POST).allowed is False
        User.objects.filter(pk=u.pk).update(verification_status=VerificationStatus.VERIFIED)
        assert gate_write(u.pk, GatedAction.CREATE_POST).allowed is True

    def test_require_verified_raises_with_status(self):
        u = _mk_user(status=VerificationStatus.REJECTED)
        with pytest.raises(VerificationRequired) as exc:
            require_verified(u.pk, GatedAction.CREATE_POST)
        assert exc.value.extra == {"requires_verification": True, "verification_status": "rejected"}


class TestBanService:
    def test_ban_sets_fields(self, admin):
        u = _mk_user()
        out = ban_user(admin=admin, user_id=u.pk, reason="  Scam attempts  ")
        assert out.is_banned is True
        assert out.ban_reason == "Scam attempts"
        assert out.banned_at is not None
        assert out.banned_by_id == admin.pk

    def test_ban_requires_reason(self, admin):
        u = _mk_user()
        with pytest.raises(MissingReason):
            ban_user(admin=admin, user_id=u.pk, reason="")
        u.refresh_from_db()
        assert u.is_banned is False

    def test_cannot_ban_admin(self, admin):
        other_admin = _mk_user(status=VerificationStatus.VERIFIED, role=Role.ADMIN)
        with pytest.raises(Forbidden):
            ban_user(admin=admin, user_id=other_admin.pk, reason="x")

    def test_non_admin_cannot_ban(self):
        actor = _mk_user(status=VerificationStatus.VERIFIED)
        u = _mk_user()
        with pytest.raises(Forbidden):
            ban_user(admin=actor, user_id=u.pk, reason="x")

    def test_ban_writes_only_ban_fields(self, admin):
        u = _mk_user(status=VerificationStatus.VERIFIED, phone="01700000000")
        stamp = timezone.now() - timedelta(days=3)
        User.objects.filter(pk=u.pk).update(updated_at=stamp)
        untouched = ("username", "email", "phone", "role", "verification_status", "verified_at", "updated_at")
        before = User.objects.values(*untouched).get(pk=u.pk)

        ban_user(admin=admin, user_id=u.pk, reason="spam")
        assert User.objects.values(*untouched).get(pk=u.pk) == before

        unban_user(admin=admin, user_id=u.pk)
        assert User.objects.values(*untouched).get(pk=u.pk) == before

    def test_unban_clears_all_fields(self, admin):
        u = _mk_user()
        ban_user(admin=admin, user_id=u.pk, reason="spam")
        out = unban_user(admin=admin, user_id=u.pk)
        assert (out.is_banned, out.ban_reason, out.banned_at, out.banned_by_id) == (False, "", None, None)

    def test_unban_not_banned_is_noop(self, admin):
        u = _mk_user()
        out = unban_user(admin=admin, user_id=u.pk)
        assert out.is_banned is False

    def test_ban_does_not_touch_verification(self, admin):
        u = _mk_user(status=VerificationStatus.VERIFIED)
        ban_user(admin=admin, user_id=u.pk, reason="spam")
        unban_user(admin=admin, user_id=u.pk)
        u.refresh_from_db()
        assert u.verification_status == VerificationStatus.VERIFIED


class TestBannedRequests:
    def setup_method(self):
        self.client = APIClient()

    def test_banned_user_blocked_on_any_authenticated_endpoint(self):
        u = _mk_user(status=VerificationStatus.VERIFIED, is_banned=True, ban_reason="fraud")
        self.client.force_authenticate(user=u)
        res = self.client.get(reverse("auth-me"))
        assert res.status_code == 403
        body = res.json()
        assert body["code"] == "account_suspended"
        assert body["ban_reason"] == "fraud"

    def test_banned_user_blocked_even_on_public_reads(self):
        u = _mk_user(is_banned=True, ban_reason="fraud")
        self.client.force_authenticate(user=u)
        res = self.client.get(reverse("posts-list"))
        assert res.status_code == 403
        assert res.json()["code"] == "account_suspended"

    def test_banned_user_jwt_rejected(self):
        u = _mk_user(status=VerificationStatus.VERIFIED)
        res = self.client.post(reverse("auth-login"), {"email": u.email, "password": "secret12"}, format="json")
        access = res.json()["access"]

        User.objects.filter(pk=u.pk).update(is_banned=True, ban_reason="fraud")
        self.client.credentials(HTTP_AUTHORIZATION=f"Bearer {access}")
        res = self.client.get(reverse("auth-me"))
        assert res.status_code == 403
        assert res.json()["code"] == "account_suspended"
