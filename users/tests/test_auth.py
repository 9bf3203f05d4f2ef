import uuid

import pytest
from django.contrib.auth import get_user_model
from django.urls import reverse
from django.utils import timezone
from rest_framework.test import APIClient

from audits.models import AuditAction, AuditLog
from posts.models import Post
from users.models import VerificationStatus

pytestmark = pytest.mark.django_db

User = get_user_model()


def _mk_user(status=VerificationStatus.UNVERIFIED, password="secret12", **extra):
    name = f"u{uuid.uuid4().hex[:8]}"
    return User.objects.create_user(email=f"{name}@example.com", username=name, password=password, verification_status=status, **extra)


class TestRegister:
    def setup_method(self):
        self.client = APIClient()
        self.url = reverse("auth-register")

    def test_register_without_documents_is_unverified(self):
        res = self.client.post(self.url, {"username": "rahim", "email": "Rahim@Example.com", "password": "secret12"}, format="json")
        assert res.status_code == 201, res.content

        body = res.json()
        assert body["access"] and body["refresh"]
        assert body["user"]["verification_status"] == "unverified"
        assert body["user"]["email"] == "rahim@example.com"
        assert "submit verification documents" in body["message"]
        assert AuditLog.objects.filter(action=AuditAction.REGISTER, user__email="rahim@example.com").exists()

    def test_register_with_all_documents_is_pending(self):
        payload = {
            "username": "karim",
            "email": "karim@example.com",
            "password": "secret12",
            "nid_front_image": "f.png",
            "nid_back_image": "b.png",
            "selfie_image": "s.png",
        }
        res = self.client.post(self.url, payload, format="json")
        assert res.status_code == 201
        assert res.json()["user"]["verification_status"] == "pending"
        assert User.objects.get(email="karim@example.com").has_all_documents

    def test_duplicate_email_case_insensitive(self):
        User.objects.create_user(email="dup@example.com", username="dupuser", password="secret12")
        res = self.client.post(self.url, {"username": "another", "email": "DUP@example.com", "password": "secret12"}, format="json")
        assert res.status_code == 400
        assert "email" in res.json()

    @pytest.mark.parametrize("username", ["ab", "has space", "x" * 31])
    def test_invalid_username(self, username):
        res = self.client.post(self.url, {"username": username, "email": "ok@example.com", "password": "secret12"}, format="json")
        assert res.status_code == 400
        assert "username" in res.json()

    def test_short_password(self):
        res = self.client.post(self.url, {"username": "shorty", "email": "s@example.com", "password": "12345"}, format="json")
        assert res.status_code == 400
        assert "password" in res.json()


class TestLoginLogout:
    def setup_method(self):
        self.client = APIClient()

    def test_login_success(self):
        u = _mk_user(status=VerificationStatus.VERIFIED)
        res = self.client.post(reverse("auth-login"), {"email": u.email.upper(), "password": "secret12"}, format="json")
        assert res.status_code == 200
        body = res.json()
        assert body["user"]["id"] == str(u.id)
        assert body["access"] and body["refresh"]
        assert AuditLog.objects.filter(action=AuditAction.LOGIN, user=u).exists()

    def test_login_wrong_password(self):
        u = _mk_user()
        res = self.client.post(reverse("auth-login"), {"email": u.email, "password": "wrong-pass"}, format="json")
        assert res.status_code == 401

    def test_login_banned_user(self):
        u = _mk_user(is_banned=True, ban_reason="Fake listings")
        res = self.client.post(reverse("auth-login"), {"email": u.email, "password": "secret12"}, format="json")
        assert res.status_code == 403
        body = res.json()
        assert body["code"] == "account_suspended"
        assert body["ban_reason"] == "Fake listings"
        assert "access" not in body

    def test_refresh_and_logout_blacklists(self):
        u = _mk_user()
        tokens = self.client.post(reverse("auth-login"), {"email": u.email, "password": "secret12"}, format="json").json()

        res = self.client.post(reverse("auth-refresh"), {"refresh": tokens["refresh"]}, format="json")
        assert res.status_code == 200
        assert res.json()["access"]

        res = self.client.post(reverse("auth-logout"), {"refresh": tokens["refresh"]}, format="json")
        assert res.status_code == 204

        res = self.client.post(reverse("auth-refresh"), {"refresh": tokens["refresh"]}, format="json")
        assert res.status_code == 401

    def test_refresh_with_garbage(self):
        res = self.client.post(reverse("auth-refresh"), {"refresh": "not-a-token"}, format="json")
        assert res.status_code == 401

    def test_refresh_refused_after_ban(self):
        u = _mk_user(status=VerificationStatus.VERIFIED)
        tokens = self.client.post(reverse("auth-login"), {"email": u.email, "password": "secret12"}, format="json").json()
        User.objects.filter(pk=u.pk).update(is_banned=True, ban_reason="Fake listings")

        res = self.client.post(reverse("auth-refresh"), {"refresh": tokens["refresh"]}, format="json")
        assert res.status_code == 403
        body = res.json()
        assert (body["code"], body["ban_reason"]) == ("account_suspended", "Fake listings")
        assert "access" not in body


class TestMeAndProfile:
    def setup_method(self):
        self.client = APIClient()

    def test_me_requires_auth(self):
        assert self.client.get(reverse("auth-me")).status_code == 401

    def test_me(self):
        u = _mk_user(phone="01700000000")
        self.client.force_authenticate(user=u)
        body = self.client.get(reverse("auth-me")).json()
        assert body["email"] == u.email
        assert body["phone"] == "01700000000"
        assert "password" not in body and "nid_front_image" not in body

    def test_public_profile_hides_contacts(self):
        u = _mk_user(phone="01700000000")
        viewer = _mk_user()
        self.client.force_authenticate(user=viewer)
        res = self.client.get(reverse("users-detail", kwargs={"pk": str(u.id)}))
        assert res.status_code == 200
        body = res.json()
        assert body["username"] == u.username
        assert "email" not in body and "phone" not in body

    def test_unknown_profile(self):
        self.client.force_authenticate(user=_mk_user())
        res = self.client.get(reverse("users-detail", kwargs={"pk": str(uuid.uuid4())}))
        assert res.status_code == 404

    def test_update_profile(self):
        u = _mk_user()
        self.client.force_authenticate(user=u)
        res = self.client.patch(reverse("users-profile"), {"phone": "01811111111", "avatar": "avatars/me.png"}, format="json")
        assert res.status_code == 200
        u.refresh_from_db()
        assert u.phone == "01811111111" and u.avatar == "avatars/me.png"

    def test_update_profile_username_taken(self):
        taken = _mk_user()
        u = _mk_user()
        self.client.force_authenticate(user=u)
        res = self.client.patch(reverse("users-profile"), {"username": taken.username.upper()}, format="json")
        assert res.status_code == 400

    def test_change_password(self):
        u = _mk_user()
        self.client.force_authenticate(user=u)
        url = reverse("users-change-password")

        res = self.client.post(url, {"current_password": "wrong", "new_password": "newpass1"}, format="json")
        assert res.status_code == 400

        res = self.client.post(url, {"current_password": "secret12", "new_password": "123"}, format="json")
        assert res.status_code == 400

        res = self.client.post(url, {"current_password": "secret12", "new_password": "newpass1"}, format="json")
        assert res.status_code == 200
        u.refresh_from_db()
        assert u.check_password("newpass1")

    def test_stats_public(self):
        u = _mk_user(status=VerificationStatus.VERIFIED)
        common = {"author": u, "title": "t", "description": "d", "category": "keys", "location_address": "Dhaka"}
        Post.objects.create(type="lost", date_lost=timezone.now(), **common)
        Post.objects.create(type="found", date_found=timezone.now(), status="resolved", **common)

        res = self.client.get(reverse("users-stats", kwargs={"pk": str(u.id)}))
        assert res.status_code == 200
        assert res.json() == {"total": 2, "lost": 1, "found": 1, "active": 1, "resolved": 1}
