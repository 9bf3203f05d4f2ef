import uuid
from datetime import timedelta

import pytest
from django.contrib.auth import get_user_model
from django.urls import reverse
from django.utils import timezone
from rest_framework.test import APIClient

from audits.models import AuditAction, AuditLog
from notifications.models import Notification
from posts.models import Post
from reports.models import Report
from reports.services import create_report
from users.models import Role, VerificationStatus

pytestmark = pytest.mark.django_db

User = get_user_model()


def _mk_user(status=VerificationStatus.UNVERIFIED, role=Role.USER, **extra):
    name = extra.pop("username", None) or f"u{uuid.uuid4().hex[:8]}"
    return User.objects.create_user(email=f"{name}@example.com", username=name, password="secret12", verification_status=status, role=role, **extra)


def _mk_post(author, **extra):
    values = dict(title="Lost keys", description="Three keys", type="lost", category="keys", date_lost=timezone.now(), location_address="Dhaka")
    values.update(extra)
    return Post.objects.create(author=author, **values)


class AdminClientMixin:
    def setup_method(self):
        self.admin = _mk_user(status=VerificationStatus.VERIFIED, role=Role.ADMIN)
        self.client = APIClient()
        self.client.force_authenticate(user=self.admin)


class TestAdminAccess:
    @pytest.mark.parametrize("name", ["admin-verifications-list", "admin-users-list", "admin-reports-list", "admin-posts-list", "admin-stats-list"])
    def test_regular_member_forbidden(self, name):
        client = APIClient()
        client.force_authenticate(user=_mk_user(status=VerificationStatus.VERIFIED))
        assert client.get(reverse(name)).status_code == 403

    def test_anonymous_unauthorized(self):
        assert APIClient().get(reverse("admin-stats-list")).status_code == 401


class TestAdminVerifications(AdminClientMixin):
    def test_queue_oldest_first(self):
        first = _mk_user(status=VerificationStatus.PENDING)
        second = _mk_user(status=VerificationStatus.PENDING)
        _mk_user(status=VerificationStatus.UNVERIFIED)
        User.objects.filter(pk=first.pk).update(updated_at=timezone.now() - timedelta(hours=2))

        res = self.client.get(reverse("admin-verifications-list"))
        assert res.status_code == 200
        assert [u["id"] for u in res.json()] == [str(first.id), str(second.id)]

    def test_detail_includes_documents(self):
        u = _mk_user(status=VerificationStatus.PENDING, nid_front_image="f.png", nid_back_image="b.png", selfie_image="s.png")
        body = self.client.get(reverse("admin-verifications-detail", kwargs={"pk": str(u.id)})).json()
        assert (body["nid_front_image"], body["nid_back_image"], body["selfie_image"]) == ("f.png", "b.png", "s.png")

    def test_approve(self):
        u = _mk_user(status=VerificationStatus.PENDING)
        res = self.client.post(reverse("admin-verifications-approve", kwargs={"pk": str(u.id)}), {"note": "ok"}, format="json")
        assert res.status_code == 200, res.content
        assert res.json()["verification_status"] == "verified"
        assert AuditLog.objects.filter(action=AuditAction.VERIFICATION_APPROVE, user=self.admin, target_id=u.id).exists()

        res = self.client.post(reverse("admin-verifications-approve", kwargs={"pk": str(u.id)}), {}, format="json")
        assert res.status_code == 400
        assert res.json()["code"] == "invalid_state"

    def test_reject_requires_reason(self):
        u = _mk_user(status=VerificationStatus.PENDING)
        res = self.client.post(reverse("admin-verifications-reject", kwargs={"pk": str(u.id)}), {}, format="json")
        assert res.status_code == 400
        assert res.json()["code"] == "missing_reason"

        res = self.client.post(reverse("admin-verifications-reject", kwargs={"pk": str(u.id)}), {"reason": "Blurry NID"}, format="json")
        assert res.status_code == 200
        assert res.json()["rejection_reason"] == "Blurry NID"

    def test_unknown_user(self):
        res = self.client.post(reverse("admin-verifications-approve", kwargs={"pk": str(uuid.uuid4())}), {}, format="json")
        assert res.status_code == 404


class TestAdminUsers(AdminClientMixin):
    def test_list_filters(self):
        _mk_user(username="rahim_lost", status=VerificationStatus.VERIFIED)
        _mk_user(username="karim", status=VerificationStatus.PENDING)
        _mk_user(username="banned_guy", is_banned=True, ban_reason="spam")
        url = reverse("admin-users-list")

        def names(res):
            return sorted(u["username"] for u in res.json())

        assert names(self.client.get(url)) == ["banned_guy", "karim", "rahim_lost"]
        assert names(self.client.get(url, {"search": "RAHIM"})) == ["rahim_lost"]
        assert names(self.client.get(url, {"verification_status": "pending"})) == ["karim"]
        assert names(self.client.get(url, {"is_banned": "true"})) == ["banned_guy"]
        assert names(self.client.get(url, {"is_banned": "false"})) == ["karim", "rahim_lost"]
        assert self.client.get(url, {"is_banned": "maybe"}).status_code == 400

    def test_detail_counts(self):
        u = _mk_user()
        _mk_post(u)
        _mk_post(u)
        create_report(reporter=_mk_user(), reported_user_id=u.id, reason="spam", description="x")
        create_report(reporter=u, reported_user_id=_mk_user().id, reason="spam", description="y")

        body = self.client.get(reverse("admin-users-detail", kwargs={"pk": str(u.id)})).json()
        assert body["user"]["id"] == str(u.id)
        assert (body["post_count"], body["reports_received"], body["reports_filed"]) == (2, 1, 1)

    def test_ban_and_unban(self):
        u = _mk_user(status=VerificationStatus.VERIFIED)
        res = self.client.post(reverse("admin-users-ban", kwargs={"pk": str(u.id)}), {"reason": "Scam"}, format="json")
        assert res.status_code == 200
        body = res.json()
        assert body["is_banned"] is True and body["ban_reason"] == "Scam" and body["banned_by_id"] == str(self.admin.id)
        assert AuditLog.objects.filter(action=AuditAction.BAN_USER, target_id=u.id).exists()

        res = self.client.post(reverse("admin-users-unban", kwargs={"pk": str(u.id)}))
        assert res.status_code == 200
        body = res.json()
        assert (body["is_banned"], body["ban_reason"], body["banned_at"], body["banned_by_id"]) == (False, "", None, None)
        assert body["verification_status"] == "verified"

    def test_ban_needs_reason(self):
        u = _mk_user()
        res = self.client.post(reverse("admin-users-ban", kwargs={"pk": str(u.id)}), {"reason": "  "}, format="json")
        assert res.status_code == 400
        assert res.json()["code"] == "missing_reason"

    def test_cannot_ban_admin(self):
        other = _mk_user(status=VerificationStatus.VERIFIED, role=Role.ADMIN)
        res = self.client.post(reverse("admin-users-ban", kwargs={"pk": str(other.id)}), {"reason": "x"}, format="json")
        assert res.status_code == 403


class TestAdminReports(AdminClientMixin):
    def setup_method(self):
        super().setup_method()
        self.target = _mk_user()
        self.report = create_report(reporter=_mk_user(), reported_user_id=self.target.id, reason="scam", description="x")

    def test_list_and_filter(self):
        res = self.client.get(reverse("admin-reports-list"), {"status": "pending"})
        assert [r["id"] for r in res.json()] == [str(self.report.id)]
        assert self.client.get(reverse("admin-reports-list"), {"status": "resolved"}).json() == []

    def test_update_flow(self):
        url = reverse("admin-reports-detail", kwargs={"pk": str(self.report.id)})
        res = self.client.patch(url, {"status": "reviewing"}, format="json")
        assert res.status_code == 200, res.content

        res = self.client.patch(url, {"status": "resolved", "action_taken": "user_banned", "admin_note": "Banned separately"}, format="json")
        body = res.json()
        assert (body["status"], body["action_taken"], body["reviewed_by_id"]) == ("resolved", "user_banned", str(self.admin.id))
        assert AuditLog.objects.filter(action=AuditAction.UPDATE_REPORT, target_id=self.report.id).count() == 2

        # 종단 상태에서 되돌릴 수 없다
        res = self.client.patch(url, {"status": "pending"}, format="json")
        assert res.status_code == 400
        assert res.json()["code"] == "invalid_state"

        self.target.refresh_from_db()
        assert self.target.is_banned is False

    def test_detail(self):
        res = self.client.get(reverse("admin-reports-detail", kwargs={"pk": str(self.report.id)}))
        assert res.status_code == 200
        assert res.json()["reported_username"] == self.target.username
        assert "admin_note" in res.json()


class TestAdminPosts(AdminClientMixin):
    def test_list_is_not_censored(self):
        author = _mk_user(phone="01712345678")
        _mk_post(author, description="Call 01712345678", latitude=23.7, longitude=90.4)
        body = self.client.get(reverse("admin-posts-list")).json()
        assert body[0]["is_censored"] is False
        assert body[0]["description"] == "Call 01712345678"
        assert body[0]["author"]["phone"] == "01712345678"

    def test_remove_notifies_author(self):
        author = _mk_user()
        post = _mk_post(author, title="Fake listing")
        url = reverse("admin-posts-detail", kwargs={"pk": str(post.id)})

        res = self.client.delete(url, {"reason": ""}, format="json")
        assert res.status_code == 400
        assert Post.objects.filter(pk=post.pk).exists()

        res = self.client.delete(url, {"reason": "Duplicate of another post"}, format="json")
        assert res.status_code == 200, res.content
        assert not Post.objects.filter(pk=post.pk).exists()

        n = Notification.objects.get(user=author)
        assert n.type == Notification.Type.SYSTEM
        assert "Fake listing" in n.message and "Duplicate of another post" in n.message
        assert AuditLog.objects.filter(action=AuditAction.REMOVE_POST, target_id=post.id).exists()

    def test_remove_unknown(self):
        res = self.client.delete(reverse("admin-posts-detail", kwargs={"pk": str(uuid.uuid4())}), {"reason": "x"}, format="json")
        assert res.status_code == 404


class TestAdminStats(AdminClientMixin):
    def test_counts(self):
        verified = _mk_user(status=VerificationStatus.VERIFIED)
        _mk_user(status=VerificationStatus.PENDING)
        _mk_user(is_banned=True, ban_reason="x")
        _mk_post(verified)
        _mk_post(verified, type="found", date_lost=None, date_found=timezone.now(), status="resolved")
        create_report(reporter=verified, reported_user_id=self.admin.id, reason="spam", description="x")

        body = self.client.get(reverse("admin-stats-list")).json()
        assert body["users"]["total"] == 3
        assert (body["users"]["verified"], body["users"]["pending"], body["users"]["unverified"], body["users"]["banned"]) == (1, 1, 1, 1)
        assert body["users"]["new_today"] == 3
        assert (body["posts"]["total"], body["posts"]["lost"], body["posts"]["found"], body["posts"]["resolved"]) == (2, 1, 1, 1)
        assert (body["reports"]["total"], body["reports"]["pending"]) == (1, 1)
        assert Report.objects.count() == 1
