import uuid
from datetime import timedelta

import pytest
from django.contrib.auth import get_user_model
from django.urls import reverse
from django.utils import timezone
from rest_framework.test import APIClient

from audits.models import AuditAction, AuditLog
from posts.models import Post
from posts.visibility import AUTHOR_EMAIL_MASK, EMAIL_MASK, PHONE_MASK
from users.models import VerificationStatus

pytestmark = pytest.mark.django_db

User = get_user_model()


def _mk_user(status=VerificationStatus.VERIFIED, **extra):
    name = f"u{uuid.uuid4().hex[:8]}"
    return User.objects.create_user(email=f"{name}@example.com", username=name, password="secret12", verification_status=status, phone="01700000000", **extra)


def _mk_post(author, **extra):
    values = dict(
        title="Lost black wallet",
        description="Call 01712345678 or owner@example.com",
        type="lost",
        category="documents",
        date_lost=timezone.now() - timedelta(days=1),
        location_address="Sylhet, Shahjalal Road, House 12",
        latitude=24.89,
        longitude=91.87,
        tags=["wallet", "nid"],
    )
    values.update(extra)
    return Post.objects.create(author=author, **values)


PAYLOAD = {
    "title": "Found a cat",
    "description": "Orange cat near the station",
    "type": "found",
    "category": "pets",
    "date_found": "2025-09-15T08:30:00Z",
    "location_address": "Dhaka, Mirpur 10, Road 3",
    "latitude": 23.8,
    "longitude": 90.36,
    "tags": ["cat", "cat", "orange"],
}


class TestCreatePost:
    def setup_method(self):
        self.client = APIClient()
        self.url = reverse("posts-list")

    def test_verified_author_creates(self):
        u = _mk_user()
        self.client.force_authenticate(user=u)
        res = self.client.post(self.url, PAYLOAD, format="json")
        assert res.status_code == 201, res.content

        body = res.json()
        assert body["is_censored"] is False
        assert body["author"]["id"] == str(u.id)
        assert body["location"]["address"] == "Dhaka, Mirpur 10, Road 3"
        assert body["tags"] == ["cat", "orange"]
        assert body["status"] == "active"
        assert AuditLog.objects.filter(action=AuditAction.CREATE_POST, user=u).exists()

    @pytest.mark.parametrize(
        "status,fragment",
        [
            (VerificationStatus.UNVERIFIED, "You need to be a verified user to create posts"),
            (VerificationStatus.PENDING, "Your verification is pending"),
            (VerificationStatus.REJECTED, "Your verification was rejected"),
        ],
    )
    def test_unverified_author_gated(self, status, fragment):
        u = _mk_user(status=status)
        self.client.force_authenticate(user=u)
        res = self.client.post(self.url, PAYLOAD, format="json")
        assert res.status_code == 403

        body = res.json()
        assert body["code"] == "verification_required"
        assert body["requires_verification"] is True
        assert body["verification_status"] == status
        assert fragment in body["detail"]
        assert Post.objects.count() == 0

    def test_gate_runs_before_validation(self):
        self.client.force_authenticate(user=_mk_user(status=VerificationStatus.PENDING))
        res = self.client.post(self.url, {"title": ""}, format="json")
        assert res.status_code == 403

    def test_banned_author(self):
        self.client.force_authenticate(user=_mk_user(is_banned=True, ban_reason="spam"))
        res = self.client.post(self.url, PAYLOAD, format="json")
        assert res.status_code == 403
        assert res.json()["code"] == "account_suspended"

    def test_anonymous_cannot_create(self):
        assert self.client.post(self.url, PAYLOAD, format="json").status_code == 401

    def test_missing_type_date(self):
        self.client.force_authenticate(user=_mk_user())
        payload = {**PAYLOAD, "date_found": None}
        res = self.client.post(self.url, payload, format="json")
        assert res.status_code == 400
        assert "date_found" in res.json()

    def test_foreign_date_dropped(self):
        self.client.force_authenticate(user=_mk_user())
        payload = {**PAYLOAD, "date_lost": "2025-09-01T00:00:00Z"}
        res = self.client.post(self.url, payload, format="json")
        assert res.status_code == 201
        post = Post.objects.get(pk=res.json()["id"])
        assert post.date_lost is None and post.date_found is not None

    def test_too_many_images(self):
        self.client.force_authenticate(user=_mk_user())
        payload = {**PAYLOAD, "images": [f"img/{i}.png" for i in range(6)]}
        res = self.client.post(self.url, payload, format="json")
        assert res.status_code == 400


class TestReadPosts:
    def setup_method(self):
        self.client = APIClient()
        self.author = _mk_user()
        self.post = _mk_post(self.author)

    def test_anonymous_list_is_censored(self):
        res = self.client.get(reverse("posts-list"))
        assert res.status_code == 200

        body = res.json()
        assert body["viewer_verified"] is False
        item = body["results"][0]
        assert item["is_censored"] is True
        assert item["location"] == {"address": "Sylhet, Shahjalal Road...", "latitude": None, "longitude": None}
        assert item["description"] == f"Call {PHONE_MASK} or {EMAIL_MASK}"
        assert item["author"]["email"] == AUTHOR_EMAIL_MASK
        assert item["title"] == "Lost black wallet"

    @pytest.mark.parametrize("status", [VerificationStatus.UNVERIFIED, VerificationStatus.PENDING, VerificationStatus.REJECTED])
    def test_unverified_member_detail_is_censored(self, status):
        self.client.force_authenticate(user=_mk_user(status=status))
        res = self.client.get(reverse("posts-detail", kwargs={"pk": str(self.post.id)}))
        assert res.status_code == 200
        assert res.json()["is_censored"] is True
        assert res.json()["location"]["latitude"] is None

    def test_verified_member_sees_everything(self):
        self.client.force_authenticate(user=_mk_user())
        res = self.client.get(reverse("posts-list"))
        body = res.json()
        assert body["viewer_verified"] is True
        item = body["results"][0]
        assert item["is_censored"] is False
        assert item["location"]["latitude"] == 24.89
        assert item["author"]["email"] == self.author.email
        assert "01712345678" in item["description"]

    def test_verification_change_applies_on_next_read(self):
        viewer = _mk_user(status=VerificationStatus.PENDING)
        self.client.force_authenticate(user=viewer)
        url = reverse("posts-detail", kwargs={"pk": str(self.post.id)})
        assert self.client.get(url).json()["is_censored"] is True

        User.objects.filter(pk=viewer.pk).update(verification_status=VerificationStatus.VERIFIED)
        assert self.client.get(url).json()["is_censored"] is False

    def test_unknown_post(self):
        res = self.client.get(reverse("posts-detail", kwargs={"pk": str(uuid.uuid4())}))
        assert res.status_code == 404
        assert res.json()["code"] == "not_found"

    def test_filters_and_search(self):
        _mk_post(self.author, title="Found keys", type="found", category="keys", date_lost=None, date_found=timezone.now(), tags=["keychain"])
        url = reverse("posts-list")

        def titles(res):
            return [p["title"] for p in res.json()["results"]]

        assert titles(self.client.get(url, {"type": "found"})) == ["Found keys"]
        assert titles(self.client.get(url, {"category": "documents"})) == ["Lost black wallet"]
        assert titles(self.client.get(url, {"search": "KEYCHAIN"})) == ["Found keys"]
        assert titles(self.client.get(url, {"search": "wallet"})) == ["Lost black wallet"]
        assert len(titles(self.client.get(url, {"author_id": str(self.author.id)}))) == 2

    def test_by_user(self):
        other = _mk_user()
        _mk_post(other, title="Other post")
        res = self.client.get(reverse("posts-by-user", kwargs={"user_id": str(other.id)}))
        assert res.status_code == 200
        assert [p["title"] for p in res.json()["results"]] == ["Other post"]


class TestUpdateDeletePost:
    def setup_method(self):
        self.client = APIClient()
        self.author = _mk_user()
        self.post = _mk_post(self.author)
        self.url = reverse("posts-detail", kwargs={"pk": str(self.post.id)})

    def test_owner_updates_status(self):
        self.client.force_authenticate(user=self.author)
        res = self.client.patch(self.url, {"status": "resolved", "title": "Wallet (found!)"}, format="json")
        assert res.status_code == 200, res.content
        self.post.refresh_from_db()
        assert (self.post.status, self.post.title) == ("resolved", "Wallet (found!)")

    def test_switching_type_requires_matching_date(self):
        self.client.force_authenticate(user=self.author)
        res = self.client.patch(self.url, {"type": "found"}, format="json")
        assert res.status_code == 400

    def test_non_owner_forbidden(self):
        self.client.force_authenticate(user=_mk_user())
        assert self.client.patch(self.url, {"title": "hijack"}, format="json").status_code == 403
        assert self.client.delete(self.url).status_code == 403

    def test_owner_deletes(self):
        self.client.force_authenticate(user=self.author)
        res = self.client.delete(self.url)
        assert res.status_code == 204
        assert not Post.objects.filter(pk=self.post.pk).exists()
        assert AuditLog.objects.filter(action=AuditAction.DELETE_POST, user=self.author).exists()
