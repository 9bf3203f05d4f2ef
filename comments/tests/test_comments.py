import uuid
from datetime import timedelta

import pytest
from django.contrib.auth import get_user_model
from django.urls import reverse
from django.utils import timezone
from rest_framework.test import APIClient

from audits.models import AuditAction, AuditLog
from comments.models import Comment
from comments.services import comment_tree, delete_comment
from notifications.models import Notification
from posts.models import Post
from users.models import VerificationStatus

pytestmark = pytest.mark.django_db

User = get_user_model()


def _mk_user(status=VerificationStatus.VERIFIED, **extra):
    name = f"u{uuid.uuid4().hex[:8]}"
    return User.objects.create_user(email=f"{name}@example.com", username=name, password="secret12", verification_status=status, **extra)


def _mk_post(author, title="Lost umbrella"):
    return Post.objects.create(
        author=author,
        title=title,
        description="Blue umbrella",
        type="lost",
        category="other",
        date_lost=timezone.now(),
        location_address="Dhaka, Banani",
    )


class TestCreateComment:
    def setup_method(self):
        self.client = APIClient()
        self.owner = _mk_user()
        self.post = _mk_post(self.owner)
        self.url = reverse("post-comments-list", kwargs={"post_id": str(self.post.id)})

    def test_verified_member_comments_and_owner_is_notified(self):
        commenter = _mk_user()
        self.client.force_authenticate(user=commenter)
        res = self.client.post(self.url, {"content": "  Saw it at the bus stop  "}, format="json")
        assert res.status_code == 201, res.content

        body = res.json()
        assert body["content"] == "Saw it at the bus stop"
        assert body["parent_id"] is None
        assert body["author"] == {"id": str(commenter.id), "username": commenter.username, "avatar": ""}

        n = Notification.objects.get(user=self.owner)
        assert n.type == Notification.Type.COMMENT
        assert n.title == "New Comment"
        assert n.message == f'{commenter.username} commented on your post "Lost umbrella"'
        assert n.from_user_id == commenter.id
        assert n.link == f"/post/{self.post.id}"
        assert AuditLog.objects.filter(action=AuditAction.CREATE_COMMENT, user=commenter).exists()

    def test_owner_commenting_on_own_post_is_not_notified(self):
        self.client.force_authenticate(user=self.owner)
        assert self.client.post(self.url, {"content": "Still missing"}, format="json").status_code == 201
        assert Notification.objects.count() == 0

    @pytest.mark.parametrize("status", [VerificationStatus.UNVERIFIED, VerificationStatus.PENDING, VerificationStatus.REJECTED])
    def test_unverified_gated(self, status):
        self.client.force_authenticate(user=_mk_user(status=status))
        res = self.client.post(self.url, {"content": "hi"}, format="json")
        assert res.status_code == 403
        body = res.json()
        assert body["code"] == "verification_required"
        assert body["verification_status"] == status
        assert "to comment" in body["detail"]
        assert Comment.objects.count() == 0

    def test_blank_content(self):
        self.client.force_authenticate(user=_mk_user())
        assert self.client.post(self.url, {"content": "   "}, format="json").status_code == 400

    def test_too_long_content(self):
        self.client.force_authenticate(user=_mk_user())
        assert self.client.post(self.url, {"content": "x" * 501}, format="json").status_code == 400

    def test_unknown_post(self):
        self.client.force_authenticate(user=_mk_user())
        url = reverse("post-comments-list", kwargs={"post_id": str(uuid.uuid4())})
        assert self.client.post(url, {"content": "hello"}, format="json").status_code == 404


class TestReplies:
    def setup_method(self):
        self.client = APIClient()
        self.owner = _mk_user()
        self.post = _mk_post(self.owner)
        self.top_author = _mk_user()
        self.top = Comment.objects.create(post=self.post, author=self.top_author, content="top")
        Notification.objects.all().delete()

    def test_reply_notifies_parent_author_only(self):
        replier = _mk_user()
        self.client.force_authenticate(user=replier)
        res = self.client.post(reverse("comment-replies", kwargs={"pk": str(self.top.id)}), {"content": "me too"}, format="json")
        assert res.status_code == 201, res.content
        assert res.json()["parent_id"] == str(self.top.id)

        notes = list(Notification.objects.all())
        assert len(notes) == 1
        assert notes[0].user_id == self.top_author.id
        assert notes[0].type == Notification.Type.REPLY
        assert notes[0].message == f"{replier.username} replied to your comment"

    def test_reply_via_parent_field(self):
        self.client.force_authenticate(user=_mk_user())
        url = reverse("post-comments-list", kwargs={"post_id": str(self.post.id)})
        res = self.client.post(url, {"content": "via parent", "parent": str(self.top.id)}, format="json")
        assert res.status_code == 201
        assert res.json()["parent_id"] == str(self.top.id)

    def test_reply_to_reply_rejected(self):
        reply = Comment.objects.create(post=self.post, author=self.owner, parent=self.top, content="r1")
        self.client.force_authenticate(user=_mk_user())
        res = self.client.post(reverse("comment-replies", kwargs={"pk": str(reply.id)}), {"content": "deeper"}, format="json")
        assert res.status_code == 400
        assert "parent" in res.json()

    def test_parent_from_other_post_rejected(self):
        other_post = _mk_post(self.owner, title="Other")
        self.client.force_authenticate(user=_mk_user())
        url = reverse("post-comments-list", kwargs={"post_id": str(other_post.id)})
        res = self.client.post(url, {"content": "cross", "parent": str(self.top.id)}, format="json")
        assert res.status_code == 400

    def test_reply_gated(self):
        self.client.force_authenticate(user=_mk_user(status=VerificationStatus.PENDING))
        res = self.client.post(reverse("comment-replies", kwargs={"pk": str(self.top.id)}), {"content": "x"}, format="json")
        assert res.status_code == 403
        assert res.json()["code"] == "verification_required"

    def test_list_replies_oldest_first(self):
        now = timezone.now()
        r1 = Comment.objects.create(post=self.post, author=self.owner, parent=self.top, content="first")
        r2 = Comment.objects.create(post=self.post, author=self.owner, parent=self.top, content="second")
        Comment.objects.filter(pk=r1.pk).update(created_at=now - timedelta(minutes=2))
        Comment.objects.filter(pk=r2.pk).update(created_at=now - timedelta(minutes=1))

        res = self.client.get(reverse("comment-replies", kwargs={"pk": str(self.top.id)}))
        assert res.status_code == 200
        assert [c["content"] for c in res.json()] == ["first", "second"]


class TestCommentTree:
    def test_tree_ordering(self):
        owner = _mk_user()
        post = _mk_post(owner)
        now = timezone.now()

        older = Comment.objects.create(post=post, author=owner, content="older")
        newer = Comment.objects.create(post=post, author=owner, content="newer")
        late_reply = Comment.objects.create(post=post, author=owner, parent=older, content="late reply")
        early_reply = Comment.objects.create(post=post, author=owner, parent=older, content="early reply")
        for c, minutes in ((older, 10), (newer, 5), (early_reply, 8), (late_reply, 1)):
            Comment.objects.filter(pk=c.pk).update(created_at=now - timedelta(minutes=minutes))

        tree = comment_tree(post.id)
        assert [c.content for c in tree] == ["newer", "older"]
        assert [r.content for r in tree[1].reply_list] == ["early reply", "late reply"]
        assert tree[0].reply_list == []

        res = APIClient().get(reverse("post-comments-list", kwargs={"post_id": str(post.id)}))
        assert res.status_code == 200
        assert [r["content"] for r in res.json()[1]["replies"]] == ["early reply", "late reply"]


class TestDeleteComment:
    def setup_method(self):
        self.client = APIClient()
        self.owner = _mk_user()
        self.post = _mk_post(self.owner)
        self.top = Comment.objects.create(post=self.post, author=self.owner, content="top")

    def test_delete_with_replies_counts_all(self):
        other = _mk_user()
        for i in range(3):
            Comment.objects.create(post=self.post, author=other, parent=self.top, content=f"r{i}")
        sibling = Comment.objects.create(post=self.post, author=other, content="sibling")

        self.client.force_authenticate(user=self.owner)
        res = self.client.delete(reverse("comment-detail", kwargs={"pk": str(self.top.id)}))
        assert res.status_code == 200
        assert res.json() == {"deleted": 4}
        assert list(Comment.objects.values_list("id", flat=True)) == [sibling.id]
        assert AuditLog.objects.filter(action=AuditAction.DELETE_COMMENT, user=self.owner).exists()

    def test_delete_reply_only(self):
        reply = Comment.objects.create(post=self.post, author=self.owner, parent=self.top, content="r")
        assert delete_comment(actor=self.owner, comment_id=reply.id) == 1
        assert Comment.objects.filter(pk=self.top.pk).exists()

    def test_delete_keeps_notifications(self):
        replier = _mk_user()
        self.client.force_authenticate(user=replier)
        self.client.post(reverse("comment-replies", kwargs={"pk": str(self.top.id)}), {"content": "r"}, format="json")
        assert Notification.objects.filter(user=self.owner).count() == 1

        self.client.force_authenticate(user=self.owner)
        assert self.client.delete(reverse("comment-detail", kwargs={"pk": str(self.top.id)})).json() == {"deleted": 2}
        assert Notification.objects.get(user=self.owner).comment_id is None

    def test_non_author_forbidden(self):
        self.client.force_authenticate(user=_mk_user())
        res = self.client.delete(reverse("comment-detail", kwargs={"pk": str(self.top.id)}))
        assert res.status_code == 403
        assert Comment.objects.filter(pk=self.top.pk).exists()

    def test_missing_comment(self):
        self.client.force_authenticate(user=self.owner)
        assert self.client.delete(reverse("comment-detail", kwargs={"pk": str(uuid.uuid4())})).status_code == 404
