import uuid
from datetime import timedelta

from django.conf import settings
from django.db import models
from django.utils import timezone


def retention_cutoff(now=None):
    days = getattr(settings, "NOTIFICATION_RETENTION_DAYS", 30)
    return (now or timezone.now()) - timedelta(days=days)


class NotificationQuerySet(models.QuerySet):
    def live(self):
        # 보존 기간이 지난 알림은 purge 전이라도 노출하지 않는다
        return self.filter(created_at__gte=retention_cutoff())

    def expired(self):
        return self.filter(created_at__lt=retention_cutoff())


class Notification(models.Model):
    class Type(models.TextChoices):
        COMMENT = "comment", "Comment"
        REPLY = "reply", "Reply"
        VERIFICATION_APPROVED = "verification_approved", "Verification approved"
        VERIFICATION_REJECTED = "verification_rejected", "Verification rejected"
        POST_RESOLVED = "post_resolved", "Post resolved"
        SYSTEM = "system", "System"

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    user = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="notifications")
    type = models.CharField(max_length=32, choices=Type.choices)
    title = models.CharField(max_length=200)
    message = models.TextField()
    is_read = models.BooleanField(default=False)
    from_user = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.SET_NULL, null=True, blank=True, related_name="+")
    post = models.ForeignKey("posts.Post", on_delete=models.SET_NULL, null=True, blank=True, related_name="+")
    comment = models.ForeignKey("comments.Comment", on_delete=models.SET_NULL, null=True, blank=True, related_name="+")
    link = models.CharField(max_length=512, blank=True, default="")
    created_at = models.DateTimeField(default=timezone.now, db_index=True)

    objects = NotificationQuerySet.as_manager()

    class Meta:
        db_table = "notifications"
        ordering = ("-created_at",)
        indexes = [models.Index(fields=["user", "is_read", "-created_at"], name="idx_notif_user_read_created")]

    def __str__(self):
        return f"{self.type} -> {self.user_id}"
