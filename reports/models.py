import uuid

from django.conf import settings
from django.db import models

User = settings.AUTH_USER_MODEL


class ReportReason(models.TextChoices):
    FAKE_POST = "fake_post", "Fake post"
    SCAM = "scam", "Scam"
    INAPPROPRIATE_CONTENT = "inappropriate_content", "Inappropriate content"
    HARASSMENT = "harassment", "Harassment"
    SPAM = "spam", "Spam"
    STOLEN_ITEM = "stolen_item", "Stolen item"
    FALSE_CLAIM = "false_claim", "False claim"
    IMPERSONATION = "impersonation", "Impersonation"
    OTHER = "other", "Other"


class ReportStatus(models.TextChoices):
    PENDING = "pending", "Pending"
    REVIEWING = "reviewing", "Reviewing"
    RESOLVED = "resolved", "Resolved"
    DISMISSED = "dismissed", "Dismissed"


class ActionTaken(models.TextChoices):
    NONE = "none", "None"
    WARNING = "warning", "Warning"
    POST_REMOVED = "post_removed", "Post removed"
    USER_BANNED = "user_banned", "User banned"  # 기록용. 실제 정지는 ban 흐름으로 별도 수행
    OTHER = "other", "Other"


class TargetType(models.TextChoices):
    USER = "user", "User"
    POST = "post", "Post"


class Report(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    reporter = models.ForeignKey(User, on_delete=models.CASCADE, related_name="reports_filed", db_index=True)

    # 대상은 둘 중 하나. 대상이 삭제돼도 신고 이력은 남긴다(target_type 으로 종류 보존)
    target_type = models.CharField(max_length=8, choices=TargetType.choices)
    reported_user = models.ForeignKey(User, on_delete=models.SET_NULL, null=True, blank=True, related_name="reports_received")
    reported_post = models.ForeignKey("posts.Post", on_delete=models.SET_NULL, null=True, blank=True, related_name="reports")

    reason = models.CharField(max_length=32, choices=ReportReason.choices)
    description = models.TextField(max_length=1000)
    evidence = models.JSONField(default=list, blank=True)

    status = models.CharField(max_length=16, choices=ReportStatus.choices, default=ReportStatus.PENDING, db_index=True)
    reviewed_by = models.ForeignKey(User, on_delete=models.SET_NULL, null=True, blank=True, related_name="+")
    reviewed_at = models.DateTimeField(null=True, blank=True)
    admin_note = models.TextField(blank=True, default="")
    action_taken = models.CharField(max_length=16, choices=ActionTaken.choices, default=ActionTaken.NONE)

    created_at = models.DateTimeField(auto_now_add=True, db_index=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = "reports"
        ordering = ("-created_at",)
        indexes = [
            models.Index(fields=["reporter", "-created_at"], name="idx_report_reporter_created"),
            models.Index(fields=["status", "-created_at"], name="idx_report_status_created"),
            models.Index(fields=["reported_user"], name="idx_report_user"),
            models.Index(fields=["reported_post"], name="idx_report_post"),
        ]

    def __str__(self):
        return f"Report<{self.id}> {self.target_type}:{self.reason} [{self.status}]"

    @property
    def target_id(self):
        return self.reported_user_id if self.target_type == TargetType.USER else self.reported_post_id
