import uuid

from django.conf import settings
from django.db import models


class AuditAction(models.TextChoices):
    REGISTER = "register", "Register"
    LOGIN = "login", "Login"
    LOGOUT = "logout", "Logout"
    VERIFICATION_SUBMIT = "verification_submit", "Verification Submit"
    VERIFICATION_APPROVE = "verification_approve", "Verification Approve"
    VERIFICATION_REJECT = "verification_reject", "Verification Reject"
    BAN_USER = "ban_user", "Ban User"
    UNBAN_USER = "unban_user", "Unban User"
    CREATE_POST = "create_post", "Create Post"
    UPDATE_POST = "update_post", "Update Post"
    DELETE_POST = "delete_post", "Delete Post"
    REMOVE_POST = "remove_post", "Remove Post (admin)"
    CREATE_COMMENT = "create_comment", "Create Comment"
    DELETE_COMMENT = "delete_comment", "Delete Comment"
    REPORT_USER = "report_user", "Report User"
    REPORT_POST = "report_post", "Report Post"
    UPDATE_REPORT = "update_report", "Update Report"


class AuditLog(models.Model):
    # IP/UA 원문은 저장하지 않는다(audits.utils.keyed_digest)
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    user = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="audit_logs", db_index=True)
    action = models.CharField(max_length=32, choices=AuditAction.choices, db_index=True)
    target_type = models.CharField(max_length=32, blank=True, default="", db_index=True)  # "post", "comment", "user", "report"
    target_id = models.UUIDField(null=True, blank=True, db_index=True)
    ip_hash = models.CharField(max_length=64, null=True, blank=True)
    ua_hash = models.CharField(max_length=64, null=True, blank=True)
    extra = models.JSONField(default=dict, blank=True)
    created_at = models.DateTimeField(auto_now_add=True, db_index=True)

    class Meta:
        db_table = "audit_logs"
        indexes = [
            models.Index(fields=["user", "-created_at"], name="idx_audit_user_created"),
            models.Index(fields=["action", "-created_at"], name="idx_audit_action_created"),
            models.Index(fields=["target_type", "target_id", "-created_at"], name="idx_audit_target_created"),
        ]

    def __str__(self):
        target = f" {self.target_type}:{self.target_id}" if self.target_type else ""
        return f"{self.action} by {self.user_id}{target}"
