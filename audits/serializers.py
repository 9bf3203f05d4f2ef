from rest_framework import serializers

from .models import AuditLog


class AuditLogOut(serializers.ModelSerializer):
    user_id = serializers.UUIDField(read_only=True)
    action_label = serializers.CharField(source="get_action_display", read_only=True)

    class Meta:
        model = AuditLog
        fields = ["id", "user_id", "action", "action_label", "target_type", "target_id", "extra", "created_at"]
        read_only_fields = fields
