from rest_framework import serializers

from .models import Notification


class NotificationOut(serializers.ModelSerializer):
    from_user_id = serializers.UUIDField(read_only=True, allow_null=True)
    post_id = serializers.UUIDField(read_only=True, allow_null=True)
    comment_id = serializers.UUIDField(read_only=True, allow_null=True)

    class Meta:
        model = Notification
        fields = ("id", "type", "title", "message", "is_read", "from_user_id", "post_id", "comment_id", "link", "created_at")


class MarkReadIn(serializers.Serializer):
    ids = serializers.ListField(child=serializers.UUIDField(), allow_empty=False)
