from rest_framework import serializers

from .models import ActionTaken, Report, ReportReason, ReportStatus


class ReportCreateIn(serializers.Serializer):
    reported_user_id = serializers.UUIDField(required=False, allow_null=True)
    reported_post_id = serializers.UUIDField(required=False, allow_null=True)
    reason = serializers.ChoiceField(choices=ReportReason.choices)
    description = serializers.CharField(max_length=1000)
    evidence = serializers.ListField(child=serializers.CharField(max_length=512), required=False, allow_empty=True, default=list)


class ReportUpdateIn(serializers.Serializer):
    status = serializers.ChoiceField(choices=ReportStatus.choices, required=False)
    admin_note = serializers.CharField(required=False, allow_blank=True, max_length=2000)
    action_taken = serializers.ChoiceField(choices=ActionTaken.choices, required=False)


class ReportCreatedOut(serializers.Serializer):
    id = serializers.UUIDField()
    status = serializers.CharField()


class ReportOut(serializers.ModelSerializer):
    reporter_id = serializers.UUIDField(read_only=True)
    reported_user_id = serializers.UUIDField(read_only=True, allow_null=True)
    reported_post_id = serializers.UUIDField(read_only=True, allow_null=True)
    reported_username = serializers.CharField(source="reported_user.username", read_only=True, default=None)
    reported_post_title = serializers.CharField(source="reported_post.title", read_only=True, default=None)

    class Meta:
        model = Report
        fields = [
            "id",
            "reporter_id",
            "target_type",
            "reported_user_id",
            "reported_username",
            "reported_post_id",
            "reported_post_title",
            "reason",
            "description",
            "evidence",
            "status",
            "action_taken",
            "created_at",
        ]
        read_only_fields = fields


class ReportAdminOut(ReportOut):
    reviewed_by_id = serializers.UUIDField(read_only=True, allow_null=True)

    class Meta(ReportOut.Meta):
        fields = ReportOut.Meta.fields + ["admin_note", "reviewed_by_id", "reviewed_at", "updated_at"]
        read_only_fields = fields
