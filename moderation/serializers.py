from rest_framework import serializers

from users.models import User


class AdminUserOut(serializers.ModelSerializer):
    """관리자 화면용. 공개 프로필과 달리 연락처와 인증 문서 참조를 모두 포함한다."""

    verified_by_id = serializers.UUIDField(read_only=True, allow_null=True)
    banned_by_id = serializers.UUIDField(read_only=True, allow_null=True)

    class Meta:
        model = User
        fields = (
            "id",
            "username",
            "email",
            "phone",
            "avatar",
            "role",
            "verification_status",
            "nid_front_image",
            "nid_back_image",
            "selfie_image",
            "rejection_reason",
            "verification_note",
            "verified_at",
            "verified_by_id",
            "is_banned",
            "ban_reason",
            "banned_at",
            "banned_by_id",
            "created_at",
            "updated_at",
        )
        read_only_fields = fields


class AdminUserDetailOut(serializers.Serializer):
    user = AdminUserOut()
    post_count = serializers.IntegerField()
    reports_received = serializers.IntegerField()
    reports_filed = serializers.IntegerField()


class ApproveIn(serializers.Serializer):
    note = serializers.CharField(required=False, allow_blank=True, default="", max_length=1000)


class ReasonIn(serializers.Serializer):
    # 공백 사유는 서비스에서 missing_reason 으로 거절
    reason = serializers.CharField(required=False, allow_blank=True, default="", max_length=1000)


class RemovedPostOut(serializers.Serializer):
    post_id = serializers.UUIDField()
    author_id = serializers.UUIDField()
    title = serializers.CharField()
