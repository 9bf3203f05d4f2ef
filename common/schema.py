from drf_spectacular.utils import inline_serializer
from rest_framework import serializers

# Common
ErrorOut = inline_serializer(
    name="ErrorOut",
    fields={
        "detail": serializers.CharField(help_text="Human readable error message."),
        "code": serializers.CharField(required=False, help_text="기계 판독용 에러 코드(예: not_found, invalid_state)"),
    },
)

GateErrorOut = inline_serializer(
    name="GateErrorOut",
    fields={
        "detail": serializers.CharField(),
        "code": serializers.ChoiceField(choices=["verification_required", "account_suspended"]),
        "requires_verification": serializers.BooleanField(required=False),
        "verification_status": serializers.CharField(required=False),
        "ban_reason": serializers.CharField(required=False),
    },
)

SuspendedErrorOut = inline_serializer(
    name="SuspendedErrorOut",
    fields={
        "detail": serializers.CharField(),
        "code": serializers.CharField(default="account_suspended"),
        "ban_reason": serializers.CharField(),
    },
)

OkOut = inline_serializer(
    name="OkOut",
    fields={"ok": serializers.BooleanField()},
)

MessageOut = inline_serializer(
    name="MessageOut",
    fields={"message": serializers.CharField()},
)

DeletedOut = inline_serializer(
    name="DeletedOut",
    fields={"deleted": serializers.IntegerField(help_text="삭제된 행 수(대댓글 포함)")},
)

CountOut = inline_serializer(
    name="CountOut",
    fields={"count": serializers.IntegerField()},
)

# Auth
AuthOut = inline_serializer(
    name="AuthOut",
    fields={
        "message": serializers.CharField(),
        "user": serializers.DictField(help_text="MeOut 형태의 사용자 정보"),
        "access": serializers.CharField(),
        "refresh": serializers.CharField(),
    },
)

# Users
UserStatsOut = inline_serializer(
    name="UserStatsOut",
    fields={
        "total": serializers.IntegerField(),
        "lost": serializers.IntegerField(),
        "found": serializers.IntegerField(),
        "active": serializers.IntegerField(),
        "resolved": serializers.IntegerField(),
    },
)

# Admin
AdminStatsOut = inline_serializer(
    name="AdminStatsOut",
    fields={
        "users": serializers.DictField(child=serializers.IntegerField()),
        "posts": serializers.DictField(child=serializers.IntegerField()),
        "reports": serializers.DictField(child=serializers.IntegerField()),
    },
)
