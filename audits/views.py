from drf_spectacular.utils import OpenApiParameter, OpenApiResponse, OpenApiTypes, extend_schema, extend_schema_view
from rest_framework import mixins, viewsets

from common.schema import ErrorOut
from users.permissions import IsActiveMember

from .models import AuditAction
from .serializers import AuditLogOut
from .services import logs_visible_to


def _query(name, type_, description, **kwargs):
    return OpenApiParameter(name=name, location=OpenApiParameter.QUERY, type=type_, required=False, description=description, **kwargs)


@extend_schema_view(
    list=extend_schema(
        tags=["Audits"],
        summary="감사 로그 조회",
        description=(
            "일반 회원은 자신의 기록만, 관리자는 전체 기록을 봅니다.\n"
            "- `user_id` 는 관리자에게만 적용되고 일반 회원이 보내면 무시됩니다.\n"
            "- `since`/`until` 은 ISO8601 (예: `2025-09-15T08:30:00Z`)."
        ),
        operation_id="audits_list",
        parameters=[
            _query("action", OpenApiTypes.STR, "행위 코드", enum=AuditAction.values),
            _query("target_type", OpenApiTypes.STR, "user | post | comment | report"),
            _query("user_id", OpenApiTypes.UUID, "관리자 전용"),
            _query("since", OpenApiTypes.DATETIME, "이 시각 이후(포함)"),
            _query("until", OpenApiTypes.DATETIME, "이 시각 이전(포함)"),
        ],
        responses={200: OpenApiResponse(response=AuditLogOut(many=True)), 401: OpenApiResponse(response=ErrorOut), 403: OpenApiResponse(response=ErrorOut)},
    )
)
class AuditLogViewSet(mixins.ListModelMixin, viewsets.GenericViewSet):
    permission_classes = [IsActiveMember]
    serializer_class = AuditLogOut

    def get_queryset(self):
        params = self.request.query_params
        return logs_visible_to(
            self.request.user,
            action=params.get("action"),
            target_type=params.get("target_type"),
            user_id=params.get("user_id"),
            since=params.get("since"),
            until=params.get("until"),
        )
