from drf_spectacular.utils import OpenApiExample, OpenApiParameter, OpenApiResponse, OpenApiTypes, extend_schema, extend_schema_view, inline_serializer
from rest_framework import mixins, serializers, status, viewsets
from rest_framework.decorators import action
from rest_framework.response import Response

from common.exceptions import NotFound
from common.schema import CountOut, ErrorOut
from users.permissions import IsActiveMember

from . import services
from .models import Notification
from .serializers import MarkReadIn, NotificationOut

UpdatedOut = inline_serializer(name="MarkReadOut", fields={"updated": serializers.IntegerField(help_text="읽음 처리된 개수")})


@extend_schema_view(
    list=extend_schema(
        tags=["Notifications"],
        summary="내 알림 목록",
        description=(
            "현재 사용자에게 발송된 알림을 최신순으로 반환합니다. 보존 기간(30일)이 지난 알림은 제외.\n"
            "- `read` 쿼리: `true` → 읽은 것만, `false` → 읽지 않은 것만, 생략 시 전체"
        ),
        operation_id="notifications_list",
        parameters=[
            OpenApiParameter(name="read", location=OpenApiParameter.QUERY, required=False, type=OpenApiTypes.STR, description="읽음 필터: `true` | `false`", enum=["true", "false"])
        ],
        responses={200: OpenApiResponse(response=NotificationOut(many=True)), 401: OpenApiResponse(response=ErrorOut)},
    ),
    destroy=extend_schema(
        tags=["Notifications"],
        summary="알림 삭제",
        description="본인 알림만 삭제할 수 있습니다. 타인의 알림 ID 는 404.",
        operation_id="notifications_destroy",
        parameters=[OpenApiParameter(name="pk", location=OpenApiParameter.PATH, type=OpenApiTypes.UUID, description="알림 ID (UUID)")],
        responses={204: OpenApiResponse(description="삭제됨"), 401: OpenApiResponse(response=ErrorOut), 404: OpenApiResponse(response=ErrorOut)},
    ),
)
class NotificationViewSet(mixins.ListModelMixin, viewsets.GenericViewSet):
    permission_classes = [IsActiveMember]
    serializer_class = NotificationOut
    lookup_value_regex = "[0-9a-f-]{36}"

    def get_queryset(self):
        qs = Notification.objects.live().filter(user=self.request.user).order_by("-created_at")
        read = self.request.query_params.get("read")
        if read == "true":
            qs = qs.filter(is_read=True)
        elif read == "false":
            qs = qs.filter(is_read=False)
        return qs

    def destroy(self, request, pk=None):
        deleted, _ = Notification.objects.filter(user=request.user, pk=pk).delete()
        if not deleted:
            raise NotFound("Notification not found.")
        return Response(status=status.HTTP_204_NO_CONTENT)

    @extend_schema(tags=["Notifications"], summary="안 읽은 알림 수", operation_id="notifications_unread_count", responses={200: CountOut, 401: ErrorOut})
    @action(detail=False, methods=["GET"], url_path="unread-count")
    def unread_count(self, request):
        return Response({"count": services.unread_count(request.user)})

    @extend_schema(
        tags=["Notifications"],
        summary="알림 읽음 처리",
        description="요청한 알림 ID 목록을 읽음 처리합니다. 사용자 본인 소유의 알림만 처리됩니다.",
        operation_id="notifications_mark_read",
        request=MarkReadIn,
        responses={200: OpenApiResponse(response=UpdatedOut), 400: OpenApiResponse(response=ErrorOut), 401: OpenApiResponse(response=ErrorOut)},
        examples=[
            OpenApiExample("요청 예시", value={"ids": ["11111111-1111-1111-1111-111111111111"]}, request_only=True),
            OpenApiExample("응답 예시", value={"updated": 1}, response_only=True),
        ],
    )
    @action(detail=False, methods=["POST"])
    def mark_read(self, request):
        ser = MarkReadIn(data=request.data)
        ser.is_valid(raise_exception=True)
        return Response({"updated": services.mark_read(request.user, ser.validated_data["ids"])})

    @extend_schema(tags=["Notifications"], summary="모든 알림 읽음 처리", operation_id="notifications_mark_all_read", request=None, responses={200: OpenApiResponse(response=UpdatedOut), 401: ErrorOut})
    @action(detail=False, methods=["POST"], url_path="mark-all-read")
    def mark_all_read(self, request):
        return Response({"updated": services.mark_all_read(request.user)})
