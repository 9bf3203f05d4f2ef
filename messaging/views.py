from django.core.exceptions import ValidationError as DjangoValidationError
from drf_spectacular.utils import OpenApiExample, OpenApiParameter, OpenApiResponse, OpenApiTypes, extend_schema
from rest_framework import status, viewsets
from rest_framework.decorators import action
from rest_framework.exceptions import ValidationError as DRFValidationError
from rest_framework.response import Response

from common.schema import CountOut, ErrorOut
from users.permissions import IsActiveMember

from . import services
from .serializers import ConversationOut, MessageIn, MessageOut


class MessageViewSet(viewsets.GenericViewSet):
    """
    /api/v1/messages/...
    - 인증 여부와 무관하게 활성 회원이면 사용 가능(정지 계정은 차단)
    """

    permission_classes = [IsActiveMember]
    serializer_class = MessageOut
    lookup_value_regex = "[0-9a-f-]{36}"

    @extend_schema(
        tags=["Messages"],
        summary="메시지 보내기",
        description="자기 자신에게는 보낼 수 없습니다. `post_id` 로 관련 게시글을 연결할 수 있습니다.",
        operation_id="messages_create",
        request=MessageIn,
        responses={201: MessageOut, 400: ErrorOut, 401: ErrorOut, 404: ErrorOut},
        examples=[OpenApiExample("요청 예시", value={"receiver_id": "11111111-1111-1111-1111-111111111111", "content": "I think I found your wallet."}, request_only=True)],
    )
    def create(self, request):
        ser = MessageIn(data=request.data)
        ser.is_valid(raise_exception=True)
        v = ser.validated_data
        try:
            message = services.send_message(sender=request.user, receiver_id=v["receiver_id"], content=v["content"], post_id=v.get("post_id"))
        except DjangoValidationError as e:
            raise DRFValidationError(getattr(e, "message_dict", None) or e.messages)
        return Response(MessageOut(message).data, status=status.HTTP_201_CREATED)

    @extend_schema(
        tags=["Messages"],
        summary="메시지 삭제(보낸 사람 전용)",
        operation_id="messages_destroy",
        parameters=[OpenApiParameter(name="pk", location=OpenApiParameter.PATH, type=OpenApiTypes.UUID, description="메시지 ID")],
        responses={204: OpenApiResponse(description="삭제됨"), 403: ErrorOut, 404: ErrorOut},
    )
    def destroy(self, request, pk=None):
        services.delete_message(actor=request.user, message_id=pk)
        return Response(status=status.HTTP_204_NO_CONTENT)

    @extend_schema(tags=["Messages"], summary="대화 목록", operation_id="messages_conversations", responses={200: ConversationOut(many=True), 401: ErrorOut})
    @action(detail=False, methods=["get"])
    def conversations(self, request):
        return Response(ConversationOut(services.conversations(request.user), many=True).data)

    @extend_schema(
        tags=["Messages"],
        summary="특정 사용자와의 대화",
        description="오래된 순. 조회 시 상대가 보낸 안 읽은 메시지를 읽음 처리합니다.",
        operation_id="messages_thread",
        parameters=[OpenApiParameter(name="user_id", location=OpenApiParameter.PATH, type=OpenApiTypes.UUID, description="상대 사용자 ID")],
        responses={200: MessageOut(many=True), 401: ErrorOut, 404: ErrorOut},
    )
    @action(detail=False, methods=["get"], url_path=r"with/(?P<user_id>[0-9a-f-]{36})")
    def thread(self, request, user_id=None):
        return Response(MessageOut(services.thread(request.user, user_id), many=True).data)

    @extend_schema(tags=["Messages"], summary="안 읽은 메시지 수", operation_id="messages_unread_count", responses={200: CountOut, 401: ErrorOut})
    @action(detail=False, methods=["get"], url_path="unread-count")
    def unread_count(self, request):
        return Response({"count": services.unread_count(request.user)})
