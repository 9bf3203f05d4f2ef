from django.core.exceptions import ValidationError as DjangoValidationError
from drf_spectacular.utils import OpenApiExample, OpenApiParameter, OpenApiResponse, OpenApiTypes, extend_schema, extend_schema_view
from rest_framework import status, viewsets
from rest_framework.decorators import action
from rest_framework.exceptions import ValidationError as DRFValidationError
from rest_framework.response import Response

from audits.models import AuditAction
from audits.services import write_audit_log
from common.exceptions import NotFound
from common.schema import DeletedOut, ErrorOut, GateErrorOut
from posts.models import Post
from users.permissions import ReadOnlyOrActiveMember
from users.services.gating import GatedAction, require_verified

from .serializers import CommentCreateIn, CommentOut, CommentTreeOut
from .services import comment_tree, create_comment, delete_comment, get_comment


def _create(request, *, post_id, parent_id=None):
    require_verified(request.user.pk, GatedAction.CREATE_COMMENT)
    ser = CommentCreateIn(data=request.data)
    ser.is_valid(raise_exception=True)
    try:
        comment = create_comment(author=request.user, post_id=post_id, content=ser.validated_data["content"], parent_id=parent_id or ser.validated_data.get("parent"))
    except DjangoValidationError as e:
        raise DRFValidationError(getattr(e, "message_dict", None) or e.messages)
    write_audit_log(
        action=AuditAction.CREATE_COMMENT,
        user=request.user,
        target_type="comment",
        target_id=str(comment.pk),
        request=request,
        extra={"post_id": str(comment.post_id), "parent_id": str(comment.parent_id or "")},
    )
    return Response(CommentOut(comment).data, status=status.HTTP_201_CREATED)


@extend_schema_view(
    list=extend_schema(
        tags=["Comments"],
        summary="게시글 댓글 트리",
        description="최상위 댓글은 최신순, 각 댓글의 `replies` 는 오래된 순입니다. 익명 열람 가능.",
        operation_id="post_comments_list",
        parameters=[OpenApiParameter(name="post_id", location=OpenApiParameter.PATH, type=OpenApiTypes.UUID, description="대상 게시글 ID (UUID)")],
        responses={200: OpenApiResponse(response=CommentTreeOut(many=True)), 404: OpenApiResponse(response=ErrorOut)},
    ),
    create=extend_schema(
        tags=["Comments"],
        summary="게시글에 댓글 작성(인증 회원 전용)",
        description="`parent` 를 주면 해당 최상위 댓글에 대한 대댓글이 됩니다(같은 게시글, 1단계까지만).",
        operation_id="post_comments_create",
        parameters=[OpenApiParameter(name="post_id", location=OpenApiParameter.PATH, type=OpenApiTypes.UUID, description="대상 게시글 ID (UUID)")],
        request=CommentCreateIn,
        responses={
            201: OpenApiResponse(response=CommentOut, description="생성된 댓글"),
            400: OpenApiResponse(response=ErrorOut),
            401: OpenApiResponse(response=ErrorOut),
            403: OpenApiResponse(response=GateErrorOut, description="verification_required | account_suspended"),
            404: OpenApiResponse(response=ErrorOut),
        },
        examples=[OpenApiExample("요청 예시", value={"content": "I think I saw this near the bus stop."}, request_only=True)],
    ),
)
class PostCommentViewSet(viewsets.GenericViewSet):
    """
    /api/v1/posts/{post_id}/comments/
    """

    permission_classes = [ReadOnlyOrActiveMember]
    serializer_class = CommentTreeOut

    def list(self, request, post_id=None):
        if not Post.objects.filter(pk=post_id).exists():
            raise NotFound("Post not found.")
        return Response(CommentTreeOut(comment_tree(post_id), many=True).data)

    def create(self, request, post_id=None):
        return _create(request, post_id=post_id)


@extend_schema_view(
    retrieve=extend_schema(
        tags=["Comments"],
        summary="댓글 단건 조회",
        operation_id="comments_retrieve",
        parameters=[OpenApiParameter(name="pk", location=OpenApiParameter.PATH, type=OpenApiTypes.UUID, description="댓글 ID (UUID)")],
        responses={200: OpenApiResponse(response=CommentOut), 404: OpenApiResponse(response=ErrorOut)},
    ),
    destroy=extend_schema(
        tags=["Comments"],
        summary="댓글 삭제(작성자 전용, 대댓글 포함)",
        operation_id="comments_destroy",
        parameters=[OpenApiParameter(name="pk", location=OpenApiParameter.PATH, type=OpenApiTypes.UUID, description="댓글 ID (UUID)")],
        responses={200: OpenApiResponse(response=DeletedOut, description="삭제된 댓글 수"), 401: OpenApiResponse(response=ErrorOut), 403: OpenApiResponse(response=ErrorOut), 404: OpenApiResponse(response=ErrorOut)},
    ),
)
class CommentViewSet(viewsets.GenericViewSet):
    """
    /api/v1/comments/{id}/
    - GET: 단일 댓글
    - DELETE: 작성자만, 대댓글까지 함께 삭제
    - /replies/: 대댓글 목록/작성
    """

    permission_classes = [ReadOnlyOrActiveMember]
    lookup_value_regex = "[0-9a-f-]{36}"
    serializer_class = CommentOut

    def retrieve(self, request, pk=None):
        return Response(CommentOut(get_comment(pk)).data)

    def destroy(self, request, pk=None):
        comment = get_comment(pk)
        deleted = delete_comment(actor=request.user, comment_id=comment.pk)
        write_audit_log(
            action=AuditAction.DELETE_COMMENT,
            user=request.user,
            target_type="comment",
            target_id=str(comment.pk),
            request=request,
            extra={"post_id": str(comment.post_id), "deleted": deleted},
        )
        return Response({"deleted": deleted}, status=status.HTTP_200_OK)

    @extend_schema(
        tags=["Comments"],
        summary="대댓글 목록/작성",
        description=(
            "**GET**: 해당 댓글의 대댓글 목록(오래된 순).\n"
            "**POST**: 해당 댓글에 대댓글 작성. 서버가 `parent` 를 자동 지정하며, 대댓글에 다시 답글은 달 수 없습니다."
        ),
        operation_id="comments_replies",
        parameters=[OpenApiParameter(name="pk", location=OpenApiParameter.PATH, type=OpenApiTypes.UUID, description="부모 댓글 ID (UUID)")],
        request=CommentCreateIn,
        responses={
            200: OpenApiResponse(response=CommentOut(many=True), description="대댓글 목록(GET)"),
            201: OpenApiResponse(response=CommentOut, description="대댓글 생성(POST)"),
            400: OpenApiResponse(response=ErrorOut),
            403: OpenApiResponse(response=GateErrorOut),
            404: OpenApiResponse(response=ErrorOut),
        },
        examples=[OpenApiExample("대댓글 작성 예시", value={"content": "Thanks, checking now!"}, request_only=True)],
    )
    @action(detail=True, methods=["get", "post"], url_path="replies")
    def replies(self, request, pk=None):
        parent = get_comment(pk)
        if request.method == "GET":
            qs = parent.replies.select_related("author").order_by("created_at")
            return Response(CommentOut(qs, many=True).data)
        return _create(request, post_id=parent.post_id, parent_id=parent.pk)
