from uuid import UUID

from django.core.exceptions import ValidationError as DjangoValidationError
from django.db.models import Q
from drf_spectacular.utils import OpenApiExample, OpenApiParameter, OpenApiResponse, OpenApiTypes, extend_schema, extend_schema_view
from rest_framework import status, viewsets
from rest_framework.decorators import action
from rest_framework.exceptions import ValidationError as DRFValidationError
from rest_framework.response import Response

from audits.models import AuditAction
from audits.services import write_audit_log
from common.schema import ErrorOut, GateErrorOut
from users.permissions import ReadOnlyOrActiveMember
from users.services.gating import GatedAction, require_verified

from .models import Category, Post, PostStatus, PostType
from .paginations import PostCursorPagination
from .serializers import PostOut, PostUpdateIn, PostWriteIn
from .services import create_post, delete_post, get_post, update_post
from .visibility import PostView, censor, viewer_is_verified

POST_EXAMPLE = {
    "title": "Lost black wallet",
    "description": "Brown leather, contains NID. Call 017-1234567",
    "type": "lost",
    "category": "documents",
    "date_lost": "2025-09-15T08:30:00Z",
    "location_address": "Sylhet, Shahjalal Road, House 12",
    "latitude": 24.89,
    "longitude": 91.87,
    "tags": ["wallet", "nid"],
}


def _to_uuid(value, field):
    try:
        return UUID(str(value))
    except (TypeError, ValueError):
        raise DRFValidationError({field: "Invalid UUID"})


def _as_drf_error(e: DjangoValidationError):
    detail = getattr(e, "message_dict", None) or getattr(e, "messages", None) or str(e)
    return DRFValidationError(detail)


@extend_schema_view(
    list=extend_schema(
        tags=["Posts"],
        summary="게시글 목록",
        description=(
            "최신순 커서 페이지네이션. 익명 열람 가능.\n"
            "- 필터: `type`, `category`, `status`, `author_id`, `search`(제목/본문/태그, 대소문자 무시)\n"
            "- 미인증 열람자에게는 주소 축약/좌표 제거/연락처 마스킹이 적용되고 `is_censored=true`"
        ),
        operation_id="posts_list",
        parameters=[
            OpenApiParameter(name="type", location=OpenApiParameter.QUERY, type=OpenApiTypes.STR, required=False, enum=PostType.values),
            OpenApiParameter(name="category", location=OpenApiParameter.QUERY, type=OpenApiTypes.STR, required=False, enum=Category.values),
            OpenApiParameter(name="status", location=OpenApiParameter.QUERY, type=OpenApiTypes.STR, required=False, enum=PostStatus.values),
            OpenApiParameter(name="author_id", location=OpenApiParameter.QUERY, type=OpenApiTypes.UUID, required=False),
            OpenApiParameter(name="search", location=OpenApiParameter.QUERY, type=OpenApiTypes.STR, required=False),
        ],
        responses={200: OpenApiResponse(response=PostOut(many=True), description="커서 페이지네이션 적용 목록")},
    ),
    retrieve=extend_schema(
        tags=["Posts"],
        summary="게시글 단건 조회",
        operation_id="posts_retrieve",
        parameters=[OpenApiParameter(name="pk", location=OpenApiParameter.PATH, type=OpenApiTypes.UUID, description="게시글 ID (UUID)")],
        responses={200: OpenApiResponse(response=PostOut), 404: OpenApiResponse(response=ErrorOut)},
    ),
    create=extend_schema(
        tags=["Posts"],
        summary="게시글 작성(인증 회원 전용)",
        description="작성 시점에 작성자가 `verified` 여야 합니다. 정지 계정은 `account_suspended`.",
        operation_id="posts_create",
        request=PostWriteIn,
        responses={
            201: OpenApiResponse(response=PostOut),
            400: OpenApiResponse(response=ErrorOut),
            401: OpenApiResponse(response=ErrorOut),
            403: OpenApiResponse(response=GateErrorOut, description="verification_required | account_suspended"),
        },
        examples=[OpenApiExample("요청 예시", value=POST_EXAMPLE, request_only=True)],
    ),
    partial_update=extend_schema(
        tags=["Posts"],
        summary="게시글 수정(작성자 전용)",
        operation_id="posts_partial_update",
        request=PostUpdateIn,
        responses={200: OpenApiResponse(response=PostOut), 400: OpenApiResponse(response=ErrorOut), 403: OpenApiResponse(response=ErrorOut), 404: OpenApiResponse(response=ErrorOut)},
    ),
    destroy=extend_schema(
        tags=["Posts"],
        summary="게시글 삭제(작성자 전용)",
        operation_id="posts_destroy",
        responses={204: OpenApiResponse(description="삭제됨"), 403: OpenApiResponse(response=ErrorOut), 404: OpenApiResponse(response=ErrorOut)},
    ),
)
class PostViewSet(viewsets.GenericViewSet):
    permission_classes = [ReadOnlyOrActiveMember]
    queryset = Post.objects.select_related("author")
    serializer_class = PostOut
    pagination_class = PostCursorPagination
    lookup_value_regex = "[0-9a-f-]{36}"
    http_method_names = ["get", "post", "patch", "delete", "head", "options"]

    def _audit_post(self, action, post_id, extra=None):
        write_audit_log(action=action, user=self.request.user, target_type="post", target_id=str(post_id), request=self.request, extra=extra or {})

    def _render(self, posts, verified):
        return [PostOut(censor(PostView.from_model(p), verified).item).data for p in posts]

    def _paginated(self, qs):
        verified = viewer_is_verified(self.request.user)
        page = self.paginate_queryset(qs)
        resp = self.get_paginated_response(self._render(page, verified))
        resp.data["viewer_verified"] = verified
        return resp

    def filter_queryset(self, qs):
        params = self.request.query_params
        for field in ("type", "category", "status"):
            value = params.get(field)
            if value:
                qs = qs.filter(**{field: value})

        author_id = params.get("author_id")
        if author_id:
            qs = qs.filter(author_id=_to_uuid(author_id, "author_id"))

        search = (params.get("search") or "").strip()
        if search:
            qs = qs.filter(Q(title__icontains=search) | Q(description__icontains=search) | Q(tags__icontains=search))
        return qs

    def list(self, request):
        return self._paginated(self.filter_queryset(self.get_queryset()))

    def retrieve(self, request, pk=None):
        post = get_post(_to_uuid(pk, "id"))
        result = censor(PostView.from_model(post), viewer_is_verified(request.user))
        return Response(PostOut(result.item).data)

    def create(self, request):
        # 입력 검증보다 게이트가 먼저(미인증이면 본문과 무관하게 403)
        require_verified(request.user.pk, GatedAction.CREATE_POST)
        ser = PostWriteIn(data=request.data)
        ser.is_valid(raise_exception=True)
        try:
            post = create_post(author=request.user, data=ser.validated_data)
        except DjangoValidationError as e:
            raise _as_drf_error(e)

        self._audit_post(AuditAction.CREATE_POST, post.id, {"type": post.type, "category": post.category})
        # 작성자는 verified 이므로 항상 원본
        return Response(PostOut(PostView.from_model(post)).data, status=status.HTTP_201_CREATED)

    def partial_update(self, request, pk=None):
        ser = PostUpdateIn(data=request.data, partial=True)
        ser.is_valid(raise_exception=True)
        try:
            post = update_post(actor=request.user, post_id=_to_uuid(pk, "id"), data=ser.validated_data)
        except DjangoValidationError as e:
            raise _as_drf_error(e)

        self._audit_post(AuditAction.UPDATE_POST, post.id, {"fields": sorted(ser.validated_data)})
        result = censor(PostView.from_model(post), viewer_is_verified(request.user))
        return Response(PostOut(result.item).data)

    def destroy(self, request, pk=None):
        post_id = _to_uuid(pk, "id")
        delete_post(actor=request.user, post_id=post_id)
        self._audit_post(AuditAction.DELETE_POST, post_id)
        return Response(status=status.HTTP_204_NO_CONTENT)

    @extend_schema(
        tags=["Posts"],
        summary="특정 사용자의 게시글 목록",
        operation_id="posts_by_user",
        parameters=[OpenApiParameter(name="user_id", location=OpenApiParameter.PATH, type=OpenApiTypes.UUID, description="작성자 ID")],
        responses={200: OpenApiResponse(response=PostOut(many=True), description="커서 페이지네이션 적용 목록")},
    )
    @action(detail=False, methods=["get"], url_path=r"user/(?P<user_id>[^/.]+)")
    def by_user(self, request, user_id=None):
        qs = self.get_queryset().filter(author_id=_to_uuid(user_id, "user_id"))
        return self._paginated(qs)
