from django.db.models import Q
from drf_spectacular.utils import OpenApiExample, OpenApiParameter, OpenApiResponse, OpenApiTypes, extend_schema, extend_schema_view
from rest_framework import status, viewsets
from rest_framework.decorators import action
from rest_framework.exceptions import ValidationError
from rest_framework.response import Response

from audits.models import AuditAction
from audits.services import write_audit_log
from common.schema import AdminStatsOut, ErrorOut
from posts.models import Post, PostStatus, PostType
from posts.serializers import PostOut
from posts.visibility import PostView
from reports import services as report_services
from reports.models import Report, ReportReason, ReportStatus
from reports.serializers import ReportAdminOut, ReportUpdateIn
from users.models import VerificationStatus
from users.permissions import IsAdminRole
from users.services.bans import ban_user, unban_user
from users.services.verification import VerificationService

from . import services
from .serializers import AdminUserDetailOut, AdminUserOut, ApproveIn, ReasonIn, RemovedPostOut

UUID_PATH = "[0-9a-f-]{36}"


def _pk_param(description):
    return OpenApiParameter(name="pk", location=OpenApiParameter.PATH, type=OpenApiTypes.UUID, description=description)


def _bool_param(value, name):
    # 쿼리스트링 불리언: 생략 시 필터 없음
    if value in (None, ""):
        return None
    lowered = str(value).lower()
    if lowered in ("true", "1"):
        return True
    if lowered in ("false", "0"):
        return False
    raise ValidationError({name: "Must be true or false."})


class AdminViewSet(viewsets.GenericViewSet):
    permission_classes = [IsAdminRole]
    lookup_value_regex = UUID_PATH

    def _audit(self, action, target_type, target_id, extra=None):
        write_audit_log(action=action, user=self.request.user, target_type=target_type, target_id=str(target_id), request=self.request, extra=extra or {})


@extend_schema_view(
    list=extend_schema(
        tags=["Admin/Verifications"],
        summary="인증 심사 대기열",
        description="`pending` 상태 사용자를 제출 순(오래된 것부터)으로 반환합니다.",
        operation_id="admin_verifications_list",
        responses={200: AdminUserOut(many=True), 401: ErrorOut, 403: ErrorOut},
    ),
    retrieve=extend_schema(
        tags=["Admin/Verifications"],
        summary="인증 심사 상세(문서 참조 포함)",
        operation_id="admin_verifications_retrieve",
        parameters=[_pk_param("사용자 ID")],
        responses={200: AdminUserOut, 403: ErrorOut, 404: ErrorOut},
    ),
)
class AdminVerificationViewSet(AdminViewSet):
    serializer_class = AdminUserOut

    def list(self, request):
        return Response(AdminUserOut(services.pending_verifications(), many=True).data)

    def retrieve(self, request, pk=None):
        return Response(AdminUserOut(services.get_member(pk)).data)

    @extend_schema(
        tags=["Admin/Verifications"],
        summary="인증 승인",
        description="`pending` 인 경우에만 성공. 동시 요청 중 하나만 성공하고 나머지는 `invalid_state`.",
        operation_id="admin_verifications_approve",
        parameters=[_pk_param("사용자 ID")],
        request=ApproveIn,
        responses={200: AdminUserOut, 400: ErrorOut, 403: ErrorOut, 404: ErrorOut},
        examples=[OpenApiExample("요청 예시", value={"note": "Documents match."}, request_only=True)],
    )
    @action(detail=True, methods=["post"])
    def approve(self, request, pk=None):
        ser = ApproveIn(data=request.data)
        ser.is_valid(raise_exception=True)
        user = VerificationService.approve(request.user, pk, ser.validated_data["note"])
        self._audit(AuditAction.VERIFICATION_APPROVE, "user", user.pk, {"note": user.verification_note})
        return Response(AdminUserOut(user).data)

    @extend_schema(
        tags=["Admin/Verifications"],
        summary="인증 반려",
        description="사유는 필수(`missing_reason`). `pending` 인 경우에만 성공.",
        operation_id="admin_verifications_reject",
        parameters=[_pk_param("사용자 ID")],
        request=ReasonIn,
        responses={200: AdminUserOut, 400: ErrorOut, 403: ErrorOut, 404: ErrorOut},
        examples=[OpenApiExample("요청 예시", value={"reason": "Selfie does not match NID photo."}, request_only=True)],
    )
    @action(detail=True, methods=["post"])
    def reject(self, request, pk=None):
        ser = ReasonIn(data=request.data)
        ser.is_valid(raise_exception=True)
        user = VerificationService.reject(request.user, pk, ser.validated_data["reason"])
        self._audit(AuditAction.VERIFICATION_REJECT, "user", user.pk, {"reason": user.rejection_reason})
        return Response(AdminUserOut(user).data)


@extend_schema_view(
    list=extend_schema(
        tags=["Admin/Users"],
        summary="회원 목록",
        operation_id="admin_users_list",
        parameters=[
            OpenApiParameter(name="search", location=OpenApiParameter.QUERY, type=OpenApiTypes.STR, required=False, description="username/email/phone 부분 일치"),
            OpenApiParameter(name="verification_status", location=OpenApiParameter.QUERY, type=OpenApiTypes.STR, required=False, enum=VerificationStatus.values),
            OpenApiParameter(name="is_banned", location=OpenApiParameter.QUERY, type=OpenApiTypes.BOOL, required=False),
        ],
        responses={200: AdminUserOut(many=True), 400: ErrorOut, 403: ErrorOut},
    ),
    retrieve=extend_schema(
        tags=["Admin/Users"],
        summary="회원 상세(게시글/신고 수 포함)",
        operation_id="admin_users_retrieve",
        parameters=[_pk_param("사용자 ID")],
        responses={200: AdminUserDetailOut, 403: ErrorOut, 404: ErrorOut},
    ),
)
class AdminUserViewSet(AdminViewSet):
    serializer_class = AdminUserOut

    def list(self, request):
        params = request.query_params
        qs = services.search_members(
            search=(params.get("search") or "").strip(),
            verification_status=params.get("verification_status") or None,
            is_banned=_bool_param(params.get("is_banned"), "is_banned"),
        )
        return Response(AdminUserOut(qs, many=True).data)

    def retrieve(self, request, pk=None):
        return Response(AdminUserDetailOut(services.member_detail(pk)).data)

    @extend_schema(
        tags=["Admin/Users"],
        summary="계정 정지",
        description="사유 필수. 관리자 계정은 정지할 수 없습니다. 이미 정지된 계정이면 사유/시각만 갱신.",
        operation_id="admin_users_ban",
        parameters=[_pk_param("사용자 ID")],
        request=ReasonIn,
        responses={200: AdminUserOut, 400: ErrorOut, 403: ErrorOut, 404: ErrorOut},
    )
    @action(detail=True, methods=["post"])
    def ban(self, request, pk=None):
        ser = ReasonIn(data=request.data)
        ser.is_valid(raise_exception=True)
        user = ban_user(admin=request.user, user_id=pk, reason=ser.validated_data["reason"])
        self._audit(AuditAction.BAN_USER, "user", user.pk, {"reason": user.ban_reason})
        return Response(AdminUserOut(user).data)

    @extend_schema(
        tags=["Admin/Users"],
        summary="계정 정지 해제",
        description="정지 상태가 아니어도 성공합니다.",
        operation_id="admin_users_unban",
        parameters=[_pk_param("사용자 ID")],
        request=None,
        responses={200: AdminUserOut, 403: ErrorOut, 404: ErrorOut},
    )
    @action(detail=True, methods=["post"])
    def unban(self, request, pk=None):
        user = unban_user(admin=request.user, user_id=pk)
        self._audit(AuditAction.UNBAN_USER, "user", user.pk)
        return Response(AdminUserOut(user).data)


@extend_schema_view(
    list=extend_schema(
        tags=["Admin/Reports"],
        summary="신고 목록",
        operation_id="admin_reports_list",
        parameters=[
            OpenApiParameter(name="status", location=OpenApiParameter.QUERY, type=OpenApiTypes.STR, required=False, enum=ReportStatus.values),
            OpenApiParameter(name="reason", location=OpenApiParameter.QUERY, type=OpenApiTypes.STR, required=False, enum=ReportReason.values),
            OpenApiParameter(name="target_type", location=OpenApiParameter.QUERY, type=OpenApiTypes.STR, required=False, enum=["user", "post"]),
        ],
        responses={200: ReportAdminOut(many=True), 403: ErrorOut},
    ),
    retrieve=extend_schema(
        tags=["Admin/Reports"],
        summary="신고 상세",
        operation_id="admin_reports_retrieve",
        parameters=[_pk_param("신고 ID")],
        responses={200: ReportAdminOut, 403: ErrorOut, 404: ErrorOut},
    ),
    partial_update=extend_schema(
        tags=["Admin/Reports"],
        summary="신고 처리",
        description=(
            "상태 전이: pending → reviewing/resolved/dismissed, reviewing → resolved/dismissed. "
            "resolved/dismissed 는 종단 상태이며 역행은 `invalid_state`. "
            "`action_taken=user_banned` 는 기록일 뿐 정지는 별도 API 로 수행."
        ),
        operation_id="admin_reports_update",
        parameters=[_pk_param("신고 ID")],
        request=ReportUpdateIn,
        responses={200: ReportAdminOut, 400: ErrorOut, 403: ErrorOut, 404: ErrorOut},
        examples=[OpenApiExample("요청 예시", value={"status": "resolved", "action_taken": "warning", "admin_note": "Warned the poster."}, request_only=True)],
    ),
)
class AdminReportViewSet(AdminViewSet):
    serializer_class = ReportAdminOut
    http_method_names = ["get", "patch", "head", "options"]

    def list(self, request):
        qs = Report.objects.select_related("reported_user", "reported_post").order_by("-created_at")
        for field in ("status", "reason", "target_type"):
            value = request.query_params.get(field)
            if value:
                qs = qs.filter(**{field: value})
        return Response(ReportAdminOut(qs, many=True).data)

    def retrieve(self, request, pk=None):
        return Response(ReportAdminOut(report_services.get_report(pk)).data)

    def partial_update(self, request, pk=None):
        ser = ReportUpdateIn(data=request.data)
        ser.is_valid(raise_exception=True)
        report = report_services.update_report(admin=request.user, report_id=pk, **ser.validated_data)
        self._audit(AuditAction.UPDATE_REPORT, "report", report.pk, {"status": report.status, "action_taken": report.action_taken})
        return Response(ReportAdminOut(report).data)


@extend_schema_view(
    list=extend_schema(
        tags=["Admin/Posts"],
        summary="게시글 목록(검열 없음)",
        operation_id="admin_posts_list",
        parameters=[
            OpenApiParameter(name="search", location=OpenApiParameter.QUERY, type=OpenApiTypes.STR, required=False),
            OpenApiParameter(name="type", location=OpenApiParameter.QUERY, type=OpenApiTypes.STR, required=False, enum=PostType.values),
            OpenApiParameter(name="status", location=OpenApiParameter.QUERY, type=OpenApiTypes.STR, required=False, enum=PostStatus.values),
        ],
        responses={200: PostOut(many=True), 403: ErrorOut},
    ),
    destroy=extend_schema(
        tags=["Admin/Posts"],
        summary="게시글 삭제(관리자)",
        description="사유 필수. 작성자에게 시스템 알림을 보냅니다.",
        operation_id="admin_posts_destroy",
        parameters=[_pk_param("게시글 ID")],
        request=ReasonIn,
        responses={200: RemovedPostOut, 400: ErrorOut, 403: ErrorOut, 404: ErrorOut},
    ),
)
class AdminPostViewSet(AdminViewSet):
    serializer_class = PostOut
    http_method_names = ["get", "delete", "head", "options"]

    def list(self, request):
        params = request.query_params
        qs = Post.objects.select_related("author").order_by("-created_at")
        for field in ("type", "status"):
            value = params.get(field)
            if value:
                qs = qs.filter(**{field: value})
        search = (params.get("search") or "").strip()
        if search:
            qs = qs.filter(Q(title__icontains=search) | Q(description__icontains=search) | Q(author__username__icontains=search))
        return Response([PostOut(PostView.from_model(p)).data for p in qs])

    def destroy(self, request, pk=None):
        ser = ReasonIn(data=request.data)
        ser.is_valid(raise_exception=True)
        removed = services.remove_post(admin=request.user, post_id=pk, reason=ser.validated_data["reason"])
        self._audit(AuditAction.REMOVE_POST, "post", removed["post_id"], {"reason": ser.validated_data["reason"], "author_id": removed["author_id"]})
        return Response(RemovedPostOut(removed).data, status=status.HTTP_200_OK)


class AdminStatsViewSet(AdminViewSet):
    serializer_class = AdminStatsOut

    @extend_schema(tags=["Admin"], summary="대시보드 통계", operation_id="admin_stats", responses={200: AdminStatsOut, 403: ErrorOut})
    def list(self, request):
        return Response(services.dashboard_stats())
