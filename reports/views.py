from drf_spectacular.utils import OpenApiExample, OpenApiResponse, extend_schema
from rest_framework import serializers, status, viewsets
from rest_framework.decorators import action
from rest_framework.response import Response

from audits.models import AuditAction
from audits.services import write_audit_log
from common.schema import ErrorOut
from users.permissions import IsActiveMember

from . import services
from .models import TargetType
from .serializers import ReportCreatedOut, ReportCreateIn, ReportOut


class ReportsViewSet(viewsets.ViewSet):
    permission_classes = [IsActiveMember]
    serializer_class = serializers.Serializer

    def _audit_report(self, report):
        action = AuditAction.REPORT_USER if report.target_type == TargetType.USER else AuditAction.REPORT_POST
        write_audit_log(
            action=action,
            user=self.request.user,
            target_type=report.target_type,
            target_id=str(report.target_id),
            request=self.request,
            extra={"endpoint": f"{self.request.method} {self.request.path}", "reason": report.reason, "report_id": str(report.id)},
        )

    @extend_schema(
        tags=["Reports"],
        summary="신고 접수",
        description="사용자 또는 게시글 **하나만** 지정해 신고합니다. 둘 다/둘 다 없음은 `invalid_target`.",
        operation_id="reports_create",
        request=ReportCreateIn,
        responses={
            201: OpenApiResponse(response=ReportCreatedOut, description="접수된 신고"),
            400: OpenApiResponse(response=ErrorOut),
            401: OpenApiResponse(response=ErrorOut),
            404: OpenApiResponse(response=ErrorOut),
        },
        examples=[
            OpenApiExample(
                "게시글 신고",
                value={"reported_post_id": "11111111-1111-1111-1111-111111111111", "reason": "scam", "description": "Asks for a deposit before returning the item."},
                request_only=True,
            )
        ],
    )
    def create(self, request):
        ser = ReportCreateIn(data=request.data)
        ser.is_valid(raise_exception=True)
        v = ser.validated_data
        report = services.create_report(
            reporter=request.user,
            reported_user_id=v.get("reported_user_id"),
            reported_post_id=v.get("reported_post_id"),
            reason=v["reason"],
            description=v["description"],
            evidence=v.get("evidence") or (),
        )
        self._audit_report(report)
        return Response(ReportCreatedOut({"id": report.id, "status": report.status}).data, status=status.HTTP_201_CREATED)

    @extend_schema(
        tags=["Reports"],
        summary="내가 접수한 신고 목록",
        operation_id="reports_my",
        responses={200: OpenApiResponse(response=ReportOut(many=True)), 401: OpenApiResponse(response=ErrorOut)},
    )
    @action(detail=False, methods=["get"], url_path="my")
    def my(self, request):
        return Response(ReportOut(services.list_my_reports(request.user), many=True).data)
