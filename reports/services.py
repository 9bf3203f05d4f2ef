import logging

from django.contrib.auth import get_user_model
from django.db import transaction
from django.utils import timezone

from common.exceptions import Forbidden, InvalidState, InvalidTarget, NotFound
from posts.models import Post
from posts.tasks import publish_event

from .models import Report, ReportStatus, TargetType

User = get_user_model()
log = logging.getLogger(__name__)

# 허용 전이. 같은 상태로의 갱신(메모/조치만 수정)은 항상 허용
TRANSITIONS = {
    ReportStatus.PENDING: {ReportStatus.REVIEWING, ReportStatus.RESOLVED, ReportStatus.DISMISSED},
    ReportStatus.REVIEWING: {ReportStatus.RESOLVED, ReportStatus.DISMISSED},
    ReportStatus.RESOLVED: set(),
    ReportStatus.DISMISSED: set(),
}


def can_transition(current: str, new: str) -> bool:
    return current == new or new in TRANSITIONS.get(current, set())


@transaction.atomic
def create_report(*, reporter, reported_user_id=None, reported_post_id=None, reason, description, evidence=()) -> Report:
    if bool(reported_user_id) == bool(reported_post_id):
        raise InvalidTarget()

    if reported_user_id:
        if not User.objects.filter(pk=reported_user_id).exists():
            raise NotFound("Reported user not found.")
        target = {"target_type": TargetType.USER, "reported_user_id": reported_user_id}
    else:
        if not Post.objects.filter(pk=reported_post_id).exists():
            raise NotFound("Reported post not found.")
        target = {"target_type": TargetType.POST, "reported_post_id": reported_post_id}

    report = Report.objects.create(
        reporter=reporter,
        reason=reason,
        description=(description or "").strip(),
        evidence=[str(e) for e in (evidence or ()) if str(e).strip()],
        **target,
    )
    publish_event(
        "ReportCreated",
        {"report_id": str(report.id), "reporter_id": str(reporter.id), "target_type": report.target_type, "target_id": str(report.target_id), "reason": reason},
        key="report.created",
    )
    return report


def get_report(report_id) -> Report:
    report = Report.objects.select_related("reporter", "reported_user", "reported_post", "reviewed_by").filter(pk=report_id).first()
    if report is None:
        raise NotFound("Report not found.")
    return report


@transaction.atomic
def update_report(*, admin, report_id, status=None, admin_note=None, action_taken=None) -> Report:
    """
    관리자 심사 결과 기록. 대상에 대한 자동 조치는 하지 않는다
    (action_taken=user_banned 여도 정지는 ban_user 로 따로 수행).
    """
    if admin is None or not getattr(admin, "is_admin", False):
        raise Forbidden("Access denied. Admin privileges required.")

    report = Report.objects.select_for_update().filter(pk=report_id).first()
    if report is None:
        raise NotFound("Report not found.")

    if status is not None and not can_transition(report.status, status):
        raise InvalidState(f"Cannot move report from {report.status} to {status}.")

    previous = report.status
    if status is not None:
        report.status = status
    if admin_note is not None:
        report.admin_note = admin_note
    if action_taken is not None:
        report.action_taken = action_taken
    report.reviewed_by = admin
    report.reviewed_at = timezone.now()
    report.save()

    log.info("report updated: report=%s %s->%s admin=%s", report.pk, previous, report.status, admin.pk)
    return report


def list_my_reports(reporter):
    return Report.objects.filter(reporter=reporter).select_related("reported_user", "reported_post").order_by("-created_at")
