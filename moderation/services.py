import logging
from datetime import timedelta

from django.contrib.auth import get_user_model
from django.db import transaction
from django.db.models import Count, Q
from django.utils import timezone

from common.exceptions import Forbidden, MissingReason, NotFound
from notifications.models import Notification
from notifications.services import notify
from posts.models import Post, PostStatus, PostType
from reports.models import Report, ReportStatus
from users.models import Role, VerificationStatus

User = get_user_model()
log = logging.getLogger(__name__)


def _ensure_admin(admin):
    if admin is None or not getattr(admin, "is_admin", False):
        raise Forbidden("Access denied. Admin privileges required.")


def pending_verifications():
    # 먼저 제출한 사람부터 심사
    return User.objects.filter(verification_status=VerificationStatus.PENDING).order_by("updated_at", "created_at")


def get_member(user_id):
    user = User.objects.filter(pk=user_id).first()
    if user is None:
        raise NotFound("User not found.")
    return user


def member_detail(user_id) -> dict:
    user = get_member(user_id)
    return {
        "user": user,
        "post_count": Post.objects.filter(author_id=user.pk).count(),
        "reports_received": Report.objects.filter(reported_user_id=user.pk).count(),
        "reports_filed": Report.objects.filter(reporter_id=user.pk).count(),
    }


def search_members(*, search="", verification_status=None, is_banned=None):
    qs = User.objects.filter(role=Role.USER).order_by("-created_at")
    if search:
        qs = qs.filter(Q(username__icontains=search) | Q(email__icontains=search) | Q(phone__icontains=search))
    if verification_status:
        qs = qs.filter(verification_status=verification_status)
    if is_banned is not None:
        qs = qs.filter(is_banned=is_banned)
    return qs


@transaction.atomic
def remove_post(*, admin, post_id, reason) -> dict:
    """
    관리자 게시글 삭제. 작성자에게는 사유를 담은 시스템 알림을 남긴다.
    알림은 게시글이 사라진 뒤에 만들므로 post 참조 없이 보낸다.
    """
    _ensure_admin(admin)
    reason = (reason or "").strip()
    if not reason:
        raise MissingReason("Removal reason is required.")

    post = Post.objects.filter(pk=post_id).first()
    if post is None:
        raise NotFound("Post not found.")

    snapshot = {"post_id": str(post.pk), "author_id": str(post.author_id), "title": post.title}
    post.delete()
    log.info("post removed by admin: post=%s admin=%s", snapshot["post_id"], admin.pk)

    notify(
        user_id=snapshot["author_id"],
        type_=Notification.Type.SYSTEM,
        title="Post Removed",
        message=f'Your post "{snapshot["title"]}" was removed by an administrator. Reason: {reason}',
        from_user_id=admin.pk,
    )
    return snapshot


def _zeroed(agg: dict) -> dict:
    return {k: v or 0 for k, v in agg.items()}


def dashboard_stats(now=None) -> dict:
    now = now or timezone.now()
    today = now.replace(hour=0, minute=0, second=0, microsecond=0)
    week_ago = now - timedelta(days=7)

    users = User.objects.filter(role=Role.USER).aggregate(
        total=Count("id"),
        unverified=Count("id", filter=Q(verification_status=VerificationStatus.UNVERIFIED)),
        pending=Count("id", filter=Q(verification_status=VerificationStatus.PENDING)),
        verified=Count("id", filter=Q(verification_status=VerificationStatus.VERIFIED)),
        rejected=Count("id", filter=Q(verification_status=VerificationStatus.REJECTED)),
        banned=Count("id", filter=Q(is_banned=True)),
        new_today=Count("id", filter=Q(created_at__gte=today)),
        new_this_week=Count("id", filter=Q(created_at__gte=week_ago)),
    )
    posts = Post.objects.aggregate(
        total=Count("id"),
        active=Count("id", filter=Q(status=PostStatus.ACTIVE)),
        resolved=Count("id", filter=Q(status=PostStatus.RESOLVED)),
        lost=Count("id", filter=Q(type=PostType.LOST)),
        found=Count("id", filter=Q(type=PostType.FOUND)),
        new_today=Count("id", filter=Q(created_at__gte=today)),
        new_this_week=Count("id", filter=Q(created_at__gte=week_ago)),
    )
    reports = Report.objects.aggregate(
        total=Count("id"),
        pending=Count("id", filter=Q(status=ReportStatus.PENDING)),
        reviewing=Count("id", filter=Q(status=ReportStatus.REVIEWING)),
        resolved=Count("id", filter=Q(status=ReportStatus.RESOLVED)),
        dismissed=Count("id", filter=Q(status=ReportStatus.DISMISSED)),
    )
    return {"users": _zeroed(users), "posts": _zeroed(posts), "reports": _zeroed(reports)}
