import logging
from typing import Mapping, Optional

from django.utils.dateparse import parse_datetime

from .models import AuditAction, AuditLog
from .utils import ClientFingerprint

log = logging.getLogger(__name__)


def write_audit_log(*, action, user, target_type: str = "", target_id=None, request=None, extra: Optional[Mapping] = None) -> Optional[AuditLog]:
    """
    사용자 행위 한 건을 남긴다.
    - 익명 요청(로그아웃 토큰만 들고 온 경우 등)은 남길 주체가 없으므로 None.
    - IP/UA 는 키 해시로만 저장한다.
    """
    if user is None or not getattr(user, "is_authenticated", False):
        return None
    if action not in AuditAction.values:
        raise ValueError(f"unknown audit action: {action}")

    fp = ClientFingerprint.from_request(request)
    entry = AuditLog.objects.create(
        user=user,
        action=str(action),
        target_type=target_type or "",
        target_id=target_id or None,
        ip_hash=fp.ip_hash,
        ua_hash=fp.ua_hash,
        extra=dict(extra or {}),
    )
    log.debug("audit %s user=%s target=%s:%s", entry.action, user.pk, entry.target_type, entry.target_id)
    return entry


def logs_visible_to(viewer, *, action=None, target_type=None, user_id=None, since=None, until=None):
    # 관리자가 아니면 자기 기록만. user_id 필터는 관리자에게만 의미가 있다.
    qs = AuditLog.objects.order_by("-created_at")
    is_admin = bool(getattr(viewer, "is_admin", False))
    if not is_admin:
        qs = qs.filter(user=viewer)
    elif user_id:
        qs = qs.filter(user_id=user_id)

    if action:
        qs = qs.filter(action=action)
    if target_type:
        qs = qs.filter(target_type=target_type)

    since_dt = parse_datetime(since) if since else None
    until_dt = parse_datetime(until) if until else None
    if since_dt:
        qs = qs.filter(created_at__gte=since_dt)
    if until_dt:
        qs = qs.filter(created_at__lte=until_dt)
    return qs


def purge_before(cutoff, *, dry_run=False) -> int:
    qs = AuditLog.objects.filter(created_at__lt=cutoff)
    if dry_run:
        return qs.count()
    deleted, _ = qs.delete()
    return deleted
