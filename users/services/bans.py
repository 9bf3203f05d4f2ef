import logging

from django.db import transaction
from django.utils import timezone

from common.exceptions import Forbidden, MissingReason, NotFound
from users.models import User

log = logging.getLogger(__name__)


def _ensure_admin(admin):
    if admin is None or not getattr(admin, "is_admin", False):
        raise Forbidden("Access denied. Admin privileges required.")


def _get_user(user_id) -> User:
    user = User.objects.filter(pk=user_id).first()
    if user is None:
        raise NotFound("User not found.")
    return user


def _write_ban_fields(user, **fields):
    # 정지 필드 네 개만 기록한다(updated_at 포함 다른 컬럼은 그대로)
    User.objects.filter(pk=user.pk).update(**fields)
    user.refresh_from_db()


@transaction.atomic
def ban_user(*, admin, user_id, reason) -> User:
    # 이미 정지된 계정을 다시 정지하면 감사 필드만 덮어쓴다(에러 아님)
    _ensure_admin(admin)
    reason = (reason or "").strip()
    if not reason:
        raise MissingReason("Ban reason is required.")

    user = _get_user(user_id)
    if user.is_admin:
        raise Forbidden("Cannot ban an admin user.")

    _write_ban_fields(user, is_banned=True, ban_reason=reason, banned_at=timezone.now(), banned_by=admin)
    log.info("user banned: user=%s admin=%s", user.pk, admin.pk)
    return user


@transaction.atomic
def unban_user(*, admin, user_id) -> User:
    # 정지되지 않은 계정에 대해서도 성공(no-op)
    _ensure_admin(admin)
    user = _get_user(user_id)
    if not user.is_banned and not user.ban_reason and user.banned_at is None and user.banned_by_id is None:
        return user

    _write_ban_fields(user, is_banned=False, ban_reason="", banned_at=None, banned_by=None)
    log.info("user unbanned: user=%s admin=%s", user.pk, admin.pk)
    return user
