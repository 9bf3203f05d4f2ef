import logging

from django.db import transaction

from .models import Notification

log = logging.getLogger(__name__)


def notify(*, user_id, type_, title, message, from_user_id=None, post_id=None, comment_id=None, link=""):
    """
    인앱 알림 1건 생성.
    - 행위자 본인에게는 보내지 않는다.
    - 실패는 로그만 남기고 삼킨다(호출한 도메인 작업은 그대로 성공).
    """
    if not user_id:
        return None
    if from_user_id is not None and str(from_user_id) == str(user_id):
        return None

    try:
        # 바깥 트랜잭션을 깨지 않도록 savepoint 안에서 기록
        with transaction.atomic():
            return Notification.objects.create(
                user_id=user_id,
                type=type_,
                title=title,
                message=message,
                from_user_id=from_user_id,
                post_id=post_id,
                comment_id=comment_id,
                link=link or "",
            )
    except Exception:
        log.exception("notification delivery failed: user=%s type=%s", user_id, type_)
        return None


def unread_count(user) -> int:
    return Notification.objects.live().filter(user=user, is_read=False).count()


def mark_read(user, ids) -> int:
    return Notification.objects.filter(user=user, id__in=ids, is_read=False).update(is_read=True)


def mark_all_read(user) -> int:
    return Notification.objects.filter(user=user, is_read=False).update(is_read=True)


def purge_expired() -> int:
    deleted, _ = Notification.objects.expired().delete()
    return deleted
