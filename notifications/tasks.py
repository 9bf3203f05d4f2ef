import logging

from celery import shared_task

from .services import purge_expired

log = logging.getLogger(__name__)


@shared_task(name="notifications.tasks.purge_expired_notifications")
def purge_expired_notifications() -> int:
    deleted = purge_expired()
    log.info("purged %s expired notifications", deleted)
    return deleted
