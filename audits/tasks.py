import logging
from datetime import timedelta

from celery import shared_task
from django.conf import settings
from django.utils import timezone

from .services import purge_before

log = logging.getLogger(__name__)


@shared_task(name="audits.tasks.purge_expired_audit_logs")
def purge_expired_audit_logs() -> int:
    days = settings.AUDIT_RETENTION_DAYS
    deleted = purge_before(timezone.now() - timedelta(days=days))
    log.info("audit retention: removed %s entries older than %s days", deleted, days)
    return deleted
