import os

from celery import Celery
from celery.schedules import crontab

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "findx.settings")

app = Celery("findx")
app.config_from_object("django.conf:settings", namespace="CELERY")
app.autodiscover_tasks()

app.conf.beat_schedule = {
    "purge-expired-notifications": {
        "task": "notifications.tasks.purge_expired_notifications",
        "schedule": crontab(minute=0, hour="*/6"),
    },
    "purge-old-audit-logs": {
        "task": "audits.tasks.purge_expired_audit_logs",
        "schedule": crontab(minute=30, hour=3),
    },
}


@app.task(bind=True)
def health(self):
    return "ok"
