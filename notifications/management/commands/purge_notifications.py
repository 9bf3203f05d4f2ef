from django.core.management.base import BaseCommand

from notifications.models import Notification, retention_cutoff


class Command(BaseCommand):
    help = "Delete notifications older than NOTIFICATION_RETENTION_DAYS (default: 30)."

    def add_arguments(self, parser):
        parser.add_argument("--dry-run", action="store_true", help="Only count rows that would be deleted")

    def handle(self, *args, **options):
        cutoff = retention_cutoff()
        qs = Notification.objects.expired()
        if options["dry_run"]:
            self.stdout.write(f"Would purge {qs.count()} notifications (cutoff={cutoff.isoformat()}).")
            return
        deleted, _ = qs.delete()
        self.stdout.write(self.style.SUCCESS(f"Purged {deleted} expired notifications (cutoff={cutoff.isoformat()})."))
