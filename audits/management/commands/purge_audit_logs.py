from datetime import timedelta

from django.conf import settings
from django.core.management.base import BaseCommand, CommandError
from django.utils import timezone

from audits.services import purge_before


class Command(BaseCommand):
    help = "Delete audit log entries past the retention window."

    def add_arguments(self, parser):
        parser.add_argument("--days", type=int, help="retention window in days (default: AUDIT_RETENTION_DAYS)")
        parser.add_argument("--dry-run", action="store_true", help="only count what would be deleted")

    def handle(self, *args, **options):
        days = options["days"] if options["days"] is not None else settings.AUDIT_RETENTION_DAYS
        if days < 1:
            raise CommandError("--days must be at least 1")

        cutoff = timezone.now() - timedelta(days=days)
        count = purge_before(cutoff, dry_run=options["dry_run"])
        verb = "Would purge" if options["dry_run"] else "Purged"
        self.stdout.write(self.style.SUCCESS(f"{verb} {count} audit logs older than {days} days."))
