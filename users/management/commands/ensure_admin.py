import os

from django.core.management.base import BaseCommand, CommandError

from users.models import Role, User, VerificationStatus


class Command(BaseCommand):
    help = "Create the admin account if missing, or promote an existing account to admin."

    def add_arguments(self, parser):
        parser.add_argument("--email", default=os.environ.get("ADMIN_EMAIL", ""))
        parser.add_argument("--username", default=os.environ.get("ADMIN_USERNAME", "admin"))
        parser.add_argument("--password", default=os.environ.get("ADMIN_PASSWORD", ""))

    def handle(self, *args, **options):
        email = (options["email"] or "").strip().lower()
        if not email:
            raise CommandError("--email (or ADMIN_EMAIL) is required")

        user = User.objects.filter(email__iexact=email).first()
        if user is None:
            if not options["password"]:
                raise CommandError("--password (or ADMIN_PASSWORD) is required to create a new admin")
            User.objects.create_superuser(email=email, username=options["username"], password=options["password"])
            self.stdout.write(self.style.SUCCESS(f"Created admin {email}."))
            return

        user.role = Role.ADMIN
        user.is_staff = True
        user.verification_status = VerificationStatus.VERIFIED
        user.save(update_fields=["role", "is_staff", "verification_status", "updated_at"])
        self.stdout.write(self.style.SUCCESS(f"Promoted {email} to admin."))
