import uuid

import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ("posts", "0001_initial"),
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="Report",
            fields=[
                ("id", models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False, serialize=False)),
                ("target_type", models.CharField(choices=[("user", "User"), ("post", "Post")], max_length=8)),
                (
                    "reason",
                    models.CharField(
                        choices=[
                            ("fake_post", "Fake post"),
                            ("scam", "Scam"),
                            ("inappropriate_content", "Inappropriate content"),
                            ("harassment", "Harassment"),
                            ("spam", "Spam"),
                            ("stolen_item", "Stolen item"),
                            ("false_claim", "False claim"),
                            ("impersonation", "Impersonation"),
                            ("other", "Other"),
                        ],
                        max_length=32,
                    ),
                ),
                ("description", models.TextField(max_length=1000)),
                ("evidence", models.JSONField(blank=True, default=list)),
                (
                    "status",
                    models.CharField(
                        choices=[("pending", "Pending"), ("reviewing", "Reviewing"), ("resolved", "Resolved"), ("dismissed", "Dismissed")],
                        db_index=True,
                        default="pending",
                        max_length=16,
                    ),
                ),
                ("reviewed_at", models.DateTimeField(blank=True, null=True)),
                ("admin_note", models.TextField(blank=True, default="")),
                (
                    "action_taken",
                    models.CharField(
                        choices=[("none", "None"), ("warning", "Warning"), ("post_removed", "Post removed"), ("user_banned", "User banned"), ("other", "Other")],
                        default="none",
                        max_length=16,
                    ),
                ),
                ("created_at", models.DateTimeField(auto_now_add=True, db_index=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                (
                    "reporter",
                    models.ForeignKey(db_index=True, on_delete=django.db.models.deletion.CASCADE, related_name="reports_filed", to=settings.AUTH_USER_MODEL),
                ),
                (
                    "reported_user",
                    models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name="reports_received", to=settings.AUTH_USER_MODEL),
                ),
                (
                    "reported_post",
                    models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name="reports", to="posts.post"),
                ),
                (
                    "reviewed_by",
                    models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name="+", to=settings.AUTH_USER_MODEL),
                ),
            ],
            options={
                "db_table": "reports",
                "ordering": ("-created_at",),
                "indexes": [
                    models.Index(fields=["reporter", "-created_at"], name="idx_report_reporter_created"),
                    models.Index(fields=["status", "-created_at"], name="idx_report_status_created"),
                    models.Index(fields=["reported_user"], name="idx_report_user"),
                    models.Index(fields=["reported_post"], name="idx_report_post"),
                ],
            },
        ),
    ]
