import uuid

import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models

import audits.models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="AuditLog",
            fields=[
                ("id", models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False, serialize=False)),
                ("action", models.CharField(choices=audits.models.AuditAction.choices, db_index=True, max_length=32)),
                ("target_type", models.CharField(blank=True, db_index=True, default="", max_length=32)),
                ("target_id", models.UUIDField(blank=True, db_index=True, null=True)),
                ("ip_hash", models.CharField(blank=True, max_length=64, null=True)),
                ("ua_hash", models.CharField(blank=True, max_length=64, null=True)),
                ("extra", models.JSONField(blank=True, default=dict)),
                ("created_at", models.DateTimeField(auto_now_add=True, db_index=True)),
                (
                    "user",
                    models.ForeignKey(db_index=True, on_delete=django.db.models.deletion.CASCADE, related_name="audit_logs", to=settings.AUTH_USER_MODEL),
                ),
            ],
            options={
                "db_table": "audit_logs",
                "indexes": [
                    models.Index(fields=["user", "-created_at"], name="idx_audit_user_created"),
                    models.Index(fields=["action", "-created_at"], name="idx_audit_action_created"),
                    models.Index(fields=["target_type", "target_id", "-created_at"], name="idx_audit_target_created"),
                ],
            },
        ),
    ]
