import uuid

import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="Post",
            fields=[
                ("id", models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False, serialize=False)),
                ("title", models.CharField(max_length=100)),
                ("description", models.TextField(max_length=1000)),
                ("type", models.CharField(choices=[("lost", "Lost"), ("found", "Found")], max_length=8)),
                (
                    "category",
                    models.CharField(
                        choices=[
                            ("electronics", "Electronics"),
                            ("documents", "Documents"),
                            ("jewelry", "Jewelry"),
                            ("clothing", "Clothing"),
                            ("pets", "Pets"),
                            ("bags", "Bags"),
                            ("keys", "Keys"),
                            ("other", "Other"),
                        ],
                        max_length=16,
                    ),
                ),
                ("date_lost", models.DateTimeField(blank=True, null=True)),
                ("date_found", models.DateTimeField(blank=True, null=True)),
                ("location_address", models.CharField(max_length=255)),
                ("latitude", models.FloatField(blank=True, null=True)),
                ("longitude", models.FloatField(blank=True, null=True)),
                ("images", models.JSONField(blank=True, default=list)),
                ("tags", models.JSONField(blank=True, default=list)),
                (
                    "status",
                    models.CharField(choices=[("active", "Active"), ("resolved", "Resolved"), ("expired", "Expired")], db_index=True, default="active", max_length=16),
                ),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                (
                    "author",
                    models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="posts", to=settings.AUTH_USER_MODEL, db_index=True),
                ),
            ],
            options={
                "db_table": "posts",
                "ordering": ("-created_at",),
                "indexes": [
                    models.Index(fields=["author", "-created_at"], name="idx_post_author_created"),
                    models.Index(fields=["type", "category", "status"], name="idx_post_type_cat_status"),
                ],
            },
        ),
    ]
