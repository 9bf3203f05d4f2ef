import uuid

import django.db.models.deletion
from django.db import migrations, models

import users.models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ("auth", "0012_alter_user_first_name_max_length"),
    ]

    operations = [
        migrations.CreateModel(
            name="User",
            fields=[
                ("password", models.CharField(max_length=128, verbose_name="password")),
                ("last_login", models.DateTimeField(blank=True, null=True, verbose_name="last login")),
                (
                    "is_superuser",
                    models.BooleanField(
                        default=False,
                        help_text="Designates that this user has all permissions without explicitly assigning them.",
                        verbose_name="superuser status",
                    ),
                ),
                ("id", models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False, serialize=False)),
                ("username", models.CharField(max_length=30, unique=True)),
                ("email", models.EmailField(max_length=254, unique=True)),
                ("phone", models.CharField(blank=True, default="", max_length=32)),
                ("avatar", models.CharField(blank=True, default="", max_length=512)),
                ("role", models.CharField(choices=[("user", "User"), ("admin", "Admin")], db_index=True, default="user", max_length=16)),
                (
                    "verification_status",
                    models.CharField(
                        choices=[("unverified", "Unverified"), ("pending", "Pending"), ("verified", "Verified"), ("rejected", "Rejected")],
                        db_index=True,
                        default="unverified",
                        max_length=16,
                    ),
                ),
                ("nid_front_image", models.CharField(blank=True, default="", max_length=512)),
                ("nid_back_image", models.CharField(blank=True, default="", max_length=512)),
                ("selfie_image", models.CharField(blank=True, default="", max_length=512)),
                ("rejection_reason", models.TextField(blank=True, default="")),
                ("verification_note", models.TextField(blank=True, default="")),
                ("verified_at", models.DateTimeField(blank=True, null=True)),
                ("is_banned", models.BooleanField(db_index=True, default=False)),
                ("ban_reason", models.TextField(blank=True, default="")),
                ("banned_at", models.DateTimeField(blank=True, null=True)),
                ("is_active", models.BooleanField(default=True)),
                ("is_staff", models.BooleanField(default=False)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                (
                    "verified_by",
                    models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name="+", to="users.user"),
                ),
                (
                    "banned_by",
                    models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name="+", to="users.user"),
                ),
                (
                    "groups",
                    models.ManyToManyField(
                        blank=True,
                        help_text="The groups this user belongs to. A user will get all permissions granted to each of their groups.",
                        related_name="user_set",
                        related_query_name="user",
                        to="auth.group",
                        verbose_name="groups",
                    ),
                ),
                (
                    "user_permissions",
                    models.ManyToManyField(
                        blank=True,
                        help_text="Specific permissions for this user.",
                        related_name="user_set",
                        related_query_name="user",
                        to="auth.permission",
                        verbose_name="user permissions",
                    ),
                ),
            ],
            options={
                "db_table": "users",
                "indexes": [
                    models.Index(fields=["verification_status", "created_at"], name="idx_user_status_created"),
                    models.Index(fields=["role", "-created_at"], name="idx_user_role_created"),
                ],
            },
            managers=[
                ("objects", users.models.UserManager()),
            ],
        ),
    ]
