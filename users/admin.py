from django.contrib import admin

from .models import User


@admin.register(User)
class UserAdmin(admin.ModelAdmin):
    list_display = ("id", "username", "email", "role", "verification_status", "is_banned", "created_at")
    list_filter = ("role", "verification_status", "is_banned", "created_at")
    search_fields = ("id", "username", "email")
    ordering = ("-created_at",)
    exclude = ("password",)
