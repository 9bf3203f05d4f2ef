from django.contrib import admin

from .models import Post


@admin.register(Post)
class PostAdmin(admin.ModelAdmin):
    list_display = ("id", "title", "type", "category", "status", "author", "created_at")
    list_filter = ("type", "category", "status", "created_at")
    search_fields = ("id", "title", "author__username", "author__email")
    ordering = ("-created_at",)
