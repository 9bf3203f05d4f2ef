import uuid

from django.conf import settings
from django.core.exceptions import ValidationError
from django.db import models


class PostType(models.TextChoices):
    LOST = "lost", "Lost"
    FOUND = "found", "Found"


class Category(models.TextChoices):
    ELECTRONICS = "electronics", "Electronics"
    DOCUMENTS = "documents", "Documents"
    JEWELRY = "jewelry", "Jewelry"
    CLOTHING = "clothing", "Clothing"
    PETS = "pets", "Pets"
    BAGS = "bags", "Bags"
    KEYS = "keys", "Keys"
    OTHER = "other", "Other"


class PostStatus(models.TextChoices):
    ACTIVE = "active", "Active"
    RESOLVED = "resolved", "Resolved"
    EXPIRED = "expired", "Expired"  # 예약 상태(자동 만료 로직 없음)


class Post(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    author = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="posts", db_index=True)
    title = models.CharField(max_length=100)
    description = models.TextField(max_length=1000)
    type = models.CharField(max_length=8, choices=PostType.choices)
    category = models.CharField(max_length=16, choices=Category.choices)
    date_lost = models.DateTimeField(null=True, blank=True)
    date_found = models.DateTimeField(null=True, blank=True)

    location_address = models.CharField(max_length=255)
    latitude = models.FloatField(null=True, blank=True)
    longitude = models.FloatField(null=True, blank=True)

    images = models.JSONField(default=list, blank=True)  # 스토리지 참조 문자열 목록
    tags = models.JSONField(default=list, blank=True)
    status = models.CharField(max_length=16, choices=PostStatus.choices, default=PostStatus.ACTIVE, db_index=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = "posts"
        ordering = ("-created_at",)
        indexes = [
            models.Index(fields=["author", "-created_at"], name="idx_post_author_created"),
            models.Index(fields=["type", "category", "status"], name="idx_post_type_cat_status"),
        ]

    def __str__(self):
        return f"Post<{self.id}> {self.type}:{self.title}"

    @property
    def event_date(self):
        return self.date_lost if self.type == PostType.LOST else self.date_found

    def clean(self):
        # 유형에 맞는 날짜 하나만 존재해야 한다
        if self.type == PostType.LOST:
            if self.date_lost is None:
                raise ValidationError({"date_lost": "Date lost is required for lost items"})
            if self.date_found is not None:
                raise ValidationError({"date_found": "Lost items cannot carry a found date"})
        elif self.type == PostType.FOUND:
            if self.date_found is None:
                raise ValidationError({"date_found": "Date found is required for found items"})
            if self.date_lost is not None:
                raise ValidationError({"date_lost": "Found items cannot carry a lost date"})
