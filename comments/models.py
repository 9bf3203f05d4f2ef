import uuid

from django.conf import settings
from django.core.exceptions import ValidationError
from django.db import models

MAX_COMMENT_LENGTH = 500


class Comment(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    post = models.ForeignKey("posts.Post", on_delete=models.CASCADE, related_name="comments")
    author = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="comments")
    parent = models.ForeignKey("self", on_delete=models.CASCADE, null=True, blank=True, related_name="replies")
    content = models.TextField(max_length=MAX_COMMENT_LENGTH)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = "comments"
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["post", "-created_at"], name="idx_comment_post_created"),
            models.Index(fields=["author"], name="idx_comment_author"),
            models.Index(fields=["parent"], name="idx_comment_parent"),
        ]

    def clean(self):
        # 대댓글은 같은 게시글의 최상위 댓글에만 달 수 있다(1단계 중첩)
        if self.parent_id:
            if self.parent.post_id != self.post_id:
                raise ValidationError({"parent": "Parent comment must belong to the same post."})
            if self.parent.parent_id is not None:
                raise ValidationError({"parent": "Replies can only be added to top-level comments."})

    @property
    def is_reply(self) -> bool:
        return self.parent_id is not None

    def __str__(self):
        return f"Comment({self.id}) by {self.author_id} on post {self.post_id}"
