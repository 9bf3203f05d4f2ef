import uuid

from django.conf import settings
from django.db import models

MAX_MESSAGE_LENGTH = 1000


class Message(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    sender = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="messages_sent")
    receiver = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="messages_received")
    # 어떤 게시글을 보고 연락했는지(선택). 게시글이 지워져도 대화는 남는다.
    post = models.ForeignKey("posts.Post", on_delete=models.SET_NULL, null=True, blank=True, related_name="+")
    content = models.TextField(max_length=MAX_MESSAGE_LENGTH)
    is_read = models.BooleanField(default=False)
    created_at = models.DateTimeField(auto_now_add=True, db_index=True)

    class Meta:
        db_table = "messages"
        ordering = ("created_at",)
        indexes = [
            models.Index(fields=["sender", "receiver", "-created_at"], name="idx_msg_pair_created"),
            models.Index(fields=["receiver", "is_read"], name="idx_msg_receiver_read"),
        ]

    def __str__(self):
        return f"{self.sender_id} -> {self.receiver_id}"
