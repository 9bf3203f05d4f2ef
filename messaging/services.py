import logging

from django.contrib.auth import get_user_model
from django.core.exceptions import ValidationError
from django.db import transaction
from django.db.models import Q

from common.exceptions import Forbidden, NotFound
from posts.models import Post

from .models import MAX_MESSAGE_LENGTH, Message

User = get_user_model()
log = logging.getLogger(__name__)


@transaction.atomic
def send_message(*, sender, receiver_id, content, post_id=None) -> Message:
    content = (content or "").strip()
    if not content:
        raise ValidationError({"content": "Message content is required"})
    if len(content) > MAX_MESSAGE_LENGTH:
        raise ValidationError({"content": f"Message cannot exceed {MAX_MESSAGE_LENGTH} characters"})
    if str(receiver_id) == str(sender.pk):
        raise ValidationError({"receiver_id": "Cannot send message to yourself"})

    if not User.objects.filter(pk=receiver_id).exists():
        raise NotFound("Receiver not found.")
    if post_id and not Post.objects.filter(pk=post_id).exists():
        raise NotFound("Post not found.")

    message = Message.objects.create(sender=sender, receiver_id=receiver_id, post_id=post_id or None, content=content)
    log.info("message sent: message=%s sender=%s receiver=%s", message.pk, sender.pk, receiver_id)
    return message


def conversations(user) -> list:
    """
    대화 상대별 요약(최근 메시지 + 내가 안 읽은 수). 최근 대화 순.
    """
    qs = (
        Message.objects.filter(Q(sender=user) | Q(receiver=user))
        .select_related("sender", "receiver", "post")
        .order_by("-created_at")
    )
    summaries = {}
    for msg in qs:
        partner = msg.receiver if msg.sender_id == user.pk else msg.sender
        entry = summaries.setdefault(partner.pk, {"partner": partner, "last_message": msg, "unread_count": 0})
        if msg.receiver_id == user.pk and not msg.is_read:
            entry["unread_count"] += 1
    return list(summaries.values())


@transaction.atomic
def thread(user, other_id) -> list:
    """두 사용자 사이 메시지(오래된 순). 조회하면 상대가 보낸 안 읽은 메시지를 읽음 처리한다."""
    if not User.objects.filter(pk=other_id).exists():
        raise NotFound("User not found.")

    messages = list(
        Message.objects.filter(Q(sender=user, receiver_id=other_id) | Q(sender_id=other_id, receiver=user))
        .select_related("sender", "receiver", "post")
        .order_by("created_at")
    )
    Message.objects.filter(sender_id=other_id, receiver=user, is_read=False).update(is_read=True)
    return messages


@transaction.atomic
def delete_message(*, actor, message_id) -> None:
    message = Message.objects.filter(pk=message_id).first()
    if message is None:
        raise NotFound("Message not found.")
    if message.sender_id != actor.pk:
        raise Forbidden("Not authorized to delete this message.")
    message.delete()


def unread_count(user) -> int:
    return Message.objects.filter(receiver=user, is_read=False).count()
