import logging

from celery import shared_task

from notifications.models import Notification
from notifications.services import notify
from posts.tasks import publish_event

log = logging.getLogger(__name__)


@shared_task(bind=True, name="comments.tasks.on_comment_created")
def on_comment_created(self, comment_id: str, post_id: str, author_id: str, parent_id: str = ""):
    """
    CommentCreated:
    - 버스 발행
    - 최상위 댓글이면 게시글 작성자, 대댓글이면 부모 댓글 작성자에게 알림(본인 제외)
    """
    publish_event("CommentCreated", {"comment_id": comment_id, "post_id": post_id, "author_id": author_id, "parent_id": parent_id}, key="comment.created")

    from comments.models import Comment

    comment = Comment.objects.select_related("author", "post", "parent").filter(pk=comment_id).first()
    if comment is None:
        log.info("comment %s vanished before notification", comment_id)
        return None

    actor = comment.author.username
    if comment.parent_id:
        created = notify(
            user_id=comment.parent.author_id,
            type_=Notification.Type.REPLY,
            title="New Reply",
            message=f"{actor} replied to your comment",
            from_user_id=comment.author_id,
            post_id=comment.post_id,
            comment_id=comment.pk,
            link=f"/post/{comment.post_id}",
        )
    else:
        created = notify(
            user_id=comment.post.author_id,
            type_=Notification.Type.COMMENT,
            title="New Comment",
            message=f'{actor} commented on your post "{comment.post.title}"',
            from_user_id=comment.author_id,
            post_id=comment.post_id,
            comment_id=comment.pk,
            link=f"/post/{comment.post_id}",
        )
    return str(created.id) if created else None


@shared_task(bind=True, name="comments.tasks.on_comment_deleted")
def on_comment_deleted(self, comment_id: str, post_id: str, author_id: str):
    publish_event("CommentDeleted", {"comment_id": comment_id, "post_id": post_id, "author_id": author_id}, key="comment.deleted")
