import logging

from django.core.exceptions import ValidationError
from django.db import transaction
from django.db.models import Q

from common.exceptions import Forbidden, NotFound
from posts.models import Post
from users.services.gating import GatedAction, require_verified

from .models import MAX_COMMENT_LENGTH, Comment

log = logging.getLogger(__name__)


def get_comment(comment_id) -> Comment:
    comment = Comment.objects.select_related("author", "post").filter(pk=comment_id).first()
    if comment is None:
        raise NotFound("Comment not found.")
    return comment


@transaction.atomic
def create_comment(*, author, post_id, content: str, parent_id=None) -> Comment:
    # 대댓글도 댓글과 같은 게이트를 거친다
    require_verified(author.pk, GatedAction.CREATE_COMMENT)

    post = Post.objects.filter(pk=post_id).first()
    if post is None:
        raise NotFound("Post not found.")

    content = (content or "").strip()
    if not content:
        raise ValidationError({"content": "Content must not be empty."})
    if len(content) > MAX_COMMENT_LENGTH:
        raise ValidationError({"content": f"Comment cannot exceed {MAX_COMMENT_LENGTH} characters."})

    parent = None
    if parent_id:
        parent = Comment.objects.filter(pk=parent_id).first()
        if parent is None:
            raise NotFound("Parent comment not found.")

    comment = Comment(post=post, author=author, parent=parent, content=content)
    comment.clean()
    comment.save()
    log.info("comment created: comment=%s post=%s reply=%s", comment.pk, post.pk, bool(parent))
    return comment


@transaction.atomic
def delete_comment(*, actor, comment_id) -> int:
    """
    댓글과 그 대댓글을 하나의 조건식으로 함께 지운다. 지운 댓글 수(대댓글 N개면 N+1)를 반환.
    """
    comment = get_comment(comment_id)
    if comment.author_id != actor.pk:
        raise Forbidden("Not authorized to delete this comment.")

    _, per_model = Comment.objects.filter(Q(pk=comment.pk) | Q(parent_id=comment.pk)).delete()
    deleted = per_model.get(Comment._meta.label, 0)
    log.info("comment deleted: comment=%s removed=%s", comment.pk, deleted)
    return deleted


def comment_tree(post_id):
    """
    최상위 댓글은 최신순, 대댓글은 오래된 순. 한 번의 쿼리로 읽어 메모리에서 묶는다.
    """
    rows = list(Comment.objects.filter(post_id=post_id).select_related("author").order_by("-created_at"))
    replies = {}
    for c in rows:
        if c.parent_id is not None:
            replies.setdefault(c.parent_id, []).append(c)

    top = [c for c in rows if c.parent_id is None]
    for c in top:
        c.reply_list = sorted(replies.get(c.pk, []), key=lambda r: r.created_at)
    return top
