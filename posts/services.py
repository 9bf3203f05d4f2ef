from __future__ import annotations

import logging
from typing import Mapping

from django.conf import settings
from django.core.exceptions import ValidationError
from django.db import transaction
from django.db.models import Count, Q

from common.exceptions import Forbidden, NotFound
from users.services.gating import GatedAction, require_verified

from .models import Post, PostStatus, PostType

log = logging.getLogger(__name__)

EDITABLE_FIELDS = (
    "title",
    "description",
    "type",
    "category",
    "date_lost",
    "date_found",
    "location_address",
    "latitude",
    "longitude",
    "images",
    "tags",
    "status",
)


def _limit(key: str, default: int) -> int:
    return int(getattr(settings, "POST_LIMITS", {}).get(key, default))


def _normalize_lists(data: dict) -> None:
    if "images" in data:
        images = [str(i).strip() for i in (data["images"] or []) if str(i).strip()]
        if len(images) > _limit("MAX_IMAGES", 5):
            raise ValidationError({"images": f"Too many images (>{_limit('MAX_IMAGES', 5)})"})
        data["images"] = images
    if "tags" in data:
        # 순서 유지 + 중복 제거
        tags = list(dict.fromkeys(str(t).strip() for t in (data["tags"] or []) if str(t).strip()))
        if len(tags) > _limit("MAX_TAGS", 10):
            raise ValidationError({"tags": f"Too many tags (>{_limit('MAX_TAGS', 10)})"})
        data["tags"] = tags


def _drop_foreign_date(post: Post) -> None:
    # 유형과 맞지 않는 날짜는 버린다(lost -> date_found 제거, found -> date_lost 제거)
    if post.type == PostType.LOST:
        post.date_found = None
    elif post.type == PostType.FOUND:
        post.date_lost = None


def get_post(post_id) -> Post:
    post = Post.objects.select_related("author").filter(pk=post_id).first()
    if post is None:
        raise NotFound("Post not found.")
    return post


@transaction.atomic
def create_post(*, author, data: Mapping) -> Post:
    # 작성 시점의 인증 상태로 판정(정지 계정은 AccountSuspended)
    require_verified(author.pk, GatedAction.CREATE_POST)

    values = {k: v for k, v in dict(data).items() if k in EDITABLE_FIELDS}
    values.pop("status", None)
    _normalize_lists(values)

    post = Post(author=author, **values)
    _drop_foreign_date(post)
    post.clean()
    post.save()
    log.info("post created: post=%s author=%s", post.pk, author.pk)
    return post


@transaction.atomic
def update_post(*, actor, post_id, data: Mapping) -> Post:
    post = get_post(post_id)
    if post.author_id != actor.pk:
        raise Forbidden("Not authorized to update this post.")

    values = {k: v for k, v in dict(data).items() if k in EDITABLE_FIELDS}
    _normalize_lists(values)
    for k, v in values.items():
        setattr(post, k, v)
    _drop_foreign_date(post)
    post.clean()
    post.save()
    log.info("post updated: post=%s fields=%s", post.pk, sorted(values))
    return post


@transaction.atomic
def delete_post(*, actor, post_id) -> None:
    post = get_post(post_id)
    if post.author_id != actor.pk:
        raise Forbidden("Not authorized to delete this post.")
    post.delete()
    log.info("post deleted: post=%s author=%s", post_id, actor.pk)


def user_post_stats(user_id) -> dict:
    agg = Post.objects.filter(author_id=user_id).aggregate(
        total=Count("id"),
        lost=Count("id", filter=Q(type=PostType.LOST)),
        found=Count("id", filter=Q(type=PostType.FOUND)),
        active=Count("id", filter=Q(status=PostStatus.ACTIVE)),
        resolved=Count("id", filter=Q(status=PostStatus.RESOLVED)),
    )
    return {k: v or 0 for k, v in agg.items()}
