import json
import logging
from typing import Any, Dict, Optional

from celery import shared_task
from django.conf import settings

log = logging.getLogger(__name__)


def publish_event(event: str, payload: Dict[str, Any], key: Optional[str] = None) -> None:
    """
    설정값 EVENT_BUS_BACKEND 에 따라 도메인 이벤트를 발행한다.
    - dummy: 로그만 남김(기본값)
    - 그 외 값은 아직 연결된 브로커가 없으므로 경고 후 로그로 대체
    """
    backend = getattr(settings, "EVENT_BUS_BACKEND", "dummy")
    if backend != "dummy":
        log.warning("Unsupported EVENT_BUS_BACKEND=%s. Fallback to log.", backend)
    log.info("[BUS][%s] key=%s %s", event, key or event, json.dumps(payload, ensure_ascii=False))


@shared_task(bind=True, name="posts.tasks.on_post_created")
def on_post_created(self, post_id: str, author_id: str, post_type: str = ""):
    publish_event("PostCreated", {"post_id": post_id, "author_id": author_id, "type": post_type}, key="post.created")


@shared_task(bind=True, name="posts.tasks.on_post_updated")
def on_post_updated(self, post_id: str, author_id: str, status: str = ""):
    publish_event("PostUpdated", {"post_id": post_id, "author_id": author_id, "status": status}, key="post.updated")


@shared_task(bind=True, name="posts.tasks.on_post_deleted")
def on_post_deleted(self, post_id: str, author_id: str):
    publish_event("PostDeleted", {"post_id": post_id, "author_id": author_id}, key="post.deleted")
