from django.db.models.signals import post_delete, post_save
from django.dispatch import receiver

from common.tasks import spawn

from . import tasks
from .models import Comment


@receiver(post_save, sender=Comment)
def on_comment_created(sender, instance: Comment, created: bool, **kwargs):
    # 댓글은 수정 연산이 없으므로 생성만 처리
    if not created:
        return
    spawn(
        tasks.on_comment_created,
        comment_id=str(instance.id),
        post_id=str(instance.post_id),
        author_id=str(instance.author_id),
        parent_id=str(instance.parent_id) if instance.parent_id else "",
    )


@receiver(post_delete, sender=Comment)
def on_comment_deleted(sender, instance: Comment, **kwargs):
    spawn(tasks.on_comment_deleted, comment_id=str(instance.id), post_id=str(instance.post_id), author_id=str(instance.author_id))
