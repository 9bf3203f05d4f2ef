from django.db.models.signals import post_delete, post_save
from django.dispatch import receiver

from common.tasks import spawn

from . import tasks
from .models import Post


@receiver(post_save, sender=Post)
def on_post_created_or_updated(sender, instance, created: bool, **kwargs):
    if created:
        spawn(tasks.on_post_created, str(instance.id), str(instance.author_id), instance.type)
    else:
        spawn(tasks.on_post_updated, str(instance.id), str(instance.author_id), instance.status)


@receiver(post_delete, sender=Post)
def on_post_deleted(sender, instance, **kwargs):
    spawn(tasks.on_post_deleted, str(instance.id), str(instance.author_id))
