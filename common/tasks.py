from django.conf import settings
from django.db import transaction


def spawn(task, *args, **kwargs):
    # 테스트/로컬에서 CELERY_TASK_ALWAYS_EAGER=True 라면 즉시 동기 실행(.apply)
    if getattr(settings, "CELERY_TASK_ALWAYS_EAGER", False):
        return task.apply(args=args, kwargs=kwargs)
    # 워커가 아직 커밋되지 않은 행을 읽지 않도록 커밋 후 발행
    transaction.on_commit(lambda: task.delay(*args, **kwargs))
    return None
