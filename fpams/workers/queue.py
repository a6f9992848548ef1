# fpams/workers/queue.py
"""
RQ plumbing for post-commit side effects.

The API process only enqueues; ``fpams.workers.worker_main`` consumes.
"""

from typing import Any, Callable

from redis import Redis
from rq import Queue, Retry

from fpams.core.config import settings

# notifications are cheap; keep results briefly and failures for a day
NOTIFICATION_RESULT_TTL = 60 * 60
NOTIFICATION_FAILURE_TTL = 24 * 60 * 60
NOTIFICATION_RETRY = Retry(max=3, interval=[10, 30, 60])

_redis_conn: Redis | None = None


def get_redis_connection() -> Redis:
    global _redis_conn
    if _redis_conn is None:
        _redis_conn = Redis.from_url(settings.REDIS_URL)
    return _redis_conn


def get_queue(name: str) -> Queue:
    return Queue(name, connection=get_redis_connection())


def enqueue_job(
    func: Callable[..., Any],
    *args: Any,
    queue_name: str,
    **job_options: Any,
) -> str:
    """Enqueue ``func(*args)`` and return the job id; ``job_options`` go to RQ."""
    job = get_queue(queue_name).enqueue(func, *args, **job_options)
    return job.id


def enqueue_notification_task(kind: str, submission_id: int, action: str) -> str:
    """Queue the owner notification for a committed transition."""
    from fpams.workers.tasks import notification_task

    return enqueue_job(
        notification_task,
        kind,
        submission_id,
        action,
        queue_name=settings.NOTIFICATION_QUEUE_NAME,
        description=f"notify {kind} {submission_id} {action}",
        result_ttl=NOTIFICATION_RESULT_TTL,
        failure_ttl=NOTIFICATION_FAILURE_TTL,
        retry=NOTIFICATION_RETRY,
    )
