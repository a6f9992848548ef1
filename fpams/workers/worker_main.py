# fpams/workers/worker_main.py
import logging

from rq import Queue, SimpleWorker

from fpams.core.config import settings
from fpams.core.logging_config import setup_logging
from fpams.workers.queue import get_redis_connection

logger = logging.getLogger(__name__)

QUEUE_NAMES = [settings.NOTIFICATION_QUEUE_NAME]


def main():
    setup_logging()
    redis_conn = get_redis_connection()
    queues = [Queue(name, connection=redis_conn) for name in QUEUE_NAMES]

    logger.info(f"Worker listening on {', '.join(QUEUE_NAMES)}")
    worker = SimpleWorker(queues, connection=redis_conn)
    # scheduler runs the delayed retries of failed notifications
    worker.work(with_scheduler=True)


if __name__ == "__main__":
    main()
