"""
Notification tasks for the worker.
Executed by RQ workers after a validation transition has been committed.
"""

import logging
from fpams.db.session import SessionLocal
from fpams.core.exceptions import WorkflowError
from fpams.models.enums import SubmissionKind
from fpams.services.notification_service import notify_status_change

logger = logging.getLogger(__name__)


def notification_task(kind: str, submission_id: int, action: str) -> dict:
    """
    Worker task that writes an in-app notification for the submission owner.

    Args:
        kind: "activity" or "teaching"
        submission_id: id of the submission that changed
        action: the ValidationAction value that was applied

    Returns:
        Dictionary with the task outcome
    """
    db = SessionLocal()
    try:
        logger.info(f"Starting notification task for {kind} {submission_id} ({action})")

        notification = notify_status_change(
            db,
            kind=SubmissionKind(kind),
            submission_id=submission_id,
            action=action,
        )

        logger.info(
            f"Notified user {notification.user_id} about {kind} {submission_id}: {notification.message}"
        )
        return {
            "status": "success",
            "submission_id": submission_id,
            "notification_id": notification.id,
            "user_id": notification.user_id,
        }

    except WorkflowError as e:
        # submission vanished (e.g. deleted) between commit and job run
        logger.error(f"Notification failed for {kind} {submission_id}: {e}")
        return {
            "status": "error",
            "submission_id": submission_id,
            "error": str(e),
        }

    except Exception as e:
        # re-raised so RQ schedules a retry
        logger.error(
            f"Unexpected error during notification task for {kind} {submission_id}: {e}",
            exc_info=True
        )
        db.rollback()
        raise

    finally:
        db.close()
