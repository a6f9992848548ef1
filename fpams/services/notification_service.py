# fpams/services/notification_service.py
from typing import List, Optional

from sqlalchemy.orm import Session

from fpams.core.exceptions import NotFound
from fpams.models.activity import Activity
from fpams.models.enums import SubmissionKind, ValidationAction
from fpams.models.notification import Notification
from fpams.models.user import User
from fpams.services import submission_service

_ACTION_VERBS = {
    ValidationAction.VERIFY.value: "was verified by the exam cell",
    ValidationAction.APPROVE.value: "was approved",
    ValidationAction.REJECT.value: "was rejected",
    ValidationAction.REVALIDATE.value: "was revalidated by your HOD",
    ValidationAction.OVERRIDE.value: "was updated by the Principal",
    ValidationAction.LOCK.value: "was locked by the Principal",
    ValidationAction.UNLOCK.value: "was unlocked by the Principal",
}


def _describe(submission) -> str:
    if isinstance(submission, Activity):
        return f"Activity '{submission.title}'"
    return f"Teaching score for subject {submission.subject_id} ({submission.academic_year})"


def notify_status_change(
    db: Session,
    *,
    kind: SubmissionKind,
    submission_id: int,
    action: str,
) -> Notification:
    """
    Tell the owning faculty what happened to their submission.

    Runs in the worker, after the transition has been committed.
    """
    submission = submission_service.get_submission(db, kind, submission_id)

    message = f"{_describe(submission)} {_ACTION_VERBS.get(action, 'was updated')}."
    if submission.marks is not None:
        message += f" Marks: {submission.marks:g}."

    notification = Notification(
        user_id=submission.faculty_id,
        title=f"Submission {submission.status.replace('_', ' ').lower()}",
        message=message,
        read=False,
    )
    db.add(notification)
    db.commit()
    db.refresh(notification)
    return notification


def list_notifications(db: Session, *, user: User, limit: int = 50) -> List[Notification]:
    return (
        db.query(Notification)
        .filter(Notification.user_id == user.id)
        .order_by(Notification.created_at.desc(), Notification.id.desc())
        .limit(limit)
        .all()
    )


def mark_read(
    db: Session,
    *,
    user: User,
    notification_id: Optional[int] = None,
    mark_all: bool = False,
) -> int:
    """Returns the number of notifications flipped to read."""
    query = db.query(Notification).filter(
        Notification.user_id == user.id, Notification.read.is_(False)
    )
    if not mark_all:
        if notification_id is None:
            return 0
        if db.query(Notification).filter(
            Notification.id == notification_id, Notification.user_id == user.id
        ).first() is None:
            raise NotFound(f"notification {notification_id} not found")
        query = query.filter(Notification.id == notification_id)

    updated = query.update({Notification.read: True}, synchronize_session=False)
    db.commit()
    return updated
