"""
In-app notifications written by the worker after a validation transition.
"""

import pytest

from fpams.core.exceptions import NotFound
from fpams.models.enums import SubmissionKind, ValidationAction
from fpams.models.notification import Notification
from fpams.schemas.activity import ActivityCreate
from fpams.schemas.validation import TransitionRequest
from fpams.services import notification_service, submission_service
from fpams.services.marks_formula import Category
from fpams.services.validation_service import validation_service
from fpams.workers import tasks


@pytest.fixture
def approved_activity(db_session, faculty, hod):
    activity = submission_service.create_activity(
        db_session,
        faculty=faculty,
        obj_in=ActivityCreate(
            category=Category.ADMIN_ACTIVITIES,
            title="Timetable committee",
            academic_year="2024-25",
            details={"count": 2},
        ),
    )
    return validation_service.transition(
        db_session,
        kind=SubmissionKind.ACTIVITY,
        submission_id=activity.id,
        actor=hod,
        action=ValidationAction.APPROVE,
        payload=TransitionRequest(action=ValidationAction.APPROVE),
    )


@pytest.fixture
def worker_session(db_session, monkeypatch):
    """Run worker tasks against the test database."""
    monkeypatch.setattr(tasks, "SessionLocal", lambda: db_session)
    return db_session


class TestNotifyStatusChange:

    def test_owner_is_notified(self, db_session, approved_activity, faculty):
        notification = notification_service.notify_status_change(
            db_session,
            kind=SubmissionKind.ACTIVITY,
            submission_id=approved_activity.id,
            action=ValidationAction.APPROVE.value,
        )
        assert notification.user_id == faculty.id
        assert notification.read is False
        assert notification.title == "Submission approved"
        assert "Timetable committee" in notification.message
        assert "Marks: 20" in notification.message


class TestMarkRead:

    def _notify(self, db, user, n):
        for i in range(n):
            db.add(Notification(user_id=user.id, title=f"Note {i}", message="m", read=False))
        db.commit()

    def test_mark_one(self, db_session, faculty):
        self._notify(db_session, faculty, 2)
        first = notification_service.list_notifications(db_session, user=faculty)[-1]
        assert notification_service.mark_read(db_session, user=faculty, notification_id=first.id) == 1
        unread = [n for n in notification_service.list_notifications(db_session, user=faculty) if not n.read]
        assert len(unread) == 1

    def test_mark_all(self, db_session, faculty):
        self._notify(db_session, faculty, 3)
        assert notification_service.mark_read(db_session, user=faculty, mark_all=True) == 3
        assert notification_service.mark_read(db_session, user=faculty, mark_all=True) == 0

    def test_someone_elses_notification(self, db_session, faculty, other_faculty):
        self._notify(db_session, other_faculty, 1)
        theirs = notification_service.list_notifications(db_session, user=other_faculty)[0]
        with pytest.raises(NotFound):
            notification_service.mark_read(db_session, user=faculty, notification_id=theirs.id)


class TestNotificationTask:

    def test_task_success(self, worker_session, approved_activity, faculty):
        owner_id, activity_id = faculty.id, approved_activity.id
        result = tasks.notification_task(
            SubmissionKind.ACTIVITY.value, activity_id, ValidationAction.APPROVE.value
        )
        assert result["status"] == "success"
        assert result["user_id"] == owner_id
        assert worker_session.query(Notification).count() == 1

    def test_task_missing_submission(self, worker_session):
        result = tasks.notification_task(SubmissionKind.ACTIVITY.value, 404, ValidationAction.REJECT.value)
        assert result["status"] == "error"
        assert result["submission_id"] == 404
