# fpams/services/submission_service.py
from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Iterable, List, Optional, Type, Union

from sqlalchemy.orm import Session

from fpams.core.exceptions import Forbidden, InvalidState, Locked, NotFound
from fpams.models.activity import Activity
from fpams.models.enums import AuditAction, Role, SubmissionKind, SubmissionStatus
from fpams.models.subject import Subject
from fpams.models.teaching_score import TeachingScore
from fpams.models.user import User
from fpams.schemas.activity import ActivityCreate, ActivityUpdate
from fpams.schemas.teaching_score import TeachingScoreCreate, TeachingScoreUpdate
from fpams.services import audit_service

logger = logging.getLogger(__name__)

Submission = Union[Activity, TeachingScore]

# statuses in which the owner may still edit or delete
OWNER_EDITABLE = (SubmissionStatus.PENDING.value, SubmissionStatus.REJECTED.value)


def model_for(kind: SubmissionKind) -> Type[Submission]:
    return Activity if kind == SubmissionKind.ACTIVITY else TeachingScore


def get_submission(
    db: Session,
    kind: SubmissionKind,
    submission_id: int,
    *,
    for_update: bool = False,
) -> Submission:
    """
    Load a submission or raise NotFound.

    for_update=True takes a row lock (SELECT ... FOR UPDATE) so a
    read-modify-write by one validator cannot silently drop another's.
    """
    model = model_for(kind)
    query = db.query(model).filter(model.id == submission_id, model.is_deleted.is_(False))
    if for_update:
        query = query.with_for_update()
    submission = query.first()
    if submission is None:
        raise NotFound(f"{kind.value} {submission_id} not found")
    return submission


def _require_faculty(user: User) -> None:
    if user.role != Role.FACULTY.value:
        raise Forbidden("Only faculty can create submissions")


def create_activity(
    db: Session,
    *,
    faculty: User,
    obj_in: ActivityCreate,
) -> Activity:
    """
    Faculty records an activity; status starts PENDING with no marks.
    """
    _require_faculty(faculty)
    activity = Activity(
        faculty_id=faculty.id,
        category=obj_in.category.value,
        title=obj_in.title,
        description=obj_in.description,
        academic_year=obj_in.academic_year,
        proof_url=obj_in.proof_url,
        details=dict(obj_in.details),
        status=SubmissionStatus.PENDING.value,
        marks=None,
        is_locked=False,
        is_deleted=False,
    )
    db.add(activity)
    db.commit()
    db.refresh(activity)
    logger.info(f"Faculty {faculty.id} created activity {activity.id} ({activity.category})")
    return activity


def create_teaching_score(
    db: Session,
    *,
    faculty: User,
    obj_in: TeachingScoreCreate,
) -> TeachingScore:
    _require_faculty(faculty)
    if db.get(Subject, obj_in.subject_id) is None:
        raise NotFound(f"subject {obj_in.subject_id} not found")

    score = TeachingScore(
        faculty_id=faculty.id,
        subject_id=obj_in.subject_id,
        academic_year=obj_in.academic_year,
        score=obj_in.score,
        proof_url=obj_in.proof_url,
        status=SubmissionStatus.PENDING.value,
        marks=None,
        is_locked=False,
        is_deleted=False,
    )
    db.add(score)
    db.commit()
    db.refresh(score)
    logger.info(f"Faculty {faculty.id} created teaching score {score.id} (subject {score.subject_id})")
    return score


def _check_owner_can_change(submission: Submission, actor: User) -> None:
    if submission.faculty_id != actor.id:
        raise Forbidden("Only the owning faculty can change this submission")
    if submission.is_locked:
        raise Locked()
    if submission.status not in OWNER_EDITABLE:
        raise InvalidState(
            f"Cannot change a submission in status {submission.status}"
        )


def update_submission(
    db: Session,
    *,
    kind: SubmissionKind,
    submission_id: int,
    actor: User,
    obj_in: Union[ActivityUpdate, TeachingScoreUpdate],
) -> Submission:
    """
    Owner edit while PENDING or REJECTED.

    Editing a REJECTED submission resubmits it: status goes back to PENDING
    and one SUBMISSION_RESUBMIT audit entry is written.
    """
    submission = get_submission(db, kind, submission_id, for_update=True)
    _check_owner_can_change(submission, actor)

    update_data = obj_in.model_dump(exclude_unset=True)
    if "category" in update_data and update_data["category"] is not None:
        update_data["category"] = update_data["category"].value
    if kind == SubmissionKind.TEACHING and update_data.get("subject_id") is not None:
        if db.get(Subject, update_data["subject_id"]) is None:
            raise NotFound(f"subject {update_data['subject_id']} not found")

    for field, value in update_data.items():
        if value is None and field not in ("description", "proof_url"):
            continue
        setattr(submission, field, value)

    if submission.status == SubmissionStatus.REJECTED.value:
        old = submission.snapshot()
        submission.status = SubmissionStatus.PENDING.value
        submission.marks = None
        submission.last_modified_by = actor.id
        submission.last_modified_at = datetime.now(timezone.utc)
        audit_service.record(
            db,
            action=AuditAction.SUBMISSION_RESUBMIT,
            actor=actor,
            kind=kind,
            target_id=submission.id,
            old_value=old,
            new_value=submission.snapshot(),
            reason="Resubmitted by faculty after rejection",
        )
        logger.info(f"Faculty {actor.id} resubmitted {kind.value} {submission.id}")

    db.add(submission)
    db.commit()
    db.refresh(submission)
    return submission


def delete_submission(
    db: Session,
    *,
    kind: SubmissionKind,
    submission_id: int,
    actor: User,
) -> None:
    """Soft removal by the owner; same guards as editing."""
    submission = get_submission(db, kind, submission_id, for_update=True)
    _check_owner_can_change(submission, actor)
    submission.is_deleted = True
    db.add(submission)
    db.commit()
    logger.info(f"Faculty {actor.id} deleted {kind.value} {submission_id}")


def list_submissions(
    db: Session,
    *,
    kind: SubmissionKind,
    faculty_id: Optional[int] = None,
    department_id: Optional[int] = None,
    category: Optional[str] = None,
    categories: Optional[Iterable[str]] = None,
    status: Optional[str] = None,
    academic_year: Optional[str] = None,
    skip: int = 0,
    limit: int = 100,
) -> List[Submission]:
    """
    Filtered listing for validators.

    Deleted submissions and submissions of soft-deleted faculty are never
    returned.
    """
    model = model_for(kind)
    query = (
        db.query(model)
        .join(User, User.id == model.faculty_id)
        .filter(model.is_deleted.is_(False), User.is_deleted.is_(False))
    )
    if faculty_id is not None:
        query = query.filter(model.faculty_id == faculty_id)
    if department_id is not None:
        query = query.filter(User.department_id == department_id)
    if status:
        query = query.filter(model.status == status)
    if academic_year:
        query = query.filter(model.academic_year == academic_year)
    if kind == SubmissionKind.ACTIVITY:
        if category:
            query = query.filter(Activity.category == category)
        if categories is not None:
            query = query.filter(Activity.category.in_(list(categories)))

    return (
        query.order_by(model.created_at.desc(), model.id.desc())
        .offset(skip)
        .limit(limit)
        .all()
    )


def list_submissions_for_faculty(
    db: Session,
    *,
    kind: SubmissionKind,
    faculty: User,
    skip: int = 0,
    limit: int = 100,
) -> List[Submission]:
    """
    Faculty views their own submissions.
    """
    model = model_for(kind)
    return (
        db.query(model)
        .filter(model.faculty_id == faculty.id, model.is_deleted.is_(False))
        .order_by(model.created_at.desc(), model.id.desc())
        .offset(skip)
        .limit(limit)
        .all()
    )


def soft_delete_user(db: Session, *, user: User) -> User:
    """
    User-directory hook: the account is flagged deleted, its submissions stay
    in place but drop out of every validator query.
    """
    user.is_deleted = True
    db.add(user)
    db.commit()
    db.refresh(user)
    logger.info(f"User {user.id} soft-deleted")
    return user
