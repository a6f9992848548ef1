# fpams/api/v1/endpoints/validations.py
import logging
from typing import List, Optional

from fastapi import APIRouter, Depends
from redis.exceptions import RedisError
from sqlalchemy.orm import Session

from fpams.api.v1.serializers import to_public, to_public_list
from fpams.core.security import get_current_user
from fpams.db.session import get_db
from fpams.models.enums import SubmissionKind, SubmissionStatus
from fpams.models.user import User
from fpams.schemas.activity import ActivityPublic
from fpams.schemas.teaching_score import TeachingScorePublic
from fpams.schemas.validation import TransitionRequest
from fpams.services.validation_service import ValidationService, get_validation_service
from fpams.workers import queue

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/validations", tags=["validations"])

SubmissionOut = ActivityPublic | TeachingScorePublic


@router.get("/{kind}", response_model=List[SubmissionOut])
def review_queue(
    kind: SubmissionKind,
    faculty_id: Optional[int] = None,
    category: Optional[str] = None,
    status: Optional[SubmissionStatus] = None,
    academic_year: Optional[str] = None,
    skip: int = 0,
    limit: int = 100,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
    service: ValidationService = Depends(get_validation_service),
):
    """
    Submissions the caller may review, scoped by role.
    """
    submissions = service.list_queue(
        db,
        kind=kind,
        actor=current_user,
        faculty_id=faculty_id,
        category=category,
        status=status.value if status else None,
        academic_year=academic_year,
        skip=skip,
        limit=limit,
    )
    return to_public_list(db, kind, submissions)


@router.post("/{kind}/{submission_id}", response_model=SubmissionOut)
def apply_transition(
    kind: SubmissionKind,
    submission_id: int,
    payload: TransitionRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
    service: ValidationService = Depends(get_validation_service),
):
    """
    Apply one validation action. The owner is notified asynchronously once
    the change is committed.
    """
    submission = service.transition(
        db,
        kind=kind,
        submission_id=submission_id,
        actor=current_user,
        action=payload.action,
        payload=payload,
    )

    try:
        job_id = queue.enqueue_notification_task(kind.value, submission.id, payload.action.value)
        logger.info(f"Enqueued notification job {job_id} for {kind.value} {submission.id}")
    except RedisError as e:
        # transition is already committed; notification is best effort
        logger.error(f"Failed to enqueue notification for {kind.value} {submission.id}: {e}")

    return to_public(db, submission)
