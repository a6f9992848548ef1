# fpams/api/v1/endpoints/teaching_scores.py
from typing import List

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from fpams.api.v1.serializers import to_public, to_public_list
from fpams.core.security import get_current_faculty, get_current_user
from fpams.db.session import get_db
from fpams.models.enums import SubmissionKind
from fpams.models.user import User
from fpams.schemas.teaching_score import (
    TeachingScoreCreate,
    TeachingScorePublic,
    TeachingScoreUpdate,
)
from fpams.services import submission_service
from fpams.services.validation_service import ValidationService, get_validation_service

router = APIRouter(prefix="/teaching-scores", tags=["teaching-scores"])

KIND = SubmissionKind.TEACHING


@router.post("/", response_model=TeachingScorePublic, status_code=status.HTTP_201_CREATED)
def create_teaching_score(
    obj_in: TeachingScoreCreate,
    db: Session = Depends(get_db),
    current_faculty: User = Depends(get_current_faculty),
):
    """
    Faculty records a teaching score for one subject and year.
    """
    score = submission_service.create_teaching_score(db, faculty=current_faculty, obj_in=obj_in)
    return to_public(db, score)


@router.get("/me", response_model=List[TeachingScorePublic])
def list_my_teaching_scores(
    db: Session = Depends(get_db),
    current_faculty: User = Depends(get_current_faculty),
    skip: int = 0,
    limit: int = 100,
):
    scores = submission_service.list_submissions_for_faculty(
        db, kind=KIND, faculty=current_faculty, skip=skip, limit=limit
    )
    return to_public_list(db, KIND, scores)


@router.get("/{score_id}", response_model=TeachingScorePublic)
def get_teaching_score(
    score_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
    service: ValidationService = Depends(get_validation_service),
):
    """
    Owner or any validator whose scope covers the score.
    """
    score = submission_service.get_submission(db, KIND, score_id)
    service.ensure_can_view(current_user, KIND, score)
    return to_public(db, score)


@router.put("/{score_id}", response_model=TeachingScorePublic)
def update_teaching_score(
    score_id: int,
    obj_in: TeachingScoreUpdate,
    db: Session = Depends(get_db),
    current_faculty: User = Depends(get_current_faculty),
):
    score = submission_service.update_submission(
        db, kind=KIND, submission_id=score_id, actor=current_faculty, obj_in=obj_in
    )
    return to_public(db, score)


@router.delete("/{score_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_teaching_score(
    score_id: int,
    db: Session = Depends(get_db),
    current_faculty: User = Depends(get_current_faculty),
):
    submission_service.delete_submission(
        db, kind=KIND, submission_id=score_id, actor=current_faculty
    )
    return None
