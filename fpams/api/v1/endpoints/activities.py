# fpams/api/v1/endpoints/activities.py
from typing import List

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from fpams.api.v1.serializers import to_public, to_public_list
from fpams.core.security import get_current_faculty, get_current_user
from fpams.db.session import get_db
from fpams.models.enums import SubmissionKind
from fpams.models.user import User
from fpams.schemas.activity import ActivityCreate, ActivityPublic, ActivityUpdate
from fpams.services import submission_service
from fpams.services.validation_service import ValidationService, get_validation_service

router = APIRouter(prefix="/activities", tags=["activities"])

KIND = SubmissionKind.ACTIVITY


@router.post("/", response_model=ActivityPublic, status_code=status.HTTP_201_CREATED)
def create_activity(
    obj_in: ActivityCreate,
    db: Session = Depends(get_db),
    current_faculty: User = Depends(get_current_faculty),
):
    """
    Faculty records an activity; it starts PENDING without marks.
    """
    activity = submission_service.create_activity(db, faculty=current_faculty, obj_in=obj_in)
    return to_public(db, activity)


@router.get("/me", response_model=List[ActivityPublic])
def list_my_activities(
    db: Session = Depends(get_db),
    current_faculty: User = Depends(get_current_faculty),
    skip: int = 0,
    limit: int = 100,
):
    activities = submission_service.list_submissions_for_faculty(
        db, kind=KIND, faculty=current_faculty, skip=skip, limit=limit
    )
    return to_public_list(db, KIND, activities)


@router.get("/{activity_id}", response_model=ActivityPublic)
def get_activity(
    activity_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
    service: ValidationService = Depends(get_validation_service),
):
    """
    Owner or any validator whose scope covers the activity.
    """
    activity = submission_service.get_submission(db, KIND, activity_id)
    service.ensure_can_view(current_user, KIND, activity)
    return to_public(db, activity)


@router.put("/{activity_id}", response_model=ActivityPublic)
def update_activity(
    activity_id: int,
    obj_in: ActivityUpdate,
    db: Session = Depends(get_db),
    current_faculty: User = Depends(get_current_faculty),
):
    activity = submission_service.update_submission(
        db, kind=KIND, submission_id=activity_id, actor=current_faculty, obj_in=obj_in
    )
    return to_public(db, activity)


@router.delete("/{activity_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_activity(
    activity_id: int,
    db: Session = Depends(get_db),
    current_faculty: User = Depends(get_current_faculty),
):
    submission_service.delete_submission(
        db, kind=KIND, submission_id=activity_id, actor=current_faculty
    )
    return None
