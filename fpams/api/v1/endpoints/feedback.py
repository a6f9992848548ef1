# fpams/api/v1/endpoints/feedback.py
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from fpams.core.security import get_current_student
from fpams.db.session import get_db
from fpams.models.user import User
from fpams.schemas.feedback import FeedbackCreate, FeedbackPublic
from fpams.services import feedback_service

router = APIRouter(prefix="/feedback", tags=["feedback"])


@router.post("/", response_model=FeedbackPublic, status_code=status.HTTP_201_CREATED)
def give_feedback(
    obj_in: FeedbackCreate,
    db: Session = Depends(get_db),
    current_student: User = Depends(get_current_student),
):
    return feedback_service.create_feedback(db, student=current_student, obj_in=obj_in)
