# fpams/services/feedback_service.py
from sqlalchemy.orm import Session

from fpams.core.exceptions import Forbidden, NotFound
from fpams.models.enums import Role
from fpams.models.feedback import Feedback
from fpams.models.user import User
from fpams.schemas.feedback import FeedbackCreate


def create_feedback(
    db: Session,
    *,
    student: User,
    obj_in: FeedbackCreate,
) -> Feedback:
    """
    student rates a faculty member (1..5)
    """
    if student.role != Role.STUDENT.value:
        raise Forbidden("Only students can give feedback")

    faculty = db.get(User, obj_in.faculty_id)
    if faculty is None or faculty.is_deleted or faculty.role != Role.FACULTY.value:
        raise NotFound(f"faculty {obj_in.faculty_id} not found")

    feedback = Feedback(
        student_id=student.id,
        faculty_id=obj_in.faculty_id,
        subject_id=obj_in.subject_id,
        rating=obj_in.rating,
        comment=obj_in.comment,
        is_anonymous=obj_in.is_anonymous,
    )
    db.add(feedback)
    db.commit()
    db.refresh(feedback)
    return feedback
