# fpams/schemas/feedback.py
from pydantic import BaseModel, Field
from datetime import datetime


class FeedbackCreate(BaseModel):
    faculty_id: int
    subject_id: int | None = None
    rating: int = Field(ge=1, le=5)
    comment: str | None = None
    is_anonymous: bool = False


class FeedbackPublic(FeedbackCreate):
    id: int
    student_id: int
    created_at: datetime | None = None

    model_config = {"from_attributes": True}
