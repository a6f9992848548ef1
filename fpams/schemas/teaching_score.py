# fpams/schemas/teaching_score.py
from pydantic import BaseModel, Field

from fpams.schemas.submission import SubmissionPublic


class TeachingScoreCreate(BaseModel):
    subject_id: int
    academic_year: str = Field(min_length=1, max_length=20)
    score: float = Field(ge=0, le=100)  # pass percentage
    proof_url: str | None = None


class TeachingScoreUpdate(BaseModel):
    subject_id: int | None = None
    academic_year: str | None = Field(default=None, min_length=1, max_length=20)
    score: float | None = Field(default=None, ge=0, le=100)
    proof_url: str | None = None


class TeachingScorePublic(SubmissionPublic):
    subject_id: int
    score: float
