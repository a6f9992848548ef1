# fpams/schemas/submission.py
from pydantic import BaseModel
from datetime import datetime


class SubmissionPublic(BaseModel):
    """Lifecycle fields shared by activities and teaching scores."""
    id: int
    faculty_id: int
    academic_year: str
    proof_url: str | None = None

    status: str  # PENDING / UNDER_REVIEW / APPROVED / REJECTED
    marks: float | None = None
    is_locked: bool = False

    validated_by: int | None = None
    last_modified_by: int | None = None
    last_modified_at: datetime | None = None
    hod_comment: str | None = None
    principal_comment: str | None = None
    coordinator_comment: str | None = None
    modification_reason: str | None = None

    # derived from the audit log, not stored
    was_modified_after_approval: bool = False

    created_at: datetime | None = None
    updated_at: datetime | None = None

    model_config = {"from_attributes": True}
