# fpams/schemas/validation.py
from pydantic import BaseModel, Field

from fpams.models.enums import SubmissionStatus, ValidationAction


class TransitionRequest(BaseModel):
    """
    Body of POST /validations/{kind}/{id}.

    Which fields matter depends on the action:
      - VERIFY: score (optional corrected pass percentage)
      - APPROVE / REJECT: marks (activities only), comment
      - REVALIDATE: reason (required), status, marks, comment
      - OVERRIDE: marks, comment, reason
      - LOCK / UNLOCK: nothing
    """
    action: ValidationAction
    marks: float | None = Field(default=None, ge=0)
    status: SubmissionStatus | None = None
    comment: str | None = None
    reason: str | None = None
    score: float | None = Field(default=None, ge=0, le=100)
