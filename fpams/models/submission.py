# fpams/models/submission.py
from sqlalchemy import (
    Boolean,
    Column,
    Integer,
    String,
    Text,
    DateTime,
    Numeric,
    ForeignKey,
)
from sqlalchemy.orm import declared_attr, relationship
from sqlalchemy.sql import func

from fpams.models.enums import SubmissionStatus


class SubmissionMixin:
    """
    Lifecycle columns shared by Activity and TeachingScore.

    status: PENDING / UNDER_REVIEW / APPROVED / REJECTED
    marks is only non-null while status == APPROVED.
    is_locked is toggled by the Principal only.
    """

    id = Column(Integer, primary_key=True, index=True)

    @declared_attr
    def faculty_id(cls):
        return Column(Integer, ForeignKey("users.id"), nullable=False, index=True)

    academic_year = Column(String(20), nullable=False, index=True)
    proof_url = Column(String(500), nullable=True)

    status = Column(
        String(20), nullable=False, default=SubmissionStatus.PENDING.value, index=True
    )
    marks = Column(Numeric(6, 2, asdecimal=False), nullable=True)
    is_locked = Column(Boolean, nullable=False, default=False)

    # validators
    @declared_attr
    def validated_by(cls):
        return Column(Integer, ForeignKey("users.id"), nullable=True)

    @declared_attr
    def last_modified_by(cls):
        return Column(Integer, ForeignKey("users.id"), nullable=True)

    last_modified_at = Column(DateTime(timezone=True), nullable=True)

    hod_comment = Column(Text, nullable=True)
    principal_comment = Column(Text, nullable=True)
    coordinator_comment = Column(Text, nullable=True)
    modification_reason = Column(Text, nullable=True)

    # owner soft delete
    is_deleted = Column(Boolean, nullable=False, default=False)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
    )

    @declared_attr
    def faculty(cls):
        return relationship("User", foreign_keys=f"{cls.__name__}.faculty_id")

    def snapshot(self) -> dict:
        """Fields an audit entry compares before/after a transition."""
        return {
            "status": self.status,
            "marks": self.marks,
            "is_locked": bool(self.is_locked),
        }
