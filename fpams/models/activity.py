# fpams/models/activity.py
from sqlalchemy import Column, String, Text, JSON

from fpams.db.base import Base
from fpams.models.enums import SubmissionKind
from fpams.models.submission import SubmissionMixin


class Activity(SubmissionMixin, Base):
    __tablename__ = "activities"

    kind = SubmissionKind.ACTIVITY

    category = Column(String(50), nullable=False, index=True)  # marks_formula.Category
    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)

    # formula inputs, e.g. {"count": 2} or {"seminars": 1, "fdp": 2}
    details = Column(JSON, nullable=False, default=dict)
