# fpams/models/teaching_score.py
from sqlalchemy import Column, Integer, Numeric, ForeignKey
from sqlalchemy.orm import relationship

from fpams.db.base import Base
from fpams.models.enums import SubmissionKind
from fpams.models.submission import SubmissionMixin


class TeachingScore(SubmissionMixin, Base):
    __tablename__ = "teaching_scores"

    kind = SubmissionKind.TEACHING

    subject_id = Column(Integer, ForeignKey("subjects.id"), nullable=False, index=True)

    # pass percentage, 0..100; exam cell may correct it while verifying
    score = Column(Numeric(5, 2, asdecimal=False), nullable=False)

    subject = relationship("Subject")

    def snapshot(self) -> dict:
        data = super().snapshot()
        data["score"] = self.score
        return data
