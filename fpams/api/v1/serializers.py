# fpams/api/v1/serializers.py
from typing import List

from sqlalchemy.orm import Session

from fpams.models.enums import SubmissionKind
from fpams.schemas.activity import ActivityPublic
from fpams.schemas.submission import SubmissionPublic
from fpams.schemas.teaching_score import TeachingScorePublic
from fpams.services import audit_service


def _schema_for(kind: SubmissionKind):
    return ActivityPublic if kind == SubmissionKind.ACTIVITY else TeachingScorePublic


def to_public(db: Session, submission) -> SubmissionPublic:
    kind = submission.kind
    public = _schema_for(kind).model_validate(submission)
    public.was_modified_after_approval = audit_service.was_modified_after_approval(
        db, kind=kind, target_id=submission.id
    )
    return public


def to_public_list(db: Session, kind: SubmissionKind, submissions) -> List[SubmissionPublic]:
    modified = audit_service.modified_target_ids(
        db, kind=kind, target_ids=[s.id for s in submissions]
    )
    schema = _schema_for(kind)
    result = []
    for s in submissions:
        public = schema.model_validate(s)
        public.was_modified_after_approval = s.id in modified
        result.append(public)
    return result
