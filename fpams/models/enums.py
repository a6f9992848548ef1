# fpams/models/enums.py
from enum import Enum


class Role(str, Enum):
    SUPER_ADMIN = "SUPER_ADMIN"
    PRINCIPAL = "PRINCIPAL"
    HOD = "HOD"
    IQAC = "IQAC"
    EXAM_CELL = "EXAM_CELL"
    FACULTY = "FACULTY"
    STUDENT = "STUDENT"
    COUNSELLING_COORDINATOR = "COUNSELLING_COORDINATOR"
    RND_COORDINATOR = "RND_COORDINATOR"


class SubmissionStatus(str, Enum):
    PENDING = "PENDING"
    UNDER_REVIEW = "UNDER_REVIEW"
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"


class SubmissionKind(str, Enum):
    """URL-level discriminator: activities and teaching scores have separate id spaces."""
    ACTIVITY = "activity"
    TEACHING = "teaching"


class ValidationAction(str, Enum):
    VERIFY = "VERIFY"
    APPROVE = "APPROVE"
    REJECT = "REJECT"
    REVALIDATE = "REVALIDATE"
    OVERRIDE = "OVERRIDE"
    LOCK = "LOCK"
    UNLOCK = "UNLOCK"


class AuditAction(str, Enum):
    SCORE_VERIFY = "SCORE_VERIFY"
    SCORE_APPROVE = "SCORE_APPROVE"
    SCORE_REJECT = "SCORE_REJECT"
    SCORE_MODIFY = "SCORE_MODIFY"
    SCORE_OVERRIDE = "SCORE_OVERRIDE"
    SCORE_LOCK = "SCORE_LOCK"
    SCORE_UNLOCK = "SCORE_UNLOCK"
    SUBMISSION_RESUBMIT = "SUBMISSION_RESUBMIT"
