"""
Validation state machine.

Single entry point ``ValidationService.transition`` for every validator move
on an activity or teaching score:

    PENDING --VERIFY (exam cell, teaching)--> UNDER_REVIEW
    PENDING / UNDER_REVIEW --APPROVE--> APPROVED (marks assigned)
    PENDING / UNDER_REVIEW --REJECT--> REJECTED (marks cleared)
    APPROVED / REJECTED --REVALIDATE (HOD, reason required)--> APPROVED / REJECTED
    any --OVERRIDE (principal, ignores lock)--> marks / comment changed
    LOCK / UNLOCK (principal) toggle is_locked independently of status

Checks run in a fixed order: NotFound, Forbidden, Locked, InvalidState,
ValidationError. Each successful transition commits the record change and
exactly one audit entry together.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Callable, Dict, FrozenSet, List, Optional, Tuple

from sqlalchemy.orm import Session

from fpams.core.config import Settings, settings
from fpams.core.exceptions import (
    Forbidden,
    InvalidState,
    Locked,
    NotFound,
    ValidationError,
    WorkflowError,
)
from fpams.models.enums import (
    AuditAction,
    Role,
    SubmissionKind,
    SubmissionStatus,
    ValidationAction,
)
from fpams.models.user import User
from fpams.schemas.validation import TransitionRequest
from fpams.services import audit_service, marks_formula, submission_service
from fpams.services.marks_formula import Category
from fpams.services.submission_service import Submission

logger = logging.getLogger(__name__)

PENDING = SubmissionStatus.PENDING.value
UNDER_REVIEW = SubmissionStatus.UNDER_REVIEW.value
APPROVED = SubmissionStatus.APPROVED.value
REJECTED = SubmissionStatus.REJECTED.value

OPEN_STATUSES = (PENDING, UNDER_REVIEW)
DECIDED_STATUSES = (APPROVED, REJECTED)

COORDINATOR_ROLES = (Role.COUNSELLING_COORDINATOR.value, Role.RND_COORDINATOR.value)


@dataclass(frozen=True)
class ValidatorPolicy:
    """
    Who may do what. Built from settings in production, constructed directly
    in tests.
    """
    actions_by_role: Dict[str, FrozenSet[ValidationAction]]
    coordinator_categories: Dict[str, FrozenSet[str]] = field(default_factory=dict)
    coordinators_department_scoped: bool = False
    # roles that may read every queue without acting on it
    read_only_roles: FrozenSet[str] = frozenset({Role.IQAC.value, Role.SUPER_ADMIN.value})

    @classmethod
    def from_settings(cls, config: Settings) -> "ValidatorPolicy":
        decide = frozenset({ValidationAction.APPROVE, ValidationAction.REJECT})
        return cls(
            actions_by_role={
                Role.EXAM_CELL.value: frozenset({ValidationAction.VERIFY}),
                Role.HOD.value: decide | {ValidationAction.REVALIDATE},
                Role.COUNSELLING_COORDINATOR.value: decide,
                Role.RND_COORDINATOR.value: decide,
                Role.PRINCIPAL.value: decide
                | {
                    ValidationAction.OVERRIDE,
                    ValidationAction.LOCK,
                    ValidationAction.UNLOCK,
                },
            },
            coordinator_categories={
                Role.COUNSELLING_COORDINATOR.value: frozenset(config.COUNSELLING_CATEGORIES),
                Role.RND_COORDINATOR.value: frozenset(config.RESEARCH_CATEGORIES),
            },
            coordinators_department_scoped=config.COORDINATORS_DEPARTMENT_SCOPED,
        )

    def allowed_actions(self, role: str) -> FrozenSet[ValidationAction]:
        return self.actions_by_role.get(role, frozenset())


class ValidationService:
    def __init__(self, policy: ValidatorPolicy):
        self.policy = policy
        self._handlers: Dict[ValidationAction, Callable[..., Tuple[AuditAction, Optional[str]]]] = {
            ValidationAction.VERIFY: self._verify,
            ValidationAction.APPROVE: self._approve,
            ValidationAction.REJECT: self._reject,
            ValidationAction.REVALIDATE: self._revalidate,
            ValidationAction.OVERRIDE: self._override,
            ValidationAction.LOCK: self._lock,
            ValidationAction.UNLOCK: self._unlock,
        }

    # ------------------------------------------------------------------
    # scope
    # ------------------------------------------------------------------
    def _department_ok(self, actor: User, submission: Submission) -> bool:
        faculty = submission.faculty
        return actor.department_id is not None and faculty.department_id == actor.department_id

    def in_scope(self, actor: User, kind: SubmissionKind, submission: Submission) -> bool:
        """Whether the submission is inside the actor's review scope."""
        role = actor.role
        if role == Role.PRINCIPAL.value or role in self.policy.read_only_roles:
            return True
        if role == Role.EXAM_CELL.value:
            return kind == SubmissionKind.TEACHING
        if role == Role.HOD.value:
            return self._department_ok(actor, submission)
        if role in COORDINATOR_ROLES:
            if kind != SubmissionKind.ACTIVITY:
                return False
            if submission.category not in self.policy.coordinator_categories.get(role, frozenset()):
                return False
            if self.policy.coordinators_department_scoped:
                return self._department_ok(actor, submission)
            return True
        return False

    def ensure_can_view(self, actor: User, kind: SubmissionKind, submission: Submission) -> None:
        if submission.faculty_id == actor.id:
            return
        if not self.in_scope(actor, kind, submission):
            raise Forbidden("Not allowed to view this submission")

    def _authorize(
        self,
        actor: User,
        action: ValidationAction,
        kind: SubmissionKind,
        submission: Submission,
    ) -> None:
        if action not in self.policy.allowed_actions(actor.role):
            raise Forbidden(f"Role {actor.role} cannot {action.value}")
        if not self.in_scope(actor, kind, submission):
            raise Forbidden(f"{kind.value} {submission.id} is outside your review scope")

    # ------------------------------------------------------------------
    # entry point
    # ------------------------------------------------------------------
    def transition(
        self,
        db: Session,
        *,
        kind: SubmissionKind,
        submission_id: int,
        actor: User,
        action: ValidationAction,
        payload: Optional[TransitionRequest] = None,
    ) -> Submission:
        payload = payload or TransitionRequest(action=action)
        try:
            submission = submission_service.get_submission(
                db, kind, submission_id, for_update=True
            )
            if submission.faculty is None or submission.faculty.is_deleted:
                raise NotFound(f"{kind.value} {submission_id} not found")

            self._authorize(actor, action, kind, submission)

            bypasses_lock = actor.role == Role.PRINCIPAL.value and action in (
                ValidationAction.UNLOCK,
                ValidationAction.OVERRIDE,
            )
            if submission.is_locked and not bypasses_lock:
                raise Locked()

            old_value = submission.snapshot()
            audit_action, reason = self._handlers[action](actor, kind, submission, payload)
            new_value = submission.snapshot()

            now = datetime.now(timezone.utc)
            submission.last_modified_by = actor.id
            submission.last_modified_at = now
            if old_value["status"] != new_value["status"] or old_value["marks"] != new_value["marks"]:
                submission.validated_by = actor.id

            audit_service.record(
                db,
                action=audit_action,
                actor=actor,
                kind=kind,
                target_id=submission.id,
                old_value=old_value,
                new_value=new_value,
                reason=reason,
            )
            db.add(submission)
            db.commit()
        except WorkflowError as e:
            db.rollback()
            logger.warning(
                f"{action.value} on {kind.value} {submission_id} by user {actor.id} "
                f"({actor.role}) refused: {e.code} {e.message}"
            )
            raise

        db.refresh(submission)
        logger.info(
            f"{action.value} on {kind.value} {submission.id} by user {actor.id} ({actor.role}): "
            f"{old_value['status']} -> {submission.status}, marks {old_value['marks']} -> {submission.marks}"
        )
        return submission

    # ------------------------------------------------------------------
    # helpers
    # ------------------------------------------------------------------
    @staticmethod
    def _category(kind: SubmissionKind, submission: Submission) -> str:
        if kind == SubmissionKind.TEACHING:
            return Category.TEACHING_SCORE.value
        return submission.category

    def _checked_marks(self, kind: SubmissionKind, submission: Submission, marks: float) -> float:
        category = self._category(kind, submission)
        ceiling = marks_formula.max_marks(category)
        if ceiling is not None and marks > ceiling:
            raise ValidationError(f"Marks {marks} exceed the maximum {ceiling} for {category}")
        return marks

    def _formula_marks(self, kind: SubmissionKind, submission: Submission) -> float:
        if kind == SubmissionKind.TEACHING:
            return marks_formula.compute_marks(Category.TEACHING_SCORE, {"score": submission.score})
        marks = marks_formula.compute_marks(submission.category, submission.details or {})
        if marks < 0:
            raise ValidationError(f"Formula inputs for {submission.category} give negative marks {marks}")
        if submission.category == Category.RESEARCH.value:
            # research marks are faculty-supplied, not derived
            return self._checked_marks(kind, submission, marks)
        return marks

    @staticmethod
    def _set_comment(actor: User, submission: Submission, comment: Optional[str]) -> None:
        if comment is None:
            return
        if actor.role == Role.HOD.value:
            submission.hod_comment = comment
        elif actor.role == Role.PRINCIPAL.value:
            submission.principal_comment = comment
        elif actor.role in COORDINATOR_ROLES:
            submission.coordinator_comment = comment

    # ------------------------------------------------------------------
    # actions; each returns (audit action, audit reason)
    # ------------------------------------------------------------------
    def _verify(self, actor, kind, submission, payload):
        if kind != SubmissionKind.TEACHING:
            raise Forbidden("Only teaching scores are verified by the exam cell")
        if submission.status != PENDING:
            raise InvalidState(f"Cannot verify a submission in status {submission.status}")
        if payload.score is not None:
            submission.score = payload.score
        submission.status = UNDER_REVIEW
        return AuditAction.SCORE_VERIFY, None

    def _require_open(self, actor: User, submission: Submission, action: ValidationAction) -> None:
        # the principal may decide from any status
        if actor.role == Role.PRINCIPAL.value:
            return
        if submission.status not in OPEN_STATUSES:
            raise InvalidState(
                f"Cannot {action.value} a submission in status {submission.status}"
            )

    def _approve(self, actor, kind, submission, payload):
        self._require_open(actor, submission, ValidationAction.APPROVE)
        if kind == SubmissionKind.TEACHING:
            if payload.marks is not None:
                raise ValidationError(
                    "Teaching marks are computed from the pass percentage"
                )
            marks = self._formula_marks(kind, submission)
        elif payload.marks is not None:
            marks = self._checked_marks(kind, submission, payload.marks)
        else:
            marks = self._formula_marks(kind, submission)

        submission.status = APPROVED
        submission.marks = marks
        self._set_comment(actor, submission, payload.comment)
        return AuditAction.SCORE_APPROVE, payload.comment

    def _reject(self, actor, kind, submission, payload):
        self._require_open(actor, submission, ValidationAction.REJECT)
        submission.status = REJECTED
        submission.marks = None
        self._set_comment(actor, submission, payload.comment)
        return AuditAction.SCORE_REJECT, payload.comment

    def _revalidate(self, actor, kind, submission, payload):
        if submission.status not in DECIDED_STATUSES:
            raise InvalidState(
                f"Only approved or rejected submissions can be revalidated (status {submission.status})"
            )
        reason = (payload.reason or "").strip()
        if not reason:
            raise ValidationError("Reason for modification is required")

        new_status = payload.status.value if payload.status is not None else submission.status
        if new_status not in DECIDED_STATUSES:
            raise ValidationError("Revalidation must end in APPROVED or REJECTED")

        if new_status == APPROVED:
            if payload.marks is not None:
                marks = self._checked_marks(kind, submission, payload.marks)
            elif submission.marks is not None:
                marks = submission.marks
            else:
                marks = self._formula_marks(kind, submission)
        else:
            if payload.marks is not None:
                raise ValidationError("A rejected submission cannot carry marks")
            marks = None

        submission.status = new_status
        submission.marks = marks
        self._set_comment(actor, submission, payload.comment)
        submission.modification_reason = reason
        return AuditAction.SCORE_MODIFY, reason

    def _override(self, actor, kind, submission, payload):
        if payload.marks is None and payload.comment is None:
            raise ValidationError("Override needs marks or a comment")
        reason = (payload.reason or "").strip() or "Overridden by Principal"
        if payload.marks is not None:
            submission.marks = self._checked_marks(kind, submission, payload.marks)
            # marks imply APPROVED
            submission.status = APPROVED
        self._set_comment(actor, submission, payload.comment)
        submission.modification_reason = reason
        return AuditAction.SCORE_OVERRIDE, reason

    def _lock(self, actor, kind, submission, payload):
        submission.is_locked = True
        return AuditAction.SCORE_LOCK, payload.reason

    def _unlock(self, actor, kind, submission, payload):
        if not submission.is_locked:
            raise InvalidState("Submission is not locked")
        submission.is_locked = False
        return AuditAction.SCORE_UNLOCK, payload.reason

    # ------------------------------------------------------------------
    # review queues
    # ------------------------------------------------------------------
    def list_queue(
        self,
        db: Session,
        *,
        kind: SubmissionKind,
        actor: User,
        faculty_id: Optional[int] = None,
        category: Optional[str] = None,
        status: Optional[str] = None,
        academic_year: Optional[str] = None,
        skip: int = 0,
        limit: int = 100,
    ) -> List[Submission]:
        """
        Submissions the actor may review, narrowed to their department or
        category allowlist.
        """
        role = actor.role
        department_id = None
        categories = None

        if role == Role.HOD.value:
            if actor.department_id is None:
                raise Forbidden("HOD has no department assigned")
            department_id = actor.department_id
        elif role in COORDINATOR_ROLES:
            if kind != SubmissionKind.ACTIVITY:
                raise Forbidden("Coordinators only review activities")
            categories = self.policy.coordinator_categories.get(role, frozenset())
            if self.policy.coordinators_department_scoped:
                if actor.department_id is None:
                    raise Forbidden("Coordinator has no department assigned")
                department_id = actor.department_id
        elif role == Role.EXAM_CELL.value:
            if kind != SubmissionKind.TEACHING:
                raise Forbidden("Exam cell only reviews teaching scores")
        elif role != Role.PRINCIPAL.value and role not in self.policy.read_only_roles:
            raise Forbidden(f"Role {role} has no review queue")

        return submission_service.list_submissions(
            db,
            kind=kind,
            faculty_id=faculty_id,
            department_id=department_id,
            category=category,
            categories=categories,
            status=status,
            academic_year=academic_year,
            skip=skip,
            limit=limit,
        )


validation_service = ValidationService(ValidatorPolicy.from_settings(settings))


def get_validation_service() -> ValidationService:
    return validation_service
