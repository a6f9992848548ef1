# fpams/services/audit_service.py
from __future__ import annotations

import logging
from typing import Any, List, Optional

from sqlalchemy.orm import Session

from fpams.core.config import settings
from fpams.models.audit_log import AuditLog
from fpams.models.enums import AuditAction, SubmissionKind
from fpams.models.user import User
from fpams.schemas.audit_log import AuditLogPublic

logger = logging.getLogger(__name__)

# entries that mean "marks/status were changed after a validator had decided"
_MODIFYING_ACTIONS = (AuditAction.SCORE_MODIFY.value, AuditAction.SCORE_OVERRIDE.value)


def record(
    db: Session,
    *,
    action: AuditAction,
    actor: User,
    kind: SubmissionKind,
    target_id: int,
    old_value: Optional[dict[str, Any]] = None,
    new_value: Optional[dict[str, Any]] = None,
    reason: Optional[str] = None,
) -> AuditLog:
    """
    Append one audit entry.

    Only adds to the session; the caller commits it together with the
    submission change so both land in the same transaction.
    """
    logger.debug(f"Audit {action.value} on {kind.value} {target_id} by user {actor.id}")
    entry = AuditLog(
        action_type=action.value,
        actor_id=actor.id,
        actor_role=actor.role,
        target_type=kind.value,
        target_id=target_id,
        old_value=old_value,
        new_value=new_value,
        reason=reason,
    )
    db.add(entry)
    return entry


def list_audit_logs(
    db: Session,
    *,
    action_type: Optional[str] = None,
    target_id: Optional[int] = None,
    target_type: Optional[str] = None,
    limit: Optional[int] = None,
) -> List[AuditLogPublic]:
    """
    Newest first, enriched with the actor's display name and current role.
    """
    query = db.query(AuditLog)
    if action_type:
        query = query.filter(AuditLog.action_type == action_type)
    if target_id is not None:
        query = query.filter(AuditLog.target_id == target_id)
    if target_type:
        query = query.filter(AuditLog.target_type == target_type)

    logs = (
        query.order_by(AuditLog.created_at.desc(), AuditLog.id.desc())
        .limit(limit or settings.AUDIT_LOG_DEFAULT_LIMIT)
        .all()
    )

    actor_ids = {log.actor_id for log in logs}
    users = db.query(User).filter(User.id.in_(actor_ids)).all() if actor_ids else []
    user_map = {u.id: u for u in users}

    enriched = []
    for log in logs:
        entry = AuditLogPublic.model_validate(log)
        actor = user_map.get(log.actor_id)
        if actor is not None:
            entry.actor_name = actor.name
            entry.actor_role = actor.role
        enriched.append(entry)
    return enriched


def was_modified_after_approval(
    db: Session,
    *,
    kind: SubmissionKind,
    target_id: int,
) -> bool:
    return (
        db.query(AuditLog.id)
        .filter(
            AuditLog.target_type == kind.value,
            AuditLog.target_id == target_id,
            AuditLog.action_type.in_(_MODIFYING_ACTIONS),
        )
        .first()
        is not None
    )


def modified_target_ids(db: Session, *, kind: SubmissionKind, target_ids: List[int]) -> set[int]:
    """Batch form of ``was_modified_after_approval`` for list endpoints."""
    if not target_ids:
        return set()
    rows = (
        db.query(AuditLog.target_id)
        .filter(
            AuditLog.target_type == kind.value,
            AuditLog.target_id.in_(target_ids),
            AuditLog.action_type.in_(_MODIFYING_ACTIONS),
        )
        .distinct()
        .all()
    )
    return {row[0] for row in rows}
