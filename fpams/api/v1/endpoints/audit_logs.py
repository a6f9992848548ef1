# fpams/api/v1/endpoints/audit_logs.py
from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from fpams.core.security import require_roles
from fpams.db.session import get_db
from fpams.models.enums import AuditAction, Role, SubmissionKind
from fpams.models.user import User
from fpams.schemas.audit_log import AuditLogPublic
from fpams.services import audit_service

router = APIRouter(prefix="/audit-logs", tags=["audit-logs"])


@router.get("/", response_model=List[AuditLogPublic])
def list_audit_logs(
    action_type: Optional[AuditAction] = None,
    target_type: Optional[SubmissionKind] = None,
    target_id: Optional[int] = None,
    limit: Optional[int] = Query(default=None, ge=1, le=1000),
    db: Session = Depends(get_db),
    current_user: User = Depends(require_roles(Role.SUPER_ADMIN, Role.PRINCIPAL)),
):
    return audit_service.list_audit_logs(
        db,
        action_type=action_type.value if action_type else None,
        target_type=target_type.value if target_type else None,
        target_id=target_id,
        limit=limit,
    )
