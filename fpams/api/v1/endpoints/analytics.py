# fpams/api/v1/endpoints/analytics.py
from typing import List, Optional

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from fpams.core.exceptions import Forbidden
from fpams.core.security import get_current_user, require_roles
from fpams.db.session import get_db
from fpams.models.enums import Role
from fpams.models.user import User
from fpams.schemas.analytics import AggregateResult, DepartmentAnalytics, IqacReport
from fpams.services import analytics_service

router = APIRouter(prefix="/analytics", tags=["analytics"])


@router.get("/aggregate", response_model=AggregateResult)
def aggregate(
    department_id: Optional[int] = None,
    faculty_id: Optional[int] = None,
    academic_year: Optional[str] = None,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """
    Approved marks and average feedback for a scope.

    HODs are pinned to their own department and faculty to themselves.
    """
    role = current_user.role
    if role == Role.HOD.value:
        if current_user.department_id is None:
            raise Forbidden("HOD has no department assigned")
        department_id = current_user.department_id
    elif role == Role.FACULTY.value:
        department_id = None
        faculty_id = current_user.id
    elif role not in (Role.PRINCIPAL.value, Role.IQAC.value, Role.SUPER_ADMIN.value):
        raise Forbidden(f"Role {role} cannot view analytics")

    return analytics_service.aggregate(
        db,
        department_id=department_id,
        faculty_id=faculty_id,
        academic_year=academic_year,
    )


@router.get("/departments", response_model=List[DepartmentAnalytics])
def department_analytics(
    db: Session = Depends(get_db),
    current_user: User = Depends(require_roles(Role.PRINCIPAL)),
):
    return analytics_service.department_analytics(db)


@router.get("/iqac-report", response_model=IqacReport)
def iqac_report(
    db: Session = Depends(get_db),
    current_user: User = Depends(require_roles(Role.IQAC, Role.PRINCIPAL)),
):
    return analytics_service.iqac_report(db)
