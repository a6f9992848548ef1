# fpams/api/v1/endpoints/users.py
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from fpams.core.exceptions import NotFound
from fpams.core.security import get_current_user, require_roles
from fpams.db.session import get_db
from fpams.models.enums import Role
from fpams.models.user import User
from fpams.schemas.user import UserPublic
from fpams.services import submission_service

router = APIRouter(prefix="/users", tags=["users"])


@router.get("/me", response_model=UserPublic)
def read_me(current_user: User = Depends(get_current_user)):
    return current_user


@router.delete("/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_user(
    user_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_roles(Role.SUPER_ADMIN)),
):
    """
    Soft delete: the account loses access and its submissions drop out of
    every review queue and report.
    """
    user = db.get(User, user_id)
    if user is None or user.is_deleted:
        raise NotFound(f"user {user_id} not found")
    submission_service.soft_delete_user(db, user=user)
    return None
