# fpams/core/security.py
"""
Request identity.

Tokens are issued by the institution's login service; this module only
verifies them and resolves the acting user. ``sub`` carries the user's email.
"""
from datetime import datetime, timedelta, timezone
from typing import Callable

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError, jwt
from sqlalchemy.orm import Session

from fpams.core.config import settings
from fpams.core.exceptions import Forbidden, Unauthorized
from fpams.db.session import get_db
from fpams.models.enums import Role
from fpams.models.user import User

bearer_scheme = HTTPBearer(auto_error=False)


def create_access_token(data: dict, expires_delta: timedelta | None = None) -> str:
    to_encode = data.copy()
    expire = datetime.now(timezone.utc) + (
        expires_delta or timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    )
    to_encode.update({"exp": expire})
    return jwt.encode(to_encode, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


def get_current_user(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
    db: Session = Depends(get_db),
) -> User:
    if credentials is None:
        raise Unauthorized()

    try:
        payload = jwt.decode(
            credentials.credentials, settings.SECRET_KEY, algorithms=[settings.ALGORITHM]
        )
    except JWTError:
        raise Unauthorized("Could not validate credentials")

    email = payload.get("sub")
    if not email:
        raise Unauthorized("Could not validate credentials")

    user = db.query(User).filter(User.email == email).first()
    # soft-deleted accounts keep their row but lose access
    if user is None or user.is_deleted:
        raise Unauthorized("Could not validate credentials")
    return user


def require_roles(*roles: Role) -> Callable[..., User]:
    """Dependency factory: the current user must hold one of ``roles``."""
    allowed = {r.value for r in roles}

    def dependency(current_user: User = Depends(get_current_user)) -> User:
        if current_user.role not in allowed:
            raise Forbidden(f"Role {current_user.role} is not allowed here")
        return current_user

    return dependency


get_current_faculty = require_roles(Role.FACULTY)
get_current_student = require_roles(Role.STUDENT)
