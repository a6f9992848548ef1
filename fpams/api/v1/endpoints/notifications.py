# fpams/api/v1/endpoints/notifications.py
from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from fpams.core.security import get_current_user
from fpams.db.session import get_db
from fpams.models.user import User
from fpams.schemas.notification import NotificationMarkRead, NotificationPublic
from fpams.services import notification_service

router = APIRouter(prefix="/notifications", tags=["notifications"])


@router.get("/", response_model=List[NotificationPublic])
def list_notifications(
    limit: int = 50,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return notification_service.list_notifications(db, user=current_user, limit=limit)


@router.patch("/")
def mark_read(
    payload: NotificationMarkRead,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    updated = notification_service.mark_read(
        db, user=current_user, notification_id=payload.id, mark_all=payload.mark_all
    )
    return {"updated": updated}
