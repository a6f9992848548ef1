# fpams/schemas/notification.py
from pydantic import BaseModel
from datetime import datetime


class NotificationPublic(BaseModel):
    id: int
    title: str
    message: str
    read: bool
    created_at: datetime | None = None

    model_config = {"from_attributes": True}


class NotificationMarkRead(BaseModel):
    id: int | None = None
    mark_all: bool = False
