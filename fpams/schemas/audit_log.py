# fpams/schemas/audit_log.py
from pydantic import BaseModel
from datetime import datetime


class AuditLogPublic(BaseModel):
    id: int
    action_type: str
    actor_id: int
    actor_role: str
    target_type: str
    target_id: int
    old_value: dict | None = None
    new_value: dict | None = None
    reason: str | None = None
    created_at: datetime | None = None

    # joined from the user directory at read time
    actor_name: str = "Unknown"

    model_config = {"from_attributes": True}
