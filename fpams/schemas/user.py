# fpams/schemas/user.py
from pydantic import BaseModel, EmailStr
from datetime import datetime


class UserPublic(BaseModel):
    id: int
    email: EmailStr
    name: str
    role: str
    department_id: int | None = None
    created_at: datetime | None = None

    model_config = {"from_attributes": True}
