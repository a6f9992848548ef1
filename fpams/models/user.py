# fpams/models/user.py
from sqlalchemy import Boolean, Column, Integer, String, DateTime, ForeignKey
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from fpams.db.base import Base


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    email = Column(String(255), unique=True, nullable=False, index=True)
    name = Column(String(100), nullable=False)
    role = Column(String(30), nullable=False, index=True)  # see models.enums.Role
    department_id = Column(Integer, ForeignKey("departments.id"), nullable=True, index=True)

    # soft delete: the row stays so historical submissions/audit entries keep their owner
    is_deleted = Column(Boolean, nullable=False, default=False)

    created_at = Column(DateTime(timezone=True), server_default=func.now())

    department = relationship("Department")
