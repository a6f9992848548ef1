"""
Audit log for submission transitions.

Every status / marks / lock change writes exactly one row. The table is
append-only: nothing in the code base updates or deletes entries.
"""
from sqlalchemy import Column, Integer, String, Text, DateTime, JSON, ForeignKey, Index
from sqlalchemy.sql import func

from fpams.db.base import Base


class AuditLog(Base):
    __tablename__ = "audit_logs"

    id = Column(Integer, primary_key=True, index=True)

    action_type = Column(String(40), nullable=False, index=True)  # models.enums.AuditAction

    actor_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    actor_role = Column(String(30), nullable=False)  # role at the time of the action

    target_type = Column(String(20), nullable=False)  # activity / teaching
    target_id = Column(Integer, nullable=False)

    old_value = Column(JSON, nullable=True)
    new_value = Column(JSON, nullable=True)
    reason = Column(Text, nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), index=True)

    __table_args__ = (
        Index("idx_audit_target", "target_type", "target_id"),
        Index("idx_audit_actor", "actor_id", "created_at"),
    )
