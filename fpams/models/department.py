# fpams/models/department.py
from sqlalchemy import Column, Integer, String, DateTime
from sqlalchemy.sql import func
from fpams.db.base import Base


class Department(Base):
    __tablename__ = "departments"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(150), unique=True, nullable=False)
    code = Column(String(20), unique=True, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
