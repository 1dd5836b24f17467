"""Audit log model."""
from sqlalchemy import Column, String, DateTime, Integer, Boolean, Text
from session_auth.core.database import Base
from datetime import datetime


class SysLog(Base):
    __tablename__ = "sys_logs"

    id = Column(Integer, primary_key=True)
    user_id = Column(Integer, nullable=True, index=True)
    action = Column(String(50), nullable=False)
    success = Column(Boolean, default=True, nullable=False)
    remark = Column(Text, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow)
