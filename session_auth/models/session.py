"""Server-side session records referenced by issued JWTs."""
from datetime import datetime
from sqlalchemy import Column, String, DateTime, Text
from session_auth.core.database import Base


class TokenModel(Base):
    __tablename__ = "sys_token"

    # Session id; the only claim carried by the JWT handed to the client
    id = Column(String(64), primary_key=True)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    expires_at = Column(DateTime, nullable=False, index=True)
    # JSON snapshot of the LoginUser, replaced on every refresh
    val = Column(Text, nullable=False)
