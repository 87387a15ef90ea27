"""Login session model."""

from datetime import datetime

from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Integer, String, Text

from jobtrack.db.base import Base


class UserSession(Base):
    """Refresh-token session created at login; tokens are stored as sha256 hashes."""

    __tablename__ = "sessions"

    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    token_hash = Column(String(64), nullable=False, index=True)
    refresh_token_hash = Column(String(64), index=True)
    expires_at = Column(DateTime, nullable=False)
    last_used = Column(DateTime, default=datetime.utcnow)
    ip_address = Column(String(45))
    user_agent = Column(Text)
    is_active = Column(Boolean, default=True, nullable=False)

    def __repr__(self):
        return f"<UserSession {self.user_id} active={self.is_active}>"
