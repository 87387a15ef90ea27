"""Activity log models."""

from sqlalchemy import Column, ForeignKey, Index, Integer, String, Text

from jobtrack.db.base import Base, JSONType


class ActivityLog(Base):
    """User action (login, applied, scheduled, workshop actions...)."""

    __tablename__ = "activity_logs"
    __table_args__ = (Index("ix_activity_logs_created_at", "created_at"),)

    user_id = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), index=True)
    action = Column(String(100), nullable=False, index=True)
    entity_type = Column(String(50))
    entity_id = Column(Integer)
    entity_name = Column(String(255))
    details = Column(JSONType)
    ip_address = Column(String(45))
    user_agent = Column(Text)

    def __repr__(self):
        return f"<ActivityLog {self.user_id} {self.action}>"


class CallerActivityLog(Base):
    """Call-related action performed by a caller."""

    __tablename__ = "caller_activity_logs"

    caller_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    activity_type = Column(String(50), nullable=False, index=True)
    call_schedule_id = Column(Integer, ForeignKey("call_schedules.id", ondelete="SET NULL"))
    contact_name = Column(String(100))
    company = Column(String(100))
    call_duration = Column(Integer)
    details = Column(JSONType)
    ip_address = Column(String(45))
    user_agent = Column(Text)

    def __repr__(self):
        return f"<CallerActivityLog {self.caller_id} {self.activity_type}>"
