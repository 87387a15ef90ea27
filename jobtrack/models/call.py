"""Caller workspace models: scheduled calls, notifications and daily performance."""

from sqlalchemy import (
    Column,
    Date,
    DateTime,
    ForeignKey,
    Integer,
    Numeric,
    String,
    Text,
    UniqueConstraint,
)

from jobtrack.db.base import Base, JSONType


class CallSchedule(Base):
    """An outbound call assigned to a caller."""

    __tablename__ = "call_schedules"

    contact_name = Column(String(100), nullable=False)
    contact_email = Column(String(100))
    contact_phone = Column(String(30))
    company = Column(String(100))
    call_type = Column(String(30), default="follow_up")
    scheduled_time = Column(DateTime, nullable=False, index=True)
    duration = Column(Integer, default=30)  # minutes
    status = Column(String(20), default="scheduled", index=True)  # scheduled, in_progress, completed, failed, cancelled
    priority = Column(String(10), default="medium")
    notes = Column(Text)
    preparation_notes = Column(Text)
    outcome_notes = Column(Text)
    failed_reason = Column(Text)
    actual_duration = Column(Integer)
    assigned_caller_id = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), index=True)
    created_by = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"))
    reminder_minutes = Column(JSONType, default=lambda: [15, 5])
    completed_at = Column(DateTime)

    def __repr__(self):
        return f"<CallSchedule {self.contact_name} {self.scheduled_time}>"


class CallNotification(Base):
    """Notification shown to a caller; dispatched by the scheduler when due."""

    __tablename__ = "call_notifications"

    caller_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    call_schedule_id = Column(Integer, ForeignKey("call_schedules.id", ondelete="CASCADE"), index=True)
    notification_type = Column(String(30), default="reminder")  # reminder, assignment, status_change
    title = Column(String(200), nullable=False)
    message = Column(Text, nullable=False)
    scheduled_for = Column(DateTime, nullable=False, index=True)
    sent_at = Column(DateTime)
    read_at = Column(DateTime)
    status = Column(String(20), default="pending", index=True)  # pending, sent, read
    priority = Column(String(10), default="medium")
    delivery_method = Column(String(20), default="in_app")

    def __repr__(self):
        return f"<CallNotification {self.title} ({self.status})>"


class CallerPerformance(Base):
    """One row per caller per day."""

    __tablename__ = "caller_performance"
    __table_args__ = (
        UniqueConstraint("caller_id", "date", name="unique_caller_performance_day"),
    )

    caller_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    date = Column(Date, nullable=False, index=True)
    calls_scheduled = Column(Integer, default=0, nullable=False)
    calls_completed = Column(Integer, default=0, nullable=False)
    calls_failed = Column(Integer, default=0, nullable=False)
    total_call_duration = Column(Integer, default=0, nullable=False)
    average_call_duration = Column(Numeric(8, 2, asdecimal=False), default=0)
    success_rate = Column(Numeric(5, 2, asdecimal=False), default=0)
    performance_score = Column(Numeric(5, 2, asdecimal=False), default=0)

    def __repr__(self):
        return f"<CallerPerformance {self.caller_id} {self.date}>"
