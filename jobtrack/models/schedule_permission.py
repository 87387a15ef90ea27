"""Schedule permission model."""

from datetime import datetime

from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Integer, UniqueConstraint

from jobtrack.db.base import Base


class SchedulePermission(Base):
    """Grants `user_id` read access to the interview schedule of `target_user_id`."""

    __tablename__ = "schedule_permissions"
    __table_args__ = (
        UniqueConstraint("user_id", "target_user_id", name="unique_schedule_permission"),
    )

    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    target_user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    granted_by = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"))
    granted_at = Column(DateTime, default=datetime.utcnow)
    is_active = Column(Boolean, default=True, nullable=False)

    def __repr__(self):
        return f"<SchedulePermission {self.user_id} -> {self.target_user_id}>"
