"""User model."""

from sqlalchemy import Boolean, CheckConstraint, Column, DateTime, Integer, String
from sqlalchemy.orm import relationship

from jobtrack.db.base import Base


class User(Base):
    """User account. Profile fields live on the same row."""

    __tablename__ = "users"
    __table_args__ = (
        CheckConstraint("role IN (0, 1, 2)", name="ck_users_role"),
    )

    username = Column(String(50), unique=True, index=True, nullable=False)
    email = Column(String(100), unique=True, index=True, nullable=False)
    password_hash = Column(String(255), nullable=False)
    full_name = Column(String(100))
    role = Column(Integer, nullable=False, default=1, index=True)  # 0 admin, 1 user, 2 caller
    is_active = Column(Boolean, default=True, nullable=False)
    last_login = Column(DateTime)

    # Profile
    profile_picture = Column(String(255))
    phone = Column(String(20))
    department = Column(String(50))
    position = Column(String(50))

    # Relationships
    job_applications = relationship("JobApplication", back_populates="user", passive_deletes=True)
    interviews = relationship("Interview", back_populates="user", passive_deletes=True)

    def __repr__(self):
        return f"<User {self.username} ({self.role})>"
