"""Interview model."""

from sqlalchemy import CheckConstraint, Column, DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.orm import relationship

from jobtrack.db.base import Base


class Interview(Base):
    """Interview, either linked to an application or standalone with its own company/position."""

    __tablename__ = "interviews"
    __table_args__ = (
        CheckConstraint(
            "job_application_id IS NOT NULL OR (company_name IS NOT NULL AND position_title IS NOT NULL)",
            name="ck_interviews_application_or_company",
        ),
        CheckConstraint("rating IS NULL OR (rating >= 1 AND rating <= 5)", name="ck_interviews_rating"),
    )

    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    job_application_id = Column(
        Integer, ForeignKey("job_applications.id", ondelete="CASCADE"), nullable=True, index=True
    )
    interview_type = Column(String(20), default="video")  # phone, video, in_person, technical, panel
    scheduled_date = Column(DateTime, nullable=False, index=True)
    duration = Column(Integer, default=60)  # minutes
    interviewer_name = Column(String(100))
    interviewer_email = Column(String(100))
    location = Column(String(200))
    meeting_link = Column(String(500))
    status = Column(String(20), default="scheduled", index=True)
    notes = Column(Text)
    feedback = Column(Text)
    rating = Column(Integer)

    # Standalone interviews carry their own job details
    company_name = Column(String(100))
    position_title = Column(String(100))
    job_description = Column(Text)
    resume_link = Column(String(500))

    # Relationships
    user = relationship("User", back_populates="interviews")
    job_application = relationship("JobApplication", back_populates="interviews")

    def __repr__(self):
        return f"<Interview {self.id} {self.scheduled_date} ({self.status})>"
