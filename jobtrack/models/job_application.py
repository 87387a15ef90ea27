"""Job application model."""

from sqlalchemy import Boolean, Column, Date, ForeignKey, Integer, String, Text
from sqlalchemy.orm import relationship

from jobtrack.db.base import Base


class JobApplication(Base):
    """A job a user has applied (or plans to apply) for."""

    __tablename__ = "job_applications"

    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    company_name = Column(String(100), nullable=False)
    position_title = Column(String(100), nullable=False)
    application_date = Column(Date)

    # Status tracking
    status = Column(String(30), default="applied", index=True)

    job_description = Column(Text)
    requirements = Column(Text)
    salary_range = Column(String(50))
    location = Column(String(100))
    application_url = Column(String(500))
    notes = Column(Text)
    follow_up_date = Column(Date)

    # Resume
    resume_file_path = Column(String(500))
    has_resume = Column(Boolean, default=False, nullable=False)

    # Relationships
    user = relationship("User", back_populates="job_applications")
    interviews = relationship("Interview", back_populates="job_application", passive_deletes=True)

    def __repr__(self):
        return f"<JobApplication {self.position_title} at {self.company_name}>"
