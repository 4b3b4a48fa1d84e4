"""
Job application model.

A job-board user applies to a job once, attaching a CV that is stored as a
FileUpload. Recruiters move the application through the statuses defined in
job_application_statuses; the applicant can withdraw it.
"""

from sqlalchemy import Column, Integer, Text, ForeignKey, DateTime, UniqueConstraint, func
from sqlalchemy.orm import relationship
from app.core.database import Base


class JobApplication(Base):
    __tablename__ = "job_applications"
    __table_args__ = (
        UniqueConstraint("job_id", "user_id", name="uq_job_applications_job_user"),
    )

    id = Column(Integer, primary_key=True, index=True)
    job_id = Column(Integer, ForeignKey("jb_jobs.id"), nullable=False, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    file_upload_id = Column(Integer, ForeignKey("file_uploads.id"), nullable=True, index=True)
    job_application_status_id = Column(
        Integer, ForeignKey("job_application_statuses.id"), nullable=True, index=True
    )

    cover_letter = Column(Text, nullable=True)
    withdrawn_at = Column(DateTime(timezone=True), nullable=True)

    # Timestamps
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    # Relationships
    job = relationship("Job", back_populates="applications")
    user = relationship("User", back_populates="job_applications")
    file_upload = relationship("FileUpload", back_populates="job_applications")
    status = relationship("JobApplicationStatus", back_populates="applications")

    def __repr__(self):
        return f"<JobApplication(id={self.id}, job_id={self.job_id}, user_id={self.user_id})>"
