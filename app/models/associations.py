"""
Join tables linking jobs to locations and categories.

Each link is keyed by its (job_id, foreign id) pair, so a job can be linked
to a given location or category at most once.
"""

from sqlalchemy import Column, Integer, DateTime, ForeignKey, func
from app.core.database import Base


class JobsInLocations(Base):
    __tablename__ = "jb_jobs_in_locations"

    job_id = Column(Integer, ForeignKey("jb_jobs.id", ondelete="CASCADE"), primary_key=True)
    location_id = Column(Integer, ForeignKey("locations.id", ondelete="CASCADE"), primary_key=True, index=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    def __repr__(self):
        return f"<JobsInLocations(job_id={self.job_id}, location_id={self.location_id})>"


class JobsInCategories(Base):
    __tablename__ = "jb_jobs_in_categories"

    job_id = Column(Integer, ForeignKey("jb_jobs.id", ondelete="CASCADE"), primary_key=True)
    category_id = Column(Integer, ForeignKey("job_categories.id", ondelete="CASCADE"), primary_key=True, index=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    def __repr__(self):
        return f"<JobsInCategories(job_id={self.job_id}, category_id={self.category_id})>"
