"""
Reference data shared by many jobs and applications.

All lookup tables have the same shape: a unique name plus timestamps.
Job categories also carry an optional description.
"""

from sqlalchemy import Column, Integer, String, Text, DateTime, func
from sqlalchemy.orm import relationship
from app.core.database import Base


class LookupMixin:
    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, unique=True, nullable=False, index=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    def __repr__(self):
        return f"<{type(self).__name__}(id={self.id}, name='{self.name}')>"


class Location(LookupMixin, Base):
    __tablename__ = "locations"

    jobs = relationship(
        "Job",
        secondary="jb_jobs_in_locations",
        primaryjoin="Location.id == JobsInLocations.location_id",
        secondaryjoin="and_(Job.id == JobsInLocations.job_id, Job.deleted_at.is_(None))",
        viewonly=True,
    )


class JobCategory(LookupMixin, Base):
    __tablename__ = "job_categories"

    description = Column(Text, nullable=True)

    jobs = relationship(
        "Job",
        secondary="jb_jobs_in_categories",
        primaryjoin="JobCategory.id == JobsInCategories.category_id",
        secondaryjoin="and_(Job.id == JobsInCategories.job_id, Job.deleted_at.is_(None))",
        viewonly=True,
    )


class SalaryType(LookupMixin, Base):
    __tablename__ = "salary_types"

    jobs = relationship("Job", back_populates="salary_type")


class EmploymentContractType(LookupMixin, Base):
    __tablename__ = "employment_contract_types"

    jobs = relationship("Job", back_populates="employment_contract_type")


class JobApplicationStatus(LookupMixin, Base):
    __tablename__ = "job_application_statuses"

    applications = relationship("JobApplication", back_populates="status")
