from sqlalchemy import Column, Integer, String, Text, Boolean, Date, DateTime, ForeignKey, func
from sqlalchemy.orm import relationship
from app.core.database import Base


class Job(Base):
    """
    A job posting.

    Jobs are soft-deleted ("paranoid"): deleting a job sets deleted_at and
    every query in the CRUD layer filters on deleted_at IS NULL. The job's
    location/category links are removed physically when it is deleted.
    """
    __tablename__ = "jb_jobs"

    id = Column(Integer, primary_key=True, index=True)
    title = Column(Text, nullable=False, index=True)
    salary = Column(String, nullable=False)
    description = Column(Text, nullable=False)
    deadline = Column(Date, nullable=False)
    active = Column(Boolean, default=False, nullable=False, index=True)

    salary_type_id = Column(Integer, ForeignKey("salary_types.id"), nullable=True, index=True)
    employment_contract_type_id = Column(
        Integer, ForeignKey("employment_contract_types.id"), nullable=True, index=True
    )

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())
    deleted_at = Column(DateTime(timezone=True), nullable=True, index=True)

    # Relationships
    salary_type = relationship("SalaryType", back_populates="jobs")
    employment_contract_type = relationship("EmploymentContractType", back_populates="jobs")

    # Join rows are written through app.services.associations, so these are read-only views
    locations = relationship(
        "Location",
        secondary="jb_jobs_in_locations",
        order_by="Location.name",
        viewonly=True,
    )
    categories = relationship(
        "JobCategory",
        secondary="jb_jobs_in_categories",
        order_by="JobCategory.name",
        viewonly=True,
    )
    applications = relationship("JobApplication", back_populates="job")

    def __repr__(self):
        return f"<Job(id={self.id}, title='{self.title}', active={self.active})>"
