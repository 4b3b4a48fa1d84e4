from sqlalchemy import Column, Integer, String, ForeignKey, DateTime, func
from sqlalchemy.orm import relationship
from app.core.database import Base


class FileUpload(Base):
    """
    A file stored through the storage backend (CVs and other documents).

    `title` is the original filename shown to users, `name` the unique stored
    name, and `path` the local path or s3:// URI returned by the backend.
    """
    __tablename__ = "file_uploads"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)

    title = Column(String, nullable=False)
    name = Column(String, nullable=False)
    path = Column(String, nullable=False)
    mimetype = Column(String, nullable=True)
    size_bytes = Column(Integer, nullable=False, default=0)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    # Relationships
    user = relationship("User", back_populates="file_uploads")
    job_applications = relationship("JobApplication", back_populates="file_upload")

    def __repr__(self):
        return f"<FileUpload(id={self.id}, title='{self.title}', user_id={self.user_id})>"
