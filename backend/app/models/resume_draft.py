"""
Resume Draft Model - one row per saved version of a student's resume.
"""
from datetime import datetime, timezone
from sqlalchemy import Column, Integer, String, DateTime, JSON, UniqueConstraint
from ..database import Base


class ResumeDraft(Base):
    """
    Saved resume document for a student.
    Versions are numbered from 1 per student; the highest is the current draft.
    """
    __tablename__ = "resume_drafts"
    __table_args__ = (
        UniqueConstraint("student_id", "version", name="uq_resume_drafts_student_version"),
    )

    id = Column(Integer, primary_key=True, index=True)
    student_id = Column(String(255), nullable=False, index=True)
    version = Column(Integer, nullable=False)

    # Resume document as camelCase JSON
    data = Column(JSON, nullable=False)

    created_at = Column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))
