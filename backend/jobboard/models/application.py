"""
Application Model - an applicant's response to a job posting

Status Flow (any status reachable from any other):
    submitted → reviewed → shortlisted | rejected | accepted
"""

from sqlalchemy import Column, String, Text, DateTime, JSON, ForeignKey
from sqlalchemy.sql import func
from jobboard.database import Base
import uuid

APPLICATION_STATUSES = ("submitted", "reviewed", "shortlisted", "rejected", "accepted")


class Application(Base):
    __tablename__ = "job_applications"

    id = Column(String, primary_key=True, default=lambda: str(uuid.uuid4()))
    job_id = Column(String, ForeignKey("jobs.id"), nullable=False, index=True)
    applicant_name = Column(String(300), nullable=False)
    applicant_email = Column(String(320), nullable=False)
    applicant_phone = Column(String(50), nullable=True)
    applicant_city = Column(String(200), nullable=True)
    applicant_zip_code = Column(String(20), nullable=True)
    resume_url = Column(String(2000), nullable=True)
    cover_letter = Column(Text, nullable=True)  # Free text or "[Uploaded: <path>]"
    answers = Column(JSON, nullable=False, default=dict)
    member_id = Column(String, nullable=True)
    status = Column(String(20), nullable=False, default="submitted", index=True)
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())
