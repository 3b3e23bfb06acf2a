"""
JobPosting Model - SQLAlchemy ORM model for submitted job postings

Stores job and volunteer opportunities submitted by posters, along with
the submitter's identity and the poster-authored application questions.

Status Flow:
    pending → approved | rejected
    approved → archived | expired
"""

from sqlalchemy import Column, String, Integer, Boolean, Text, DateTime, JSON
from sqlalchemy.sql import func
from jobboard.database import Base
import uuid

JOB_STATUSES = ("pending", "approved", "rejected", "archived", "expired")
JOB_TYPES = ("full-time", "part-time", "internship", "volunteer", "contract")
LOCATION_TYPES = ("in-person", "remote", "hybrid")


class JobPosting(Base):
    """
    Job posting entity owned by its submitter.

    Attributes:
        id: UUID primary key
        slug: URL slug used by the public detail page (unique)
        title/organization/description: Core listing text
        job_type: One of JOB_TYPES
        location_type: One of LOCATION_TYPES
        is_paid: Whether salary_range/hourly_rate apply
        contact_*: Public contact identity shown to members
        application_url: External application link (optional)
        expires_at: Listing disappears from the board after this time
        status: Lifecycle stage (indexed), one of JOB_STATUSES
        submitter_*: Private identity of the person who submitted the posting
        custom_questions: Ordered list of application questions (JSON)
        question_draft: The question builder's in-progress draft (JSON)
    """

    __tablename__ = "jobs"

    id = Column(String, primary_key=True, default=lambda: str(uuid.uuid4()))
    slug = Column(String(600), nullable=False, unique=True, index=True)
    title = Column(String(500), nullable=False)
    organization = Column(String(500), nullable=False)
    description = Column(Text, nullable=False)
    job_type = Column(String(20), nullable=False, default="full-time")
    location = Column(String(500), nullable=True)
    location_type = Column(String(20), nullable=False, default="in-person")
    is_paid = Column(Boolean, nullable=False, default=False)
    salary_range = Column(String(200), nullable=True)
    hourly_rate = Column(String(200), nullable=True)
    requirements = Column(Text, nullable=True)
    qualifications = Column(Text, nullable=True)

    contact_name = Column(String(300), nullable=True)
    contact_email = Column(String(320), nullable=True, index=True)
    contact_phone = Column(String(50), nullable=True)
    application_url = Column(String(2000), nullable=True)
    application_instructions = Column(Text, nullable=True)

    expires_at = Column(DateTime, nullable=True)
    status = Column(String(20), nullable=False, default="pending", index=True)
    featured = Column(Boolean, nullable=False, default=False)
    view_count = Column(Integer, nullable=False, default=0)
    rejection_reason = Column(Text, nullable=True)
    reviewed_at = Column(DateTime, nullable=True)

    submitter_name = Column(String(300), nullable=False)
    submitter_email = Column(String(320), nullable=False, index=True)
    submitter_phone = Column(String(50), nullable=True)
    submitter_address = Column(String(500), nullable=True)
    submitter_city = Column(String(200), nullable=True)
    submitter_state = Column(String(100), nullable=True)
    submitter_zip_code = Column(String(20), nullable=True)
    submitter_date_of_birth = Column(String(20), nullable=True)
    submitter_employer = Column(String(300), nullable=True)
    submitter_organization = Column(String(300), nullable=True)
    member_id = Column(String, nullable=True)
    donor_id = Column(String, nullable=True)
    subscriber_id = Column(String, nullable=True)

    custom_questions = Column(JSON, nullable=True)
    question_draft = Column(JSON, nullable=True)
    resume_required = Column(Boolean, nullable=False, default=False)
    cover_letter_required = Column(Boolean, nullable=False, default=False)

    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())
