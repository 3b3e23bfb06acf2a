from pydantic import BaseModel, Field, field_validator
from datetime import datetime
from typing import Literal, Optional

from jobboard.schemas.question import CustomQuestion

JobType = Literal["full-time", "part-time", "internship", "volunteer", "contract"]
LocationType = Literal["in-person", "remote", "hybrid"]
JobStatus = Literal["pending", "approved", "rejected", "archived", "expired"]


def _lower_email(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    return value.strip().lower()


class JobBase(BaseModel):
    title: str
    organization: str
    description: str
    job_type: JobType = "full-time"
    location: Optional[str] = None
    location_type: LocationType = "in-person"
    is_paid: bool = False
    salary_range: Optional[str] = None
    hourly_rate: Optional[str] = None
    requirements: Optional[str] = None
    qualifications: Optional[str] = None
    contact_name: Optional[str] = None
    contact_email: Optional[str] = None
    contact_phone: Optional[str] = None
    application_url: Optional[str] = None
    application_instructions: Optional[str] = None
    expires_at: Optional[datetime] = None

    @field_validator("contact_email")
    @classmethod
    def lower_contact_email(cls, v):
        return _lower_email(v)


class JobDetails(JobBase):
    """Job section of a submission."""

    submitter_organization: Optional[str] = None
    custom_questions: list[CustomQuestion] = Field(default_factory=list)
    resume_required: bool = False
    cover_letter_required: bool = False


class SubmitterInfo(BaseModel):
    name: str
    email: str
    phone: Optional[str] = None
    address: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    zip_code: Optional[str] = None
    date_of_birth: Optional[str] = None
    employer: Optional[str] = None
    member_id: Optional[str] = None
    donor_id: Optional[str] = None
    subscriber_id: Optional[str] = None

    @field_validator("email")
    @classmethod
    def lower_email(cls, v):
        return _lower_email(v)


class SubmissionRequest(BaseModel):
    job: JobDetails
    submitter: SubmitterInfo


class SubmissionResponse(BaseModel):
    success: bool
    job_id: str
    slug: str
    status: JobStatus


class LookupRequest(BaseModel):
    phone: str = Field(..., min_length=1)


class LookupResponse(BaseModel):
    found: bool
    phone: str
    name: Optional[str] = None
    email: Optional[str] = None
    address: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    zip_code: Optional[str] = None
    date_of_birth: Optional[str] = None
    employer: Optional[str] = None
    member_id: Optional[str] = None
    donor_id: Optional[str] = None
    subscriber_id: Optional[str] = None


class JobUpdate(BaseModel):
    """Fields a poster may change on their own posting."""

    title: Optional[str] = None
    organization: Optional[str] = None
    description: Optional[str] = None
    job_type: Optional[JobType] = None
    location: Optional[str] = None
    location_type: Optional[LocationType] = None
    is_paid: Optional[bool] = None
    salary_range: Optional[str] = None
    hourly_rate: Optional[str] = None
    requirements: Optional[str] = None
    qualifications: Optional[str] = None
    contact_name: Optional[str] = None
    contact_email: Optional[str] = None
    contact_phone: Optional[str] = None
    application_url: Optional[str] = None
    application_instructions: Optional[str] = None
    expires_at: Optional[datetime] = None
    resume_required: Optional[bool] = None
    cover_letter_required: Optional[bool] = None

    @field_validator("contact_email")
    @classmethod
    def lower_contact_email(cls, v):
        return _lower_email(v)


class JobResponse(JobBase):
    id: str
    slug: str
    status: JobStatus
    featured: bool = False
    custom_questions: Optional[list[CustomQuestion]] = None
    resume_required: bool = False
    cover_letter_required: bool = False
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class JobTeaser(BaseModel):
    """Blurred preview shown to non-members."""

    id: str
    title: str
    job_type: JobType
    location_type: LocationType
    location: Optional[str] = None
    featured: bool = False

    class Config:
        from_attributes = True


class ListingStats(BaseModel):
    total: int
    paid: int
    volunteer: int
    remote: int


class JobListResponse(BaseModel):
    is_member: bool
    jobs: list[JobResponse] = Field(default_factory=list)
    teasers: list[JobTeaser] = Field(default_factory=list)
    stats: ListingStats
    membership_url: Optional[str] = None


class PosterJobSummary(BaseModel):
    id: str
    slug: str
    title: str
    organization: str
    status: JobStatus
    submitter_email: str
    contact_email: Optional[str] = None
    view_count: int = 0
    application_count: int = 0
    expires_at: Optional[datetime] = None
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class PosterJobResponse(JobResponse):
    submitter_email: str
    view_count: int = 0
    rejection_reason: Optional[str] = None


class DashboardStats(BaseModel):
    total_postings: int
    active: int
    pending: int
    total_applications: int


class DashboardResponse(BaseModel):
    email: str
    message: Optional[str] = None
    active: list[PosterJobSummary] = Field(default_factory=list)
    pending: list[PosterJobSummary] = Field(default_factory=list)
    past: list[PosterJobSummary] = Field(default_factory=list)
    stats: DashboardStats


class RejectRequest(BaseModel):
    reason: Optional[str] = None
