from pydantic import BaseModel
from datetime import datetime
from typing import Literal, Optional, Union

ApplicationStatus = Literal["submitted", "reviewed", "shortlisted", "rejected", "accepted"]

Answer = Union[str, list[str]]


class ApplicationResponse(BaseModel):
    id: str
    job_id: str
    applicant_name: str
    applicant_email: str
    applicant_phone: Optional[str] = None
    applicant_city: Optional[str] = None
    applicant_zip_code: Optional[str] = None
    resume_url: Optional[str] = None
    cover_letter: Optional[str] = None
    cover_letter_url: Optional[str] = None
    resume_viewer_url: Optional[str] = None
    answers: dict[str, Answer] = {}
    member_id: Optional[str] = None
    status: ApplicationStatus
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class ApplicationStatusUpdate(BaseModel):
    status: ApplicationStatus


class ApplicantsResponse(BaseModel):
    job_id: str
    job_title: str
    applicants: list[ApplicationResponse]
