"""
Job Submission - validate and persist a new posting

Postings always enter as `pending`; a reviewer approves or rejects them.
After the insert commits, reviewers are notified in the background.
"""

import logging
from typing import List

from sqlalchemy.ext.asyncio import AsyncSession

from jobboard.models import JobPosting
from jobboard.schemas import CustomQuestion, SubmissionRequest
from jobboard.services.question_builder import is_valid_question
from jobboard.tasks.notifications import enqueue, notify_reviewers
from jobboard.utils import slugify, to_naive_utc, utcnow

logger = logging.getLogger(__name__)


class SubmissionError(ValueError):
    pass


def _blank(value) -> bool:
    return not (value or "").strip()


def _clean_questions(questions: List[CustomQuestion]) -> List[CustomQuestion]:
    ordered = sorted(questions, key=lambda q: q.order)
    for i, question in enumerate(ordered):
        if not is_valid_question(question):
            raise SubmissionError(f"Question {i + 1} is incomplete")
        question.question = question.question.strip()
        question.order = i
    return ordered


def validate_submission(request: SubmissionRequest) -> None:
    """
    Raises:
        SubmissionError: with a message suitable for showing to the submitter
    """
    job, submitter = request.job, request.submitter

    for label, value in (
        ("Job title", job.title),
        ("Organization", job.organization),
        ("Job description", job.description),
        ("Your name", submitter.name),
    ):
        if _blank(value):
            raise SubmissionError(f"{label} is required")

    if "@" not in (submitter.email or ""):
        raise SubmissionError("A valid email address is required")
    if job.contact_email and "@" not in job.contact_email:
        raise SubmissionError("Contact email is not a valid email address")
    if _blank(job.contact_email) and _blank(job.application_url):
        raise SubmissionError("Provide a contact email or an application URL")

    expires_at = to_naive_utc(job.expires_at)
    if expires_at is not None and expires_at <= utcnow():
        raise SubmissionError("Expiration date must be in the future")


def build_posting(request: SubmissionRequest) -> JobPosting:
    job, submitter = request.job, request.submitter
    questions = _clean_questions(job.custom_questions)

    return JobPosting(
        slug=slugify(job.title),
        title=job.title.strip(),
        organization=job.organization.strip(),
        description=job.description.strip(),
        job_type=job.job_type,
        location=job.location,
        location_type=job.location_type,
        is_paid=job.is_paid,
        salary_range=job.salary_range if job.is_paid else None,
        hourly_rate=job.hourly_rate if job.is_paid else None,
        requirements=job.requirements,
        qualifications=job.qualifications,
        contact_name=job.contact_name,
        contact_email=job.contact_email or None,
        contact_phone=job.contact_phone,
        application_url=job.application_url or None,
        application_instructions=job.application_instructions,
        expires_at=to_naive_utc(job.expires_at),
        status="pending",
        submitter_name=submitter.name.strip(),
        submitter_email=submitter.email,
        submitter_phone=submitter.phone,
        submitter_address=submitter.address,
        submitter_city=submitter.city,
        submitter_state=submitter.state,
        submitter_zip_code=submitter.zip_code,
        submitter_date_of_birth=submitter.date_of_birth,
        submitter_employer=submitter.employer,
        submitter_organization=job.submitter_organization,
        member_id=submitter.member_id,
        donor_id=submitter.donor_id,
        subscriber_id=submitter.subscriber_id,
        custom_questions=[q.model_dump() for q in questions] or None,
        resume_required=job.resume_required,
        cover_letter_required=job.cover_letter_required,
    )


async def submit_job(db: AsyncSession, request: SubmissionRequest) -> JobPosting:
    validate_submission(request)
    posting = build_posting(request)

    db.add(posting)
    await db.commit()
    await db.refresh(posting)
    logger.info(f"New posting {posting.id} submitted by {posting.submitter_email}")

    enqueue(notify_reviewers, posting.id)

    return posting
