"""
Applying to a Posting

Members apply with their contact details, answers to the posting's custom
questions and, depending on the posting, a resume and/or cover letter.
Uploaded documents go to the applications bucket; the resume is stored as
its public URL and an uploaded cover letter as an "[Uploaded: <path>]"
reference.
"""

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Union

from fastapi import UploadFile
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from jobboard.models import Application, JobPosting, Member
from jobboard.schemas import CHOICE_TYPES, ApplicationResponse, CustomQuestion
from jobboard.services import storage

logger = logging.getLogger(__name__)

Answer = Union[str, List[str]]


class ApplicationError(ValueError):
    pass


@dataclass
class ApplicationForm:
    name: str
    email: str
    phone: Optional[str] = None
    city: Optional[str] = None
    zip_code: Optional[str] = None
    cover_letter_text: Optional[str] = None
    answers: Dict[str, Answer] = field(default_factory=dict)


def _is_answer(value) -> bool:
    if isinstance(value, list):
        return all(isinstance(v, str) for v in value)
    return isinstance(value, str)


def _is_blank(answer: Optional[Answer]) -> bool:
    if answer is None:
        return True
    if isinstance(answer, list):
        return not any(a.strip() for a in answer)
    return not answer.strip()


def validate_answers(questions: List[CustomQuestion], answers: Dict[str, Answer]) -> Dict[str, Answer]:
    """
    Check answers against the posting's questions.

    Returns:
        Answers restricted to known questions, with blank answers dropped

    Raises:
        ApplicationError: a required question is unanswered or a choice is not an option,
            or an answer is neither text nor a list of text
    """
    cleaned: Dict[str, Answer] = {}
    for question in questions:
        answer = answers.get(question.id)
        if answer is not None and not _is_answer(answer):
            raise ApplicationError(f"Invalid answer for: {question.question}")
        if _is_blank(answer):
            if question.required:
                raise ApplicationError(f"Please answer: {question.question}")
            continue

        if question.type == "checkbox":
            picks = answer if isinstance(answer, list) else [answer]
            picks = [p for p in picks if p.strip()]
            unknown = [p for p in picks if p not in question.options]
            if unknown:
                raise ApplicationError(f"Invalid choice for: {question.question}")
            cleaned[question.id] = picks
        elif question.type in CHOICE_TYPES:
            if isinstance(answer, list) or answer not in question.options:
                raise ApplicationError(f"Invalid choice for: {question.question}")
            cleaned[question.id] = answer
        else:
            if isinstance(answer, list):
                answer = ", ".join(answer)
            cleaned[question.id] = answer.strip()
    return cleaned


def _discard(paths: List[str]) -> None:
    for path in paths:
        storage.delete_upload(path)


async def create_application(
    db: AsyncSession,
    posting: JobPosting,
    form: ApplicationForm,
    member: Optional[Member] = None,
    resume: Optional[UploadFile] = None,
    cover_letter_file: Optional[UploadFile] = None,
) -> Application:
    if not form.name.strip():
        raise ApplicationError("Name is required")
    if "@" not in form.email:
        raise ApplicationError("A valid email address is required")

    has_resume = resume is not None and bool(resume.filename)
    has_cover_file = cover_letter_file is not None and bool(cover_letter_file.filename)
    has_cover_text = bool((form.cover_letter_text or "").strip())

    if posting.resume_required and not has_resume:
        raise ApplicationError("A resume is required for this position")
    if posting.cover_letter_required and not (has_cover_file or has_cover_text):
        raise ApplicationError("A cover letter is required for this position")

    questions = [CustomQuestion.model_validate(q) for q in (posting.custom_questions or [])]
    answers = validate_answers(questions, form.answers)

    folder = posting.id
    stored: List[str] = []
    try:
        resume_url = None
        if has_resume:
            stored.append(await storage.save_upload(resume, folder))
            resume_url = storage.public_url(stored[-1])

        cover_letter = form.cover_letter_text.strip() if has_cover_text else None
        if has_cover_file:
            stored.append(await storage.save_upload(cover_letter_file, folder))
            cover_letter = storage.uploaded_reference(stored[-1])
    except storage.StorageError as e:
        _discard(stored)
        raise ApplicationError(str(e)) from e

    application = Application(
        job_id=posting.id,
        applicant_name=form.name.strip(),
        applicant_email=form.email.strip().lower(),
        applicant_phone=form.phone,
        applicant_city=form.city,
        applicant_zip_code=form.zip_code,
        resume_url=resume_url,
        cover_letter=cover_letter,
        answers=answers,
        member_id=member.id if member else None,
        status="submitted",
    )
    db.add(application)
    try:
        await db.commit()
    except SQLAlchemyError:
        await db.rollback()
        _discard(stored)
        raise
    await db.refresh(application)
    logger.info(f"Application {application.id} received for posting {posting.id}")
    return application


def application_response(application: Application) -> ApplicationResponse:
    """Serialize an application with viewer and public URLs for its documents."""
    response = ApplicationResponse.model_validate(application)
    if application.resume_url:
        response.resume_viewer_url = storage.viewer_url(application.resume_url)
    response.cover_letter_url = storage.cover_letter_url(application.cover_letter)
    if response.cover_letter_url:
        response.cover_letter = None
    return response
