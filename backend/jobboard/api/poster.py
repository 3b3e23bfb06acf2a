"""
Poster endpoints: dashboard, posting edits, custom question builder and
applicant review. Every route needs a signed-in session.
"""

import logging
from typing import Callable

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from jobboard.auth import get_current_email
from jobboard.config import get_settings
from jobboard.database import get_db
from jobboard.middleware.metrics import record_application_status
from jobboard.models import JobPosting
from jobboard.schemas import (
    ApplicantsResponse,
    ApplicationResponse,
    ApplicationStatusUpdate,
    DashboardResponse,
    DraftEdit,
    JobUpdate,
    MoveRequest,
    OptionAdd,
    PosterJobResponse,
    QuestionBuilderState,
    QuestionUpdate,
)
from jobboard.services.applications import application_response
from jobboard.services.poster import (
    PosterError,
    archive_posting,
    build_dashboard,
    get_owned_application,
    get_owned_posting,
    list_applicants,
    set_application_status,
    update_posting,
)
from jobboard.services.question_builder import QuestionBuilder, QuestionBuilderError

router = APIRouter()
settings = get_settings()
logger = logging.getLogger(__name__)


async def _owned(db: AsyncSession, job_id: str, email: str) -> JobPosting:
    posting = await get_owned_posting(db, job_id, email)
    if not posting:
        raise HTTPException(status_code=404, detail="Job not found")
    return posting


@router.get("/dashboard", response_model=DashboardResponse)
async def dashboard(
    db: AsyncSession = Depends(get_db),
    email: str = Depends(get_current_email),
):
    return await build_dashboard(db, email, full_closure=settings.poster_full_email_closure)


@router.get("/jobs/{job_id}", response_model=PosterJobResponse)
async def get_posting(
    job_id: str,
    db: AsyncSession = Depends(get_db),
    email: str = Depends(get_current_email),
):
    posting = await _owned(db, job_id, email)
    return PosterJobResponse.model_validate(posting)


@router.put("/jobs/{job_id}", response_model=PosterJobResponse)
async def edit_posting(
    job_id: str,
    update: JobUpdate,
    db: AsyncSession = Depends(get_db),
    email: str = Depends(get_current_email),
):
    posting = await _owned(db, job_id, email)
    try:
        posting = await update_posting(db, posting, update)
    except PosterError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return PosterJobResponse.model_validate(posting)


@router.post("/jobs/{job_id}/archive", response_model=PosterJobResponse)
async def archive(
    job_id: str,
    db: AsyncSession = Depends(get_db),
    email: str = Depends(get_current_email),
):
    posting = await _owned(db, job_id, email)
    posting = await archive_posting(db, posting)
    return PosterJobResponse.model_validate(posting)


# ==================== Custom question builder ====================

async def _edit_questions(
    db: AsyncSession, job_id: str, email: str, operation: Callable[[QuestionBuilder], None]
) -> QuestionBuilderState:
    posting = await _owned(db, job_id, email)
    builder = QuestionBuilder.from_posting(posting)
    try:
        operation(builder)
    except QuestionBuilderError as e:
        raise HTTPException(status_code=400, detail=str(e))

    builder.apply_to(posting)
    await db.commit()
    return builder.state()


@router.get("/jobs/{job_id}/questions", response_model=QuestionBuilderState)
async def question_state(
    job_id: str,
    db: AsyncSession = Depends(get_db),
    email: str = Depends(get_current_email),
):
    posting = await _owned(db, job_id, email)
    return QuestionBuilder.from_posting(posting).state()


@router.put("/jobs/{job_id}/questions/draft", response_model=QuestionBuilderState)
async def edit_draft(
    job_id: str,
    edit: DraftEdit,
    db: AsyncSession = Depends(get_db),
    email: str = Depends(get_current_email),
):
    return await _edit_questions(
        db, job_id, email, lambda b: b.edit_draft(**edit.model_dump(exclude_unset=True))
    )


@router.post("/jobs/{job_id}/questions/draft/option", response_model=QuestionBuilderState)
async def commit_draft_option(
    job_id: str,
    db: AsyncSession = Depends(get_db),
    email: str = Depends(get_current_email),
):
    return await _edit_questions(db, job_id, email, lambda b: b.commit_pending_option())


@router.delete("/jobs/{job_id}/questions/draft/options/{index}", response_model=QuestionBuilderState)
async def remove_draft_option(
    job_id: str,
    index: int,
    db: AsyncSession = Depends(get_db),
    email: str = Depends(get_current_email),
):
    return await _edit_questions(db, job_id, email, lambda b: b.remove_draft_option(index))


@router.post("/jobs/{job_id}/questions/draft/new", response_model=QuestionBuilderState)
async def new_draft(
    job_id: str,
    db: AsyncSession = Depends(get_db),
    email: str = Depends(get_current_email),
):
    return await _edit_questions(db, job_id, email, lambda b: b.new_draft())


@router.patch("/jobs/{job_id}/questions/{question_id}", response_model=QuestionBuilderState)
async def update_question(
    job_id: str,
    question_id: str,
    update: QuestionUpdate,
    db: AsyncSession = Depends(get_db),
    email: str = Depends(get_current_email),
):
    changes = update.model_dump(exclude_unset=True)
    return await _edit_questions(db, job_id, email, lambda b: b.update(question_id, **changes))


@router.post("/jobs/{job_id}/questions/{question_id}/move", response_model=QuestionBuilderState)
async def move_question(
    job_id: str,
    question_id: str,
    request: MoveRequest,
    db: AsyncSession = Depends(get_db),
    email: str = Depends(get_current_email),
):
    return await _edit_questions(db, job_id, email, lambda b: b.move(question_id, request.direction))


@router.post("/jobs/{job_id}/questions/{question_id}/options", response_model=QuestionBuilderState)
async def add_option(
    job_id: str,
    question_id: str,
    request: OptionAdd,
    db: AsyncSession = Depends(get_db),
    email: str = Depends(get_current_email),
):
    return await _edit_questions(db, job_id, email, lambda b: b.add_option(question_id, request.option))


@router.delete(
    "/jobs/{job_id}/questions/{question_id}/options/{index}",
    response_model=QuestionBuilderState,
)
async def remove_option(
    job_id: str,
    question_id: str,
    index: int,
    db: AsyncSession = Depends(get_db),
    email: str = Depends(get_current_email),
):
    return await _edit_questions(db, job_id, email, lambda b: b.remove_option(question_id, index))


@router.delete("/jobs/{job_id}/questions/{question_id}", response_model=QuestionBuilderState)
async def remove_question(
    job_id: str,
    question_id: str,
    db: AsyncSession = Depends(get_db),
    email: str = Depends(get_current_email),
):
    return await _edit_questions(db, job_id, email, lambda b: b.remove(question_id))


# ==================== Applicants ====================

@router.get("/jobs/{job_id}/applicants", response_model=ApplicantsResponse)
async def applicants(
    job_id: str,
    db: AsyncSession = Depends(get_db),
    email: str = Depends(get_current_email),
):
    posting = await _owned(db, job_id, email)
    applications = await list_applicants(db, posting.id)
    return ApplicantsResponse(
        job_id=posting.id,
        job_title=posting.title,
        applicants=[application_response(a) for a in applications],
    )


@router.patch("/applications/{application_id}", response_model=ApplicationResponse)
async def update_application_status(
    application_id: str,
    update: ApplicationStatusUpdate,
    db: AsyncSession = Depends(get_db),
    email: str = Depends(get_current_email),
):
    application = await get_owned_application(db, application_id, email)
    if not application:
        raise HTTPException(status_code=404, detail="Application not found")

    application = await set_application_status(db, application, update.status)
    record_application_status(update.status)
    logger.info(f"Application {application.id} marked {update.status}")
    return application_response(application)
