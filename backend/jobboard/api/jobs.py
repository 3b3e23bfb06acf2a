import json
from typing import Optional

from fastapi import APIRouter, Depends, File, Form, HTTPException, UploadFile, status
from sqlalchemy.ext.asyncio import AsyncSession

from jobboard.auth import get_session_email
from jobboard.config import get_settings
from jobboard.database import get_db
from jobboard.middleware.metrics import record_application
from jobboard.schemas import (
    ApplicationResponse,
    JobListResponse,
    JobResponse,
    JobTeaser,
)
from jobboard.services.applications import (
    ApplicationError,
    ApplicationForm,
    application_response,
    create_application,
)
from jobboard.services.listing import (
    get_member,
    get_public_posting,
    list_public_postings,
    listing_stats,
)

router = APIRouter()
settings = get_settings()


def _members_only() -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_403_FORBIDDEN,
        detail={
            "message": "Member access required",
            "membership_url": settings.membership_url,
            "login_url": settings.member_login_url,
        },
    )


@router.get("", response_model=JobListResponse)
async def list_jobs(
    db: AsyncSession = Depends(get_db),
    email: Optional[str] = Depends(get_session_email),
):
    member = await get_member(db, email)
    postings = await list_public_postings(db)
    stats = listing_stats(postings)

    if member:
        return JobListResponse(
            is_member=True,
            jobs=[JobResponse.model_validate(p) for p in postings],
            stats=stats,
        )

    return JobListResponse(
        is_member=False,
        teasers=[JobTeaser.model_validate(p) for p in postings],
        stats=stats,
        membership_url=settings.membership_url,
    )


@router.get("/{slug}", response_model=JobResponse)
async def get_job(
    slug: str,
    db: AsyncSession = Depends(get_db),
    email: Optional[str] = Depends(get_session_email),
):
    posting = await get_public_posting(db, slug)
    if not posting:
        raise HTTPException(status_code=404, detail="Job not found")

    if not await get_member(db, email):
        raise _members_only()

    posting.view_count = (posting.view_count or 0) + 1
    await db.commit()
    await db.refresh(posting)

    return JobResponse.model_validate(posting)


@router.post("/{slug}/apply", response_model=ApplicationResponse, status_code=201)
async def apply(
    slug: str,
    name: str = Form(...),
    email: str = Form(...),
    phone: Optional[str] = Form(None),
    city: Optional[str] = Form(None),
    zip_code: Optional[str] = Form(None),
    cover_letter: Optional[str] = Form(None),
    answers: str = Form("{}"),
    resume: Optional[UploadFile] = File(None),
    cover_letter_file: Optional[UploadFile] = File(None),
    db: AsyncSession = Depends(get_db),
    session_email: Optional[str] = Depends(get_session_email),
):
    posting = await get_public_posting(db, slug)
    if not posting:
        raise HTTPException(status_code=404, detail="Job not found")

    member = await get_member(db, session_email)
    if not member:
        raise _members_only()

    try:
        parsed_answers = json.loads(answers or "{}")
    except json.JSONDecodeError:
        raise HTTPException(status_code=400, detail="Answers must be a JSON object")
    if not isinstance(parsed_answers, dict):
        raise HTTPException(status_code=400, detail="Answers must be a JSON object")

    form = ApplicationForm(
        name=name,
        email=email,
        phone=phone,
        city=city,
        zip_code=zip_code,
        cover_letter_text=cover_letter,
        answers=parsed_answers,
    )
    try:
        application = await create_application(
            db, posting, form, member=member, resume=resume, cover_letter_file=cover_letter_file
        )
    except ApplicationError as e:
        raise HTTPException(status_code=400, detail=str(e))

    record_application()
    return application_response(application)
