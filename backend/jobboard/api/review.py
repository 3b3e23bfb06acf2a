from typing import List

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from jobboard.auth import get_current_reviewer
from jobboard.database import get_db
from jobboard.middleware.metrics import record_moderation
from jobboard.models import JobPosting
from jobboard.schemas import PosterJobResponse, RejectRequest
from jobboard.services.moderation import (
    ModerationError,
    approve_posting,
    list_pending,
    reject_posting,
)

router = APIRouter()


async def _get_posting(db: AsyncSession, job_id: str) -> JobPosting:
    result = await db.execute(select(JobPosting).where(JobPosting.id == job_id))
    posting = result.scalar_one_or_none()
    if not posting:
        raise HTTPException(status_code=404, detail="Job not found")
    return posting


@router.get("/pending", response_model=List[PosterJobResponse])
async def pending(
    db: AsyncSession = Depends(get_db),
    _: bool = Depends(get_current_reviewer),
):
    postings = await list_pending(db)
    return [PosterJobResponse.model_validate(p) for p in postings]


@router.post("/jobs/{job_id}/approve", response_model=PosterJobResponse)
async def approve(
    job_id: str,
    db: AsyncSession = Depends(get_db),
    _: bool = Depends(get_current_reviewer),
):
    posting = await _get_posting(db, job_id)
    try:
        posting = await approve_posting(db, posting)
    except ModerationError as e:
        raise HTTPException(status_code=400, detail=str(e))

    record_moderation("approved")
    return PosterJobResponse.model_validate(posting)


@router.post("/jobs/{job_id}/reject", response_model=PosterJobResponse)
async def reject(
    job_id: str,
    request: RejectRequest,
    db: AsyncSession = Depends(get_db),
    _: bool = Depends(get_current_reviewer),
):
    posting = await _get_posting(db, job_id)
    try:
        posting = await reject_posting(db, posting, request.reason)
    except ModerationError as e:
        raise HTTPException(status_code=400, detail=str(e))

    record_moderation("rejected")
    return PosterJobResponse.model_validate(posting)
