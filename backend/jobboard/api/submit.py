from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from jobboard.database import get_db
from jobboard.middleware.metrics import record_phone_lookup, record_submission
from jobboard.schemas import (
    LookupRequest,
    LookupResponse,
    SubmissionRequest,
    SubmissionResponse,
)
from jobboard.services.lookup import lookup_by_phone
from jobboard.services.submission import SubmissionError, submit_job

router = APIRouter()


@router.post("/lookup", response_model=LookupResponse)
async def lookup(request: LookupRequest, db: AsyncSession = Depends(get_db)):
    """Prefill the submitter section from a phone number. Never fails the form."""
    result = await lookup_by_phone(db, request.phone)
    record_phone_lookup(result.found)
    return result


@router.post("", response_model=SubmissionResponse, status_code=201)
async def submit(request: SubmissionRequest, db: AsyncSession = Depends(get_db)):
    try:
        posting = await submit_job(db, request)
    except SubmissionError as e:
        raise HTTPException(status_code=400, detail=str(e))

    record_submission(posting.job_type)
    return SubmissionResponse(
        success=True,
        job_id=posting.id,
        slug=posting.slug,
        status=posting.status,
    )
