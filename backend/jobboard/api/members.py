from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from jobboard.config import get_settings
from jobboard.database import get_db
from jobboard.models import Member
from jobboard.schemas import UnsubscribeResponse

router = APIRouter()
settings = get_settings()

# Notification type -> Member flag it switches off
UNSUBSCRIBE_FLAGS = {
    "job_alerts": "subscribed_to_job_alerts",
}


@router.get("/unsubscribe", response_model=UnsubscribeResponse)
async def unsubscribe(
    member: Optional[str] = Query(None),
    type: Optional[str] = Query(None),
    db: AsyncSession = Depends(get_db),
):
    if not member or not type:
        raise HTTPException(status_code=400, detail="This unsubscribe link is invalid or incomplete.")

    flag = UNSUBSCRIBE_FLAGS.get(type)
    if not flag:
        raise HTTPException(status_code=400, detail="Unknown unsubscribe type")

    result = await db.execute(select(Member).where(Member.id == member))
    record = result.scalar_one_or_none()
    if not record:
        raise HTTPException(status_code=404, detail="Member not found")

    setattr(record, flag, False)
    await db.commit()

    return UnsubscribeResponse(
        success=True,
        message=(
            "You have been successfully unsubscribed from job alerts. "
            "You will no longer receive email notifications about new job postings."
        ),
        portal_url=settings.member_portal_url,
    )
