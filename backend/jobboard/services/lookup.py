"""
Phone Lookup - prefill the submission form from known contacts

Looks for the submitter's phone number among organization members first,
then asks the external CRM lookup endpoint for donor/subscriber records.

Lookup is best effort: any failure is logged and the caller gets a
not-found result carrying the phone number, so the form proceeds blank.
"""

import logging
from typing import Optional

import httpx
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from jobboard.config import get_settings
from jobboard.models import Member
from jobboard.schemas import LookupResponse
from jobboard.utils import phone_digits

logger = logging.getLogger(__name__)
settings = get_settings()

_CRM_FIELDS = (
    "name",
    "email",
    "address",
    "city",
    "state",
    "zip_code",
    "date_of_birth",
    "employer",
    "member_id",
    "donor_id",
    "subscriber_id",
)


async def _find_member(db: AsyncSession, digits: str) -> Optional[Member]:
    result = await db.execute(select(Member).where(Member.phone.is_not(None)))
    for member in result.scalars().all():
        if phone_digits(member.phone) == digits:
            return member
    return None


async def _crm_lookup(digits: str) -> Optional[dict]:
    if not settings.lookup_api_url:
        return None

    async with httpx.AsyncClient() as client:
        response = await client.post(
            settings.lookup_api_url,
            json={"action": "lookup", "phone": digits},
            headers={"Authorization": f"Bearer {settings.lookup_api_key}"},
            timeout=10.0,
        )
        response.raise_for_status()
        data = response.json()

    if not data.get("found"):
        return None
    return data


async def lookup_by_phone(db: AsyncSession, phone: str) -> LookupResponse:
    digits = phone_digits(phone)
    if len(digits) < 7:
        return LookupResponse(found=False, phone=phone)

    try:
        member = await _find_member(db, digits)
        if member:
            return LookupResponse(
                found=True,
                phone=phone,
                name=f"{member.first_name} {member.last_name}".strip(),
                email=member.email,
                member_id=member.id,
            )

        data = await _crm_lookup(digits)
        if data:
            fields = {
                key: str(data[key]) if data.get(key) is not None else None
                for key in _CRM_FIELDS
            }
            return LookupResponse(found=True, phone=phone, **fields)
    except Exception as e:
        logger.warning(f"Phone lookup failed, continuing without prefill: {e}")

    return LookupResponse(found=False, phone=phone)
