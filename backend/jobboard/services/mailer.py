"""
Outbound Email - thin client for the transactional email HTTP API

Used for sign-in codes (async, on the request path) and for reviewer
notifications and job alerts (sync, from Celery workers).

When EMAIL_API_URL is unset the message is logged instead of sent, which
keeps local development working without credentials.
"""

import logging
from dataclasses import dataclass
from typing import List

import httpx

from jobboard.config import get_settings

logger = logging.getLogger(__name__)
settings = get_settings()


class EmailError(RuntimeError):
    pass


@dataclass
class EmailMessage:
    to: List[str]
    subject: str
    text: str

    def payload(self) -> dict:
        return {
            "from": settings.email_from,
            "to": self.to,
            "subject": self.subject,
            "text": self.text,
        }


def _headers() -> dict:
    return {"Authorization": f"Bearer {settings.email_api_key}"}


async def send_email(message: EmailMessage) -> None:
    if not settings.email_api_url:
        logger.info(f"Email API not configured; would send '{message.subject}' to {message.to}")
        return

    async with httpx.AsyncClient() as client:
        try:
            response = await client.post(
                settings.email_api_url,
                json=message.payload(),
                headers=_headers(),
                timeout=15.0,
            )
            response.raise_for_status()
        except httpx.HTTPError as e:
            logger.error(f"Email send failed for '{message.subject}': {e}")
            raise EmailError("Could not send email") from e


def send_email_sync(message: EmailMessage) -> None:
    if not settings.email_api_url:
        logger.info(f"Email API not configured; would send '{message.subject}' to {message.to}")
        return

    with httpx.Client() as client:
        response = client.post(
            settings.email_api_url,
            json=message.payload(),
            headers=_headers(),
            timeout=15.0,
        )
        response.raise_for_status()
