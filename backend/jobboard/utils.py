import re
import uuid
from datetime import datetime, timezone
from typing import Optional


def utcnow() -> datetime:
    """Current UTC time as a naive datetime (the form stored in the database)."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def to_naive_utc(value: Optional[datetime]) -> Optional[datetime]:
    if value is None:
        return None
    if value.tzinfo is not None:
        value = value.astimezone(timezone.utc).replace(tzinfo=None)
    return value


def normalize_email(email: Optional[str]) -> str:
    return (email or "").strip().lower()


def phone_digits(phone: Optional[str]) -> str:
    """Strip formatting and a leading US country code: "+1 (555) 123-4567" -> "5551234567"."""
    digits = re.sub(r"\D", "", phone or "")
    if len(digits) == 11 and digits.startswith("1"):
        digits = digits[1:]
    return digits


def slugify(title: str) -> str:
    """Build a unique URL slug from a title plus a short random suffix."""
    base = re.sub(r"[^a-z0-9]+", "-", title.lower()).strip("-")[:80] or "job"
    return f"{base}-{uuid.uuid4().hex[:8]}"
