from datetime import datetime, timedelta
from typing import Optional
from fastapi import Request, HTTPException, status
from jose import JWTError, jwt
from jobboard.config import get_settings
from jobboard.utils import normalize_email

settings = get_settings()

ALGORITHM = "HS256"
COOKIE_NAME = "session_token"
REVIEWER_COOKIE_NAME = "reviewer_token"
REVIEWER_TOKEN_EXPIRE_HOURS = 12


def create_session_token(email: str) -> str:
    expire = datetime.utcnow() + timedelta(days=settings.session_expire_days)
    to_encode = {"exp": expire, "sub": normalize_email(email), "role": "user"}
    return jwt.encode(to_encode, settings.secret_key, algorithm=ALGORITHM)


def create_reviewer_token() -> str:
    expire = datetime.utcnow() + timedelta(hours=REVIEWER_TOKEN_EXPIRE_HOURS)
    to_encode = {"exp": expire, "role": "reviewer"}
    return jwt.encode(to_encode, settings.secret_key, algorithm=ALGORITHM)


def _decode(token: str) -> Optional[dict]:
    try:
        return jwt.decode(token, settings.secret_key, algorithms=[ALGORITHM])
    except JWTError:
        return None


def verify_session_token(token: str) -> Optional[str]:
    """Return the session's email, or None for a missing/invalid/expired token."""
    payload = _decode(token)
    if not payload or payload.get("role") != "user":
        return None
    return payload.get("sub") or None


def verify_reviewer_token(token: str) -> bool:
    payload = _decode(token)
    return bool(payload) and payload.get("role") == "reviewer"


def verify_reviewer_password(password: str) -> bool:
    return password == settings.reviewer_password


async def get_session_email(request: Request) -> Optional[str]:
    token = request.cookies.get(COOKIE_NAME)
    if not token:
        return None
    return verify_session_token(token)


async def get_current_email(request: Request) -> str:
    email = await get_session_email(request)
    if not email:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
        )
    return email


async def get_current_reviewer(request: Request) -> bool:
    token = request.cookies.get(REVIEWER_COOKIE_NAME)
    if not token or not verify_reviewer_token(token):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
        )
    return True
