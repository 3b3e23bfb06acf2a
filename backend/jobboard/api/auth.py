import logging
from typing import Optional

from fastapi import APIRouter, Depends, Response, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from jobboard.auth import (
    COOKIE_NAME,
    REVIEWER_COOKIE_NAME,
    REVIEWER_TOKEN_EXPIRE_HOURS,
    create_reviewer_token,
    create_session_token,
    get_session_email,
    verify_reviewer_password,
)
from jobboard.config import get_settings
from jobboard.database import get_db
from jobboard.middleware.metrics import record_otp_sent
from jobboard.schemas import (
    LoginRequest,
    LoginResponse,
    OtpSendRequest,
    OtpVerifyRequest,
    SessionResponse,
)
from jobboard.services.listing import get_member
from jobboard.services.mailer import EmailError, EmailMessage, send_email
from jobboard.services.otp import OtpError, OtpStore, get_otp_store
from jobboard.services.poster import has_submitted_postings

router = APIRouter()
settings = get_settings()
logger = logging.getLogger(__name__)


@router.post("/otp/send", response_model=LoginResponse)
async def send_code(
    request: OtpSendRequest,
    db: AsyncSession = Depends(get_db),
    store: OtpStore = Depends(get_otp_store),
):
    if "@" not in request.email:
        raise HTTPException(status_code=400, detail="Enter a valid email address")

    if request.purpose == "poster" and not await has_submitted_postings(db, request.email):
        raise HTTPException(
            status_code=400,
            detail=(
                "No job postings found for this email address. "
                "Please use the email you submitted your job posting with."
            ),
        )
    if request.purpose == "member" and not await get_member(db, request.email):
        raise HTTPException(status_code=400, detail="No member account found for this email address.")

    try:
        code = await store.issue(request.email)
        await send_email(EmailMessage(
            to=[request.email],
            subject="Your sign-in code",
            text=(
                f"Your sign-in code is {code}.\n\n"
                f"It expires in {settings.otp_ttl_seconds // 60} minutes. "
                "If you did not request it, you can ignore this email."
            ),
        ))
    except (OtpError, EmailError) as e:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(e))

    record_otp_sent(request.purpose)
    return LoginResponse(success=True, message=f"We sent a sign-in code to {request.email}")


@router.post("/otp/verify", response_model=SessionResponse)
async def verify_code(
    request: OtpVerifyRequest,
    response: Response,
    db: AsyncSession = Depends(get_db),
    store: OtpStore = Depends(get_otp_store),
):
    try:
        await store.verify(request.email, request.code)
    except OtpError as e:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=str(e))

    token = create_session_token(request.email)
    response.set_cookie(
        key=COOKIE_NAME,
        value=token,
        httponly=True,
        max_age=settings.session_expire_days * 24 * 60 * 60,
        samesite="lax",
    )
    member = await get_member(db, request.email)
    logger.info(f"Signed in {request.email}")
    return SessionResponse(authenticated=True, email=request.email, is_member=member is not None)


@router.get("/session", response_model=SessionResponse)
async def current_session(
    db: AsyncSession = Depends(get_db),
    email: Optional[str] = Depends(get_session_email),
):
    if not email:
        return SessionResponse(authenticated=False)
    member = await get_member(db, email)
    return SessionResponse(authenticated=True, email=email, is_member=member is not None)


@router.post("/logout", response_model=LoginResponse)
async def logout(response: Response):
    response.delete_cookie(COOKIE_NAME)
    return LoginResponse(success=True, message="Signed out")


@router.post("/reviewer/login", response_model=LoginResponse)
async def reviewer_login(request: LoginRequest, response: Response):
    if not verify_reviewer_password(request.password):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid password",
        )

    response.set_cookie(
        key=REVIEWER_COOKIE_NAME,
        value=create_reviewer_token(),
        httponly=True,
        max_age=REVIEWER_TOKEN_EXPIRE_HOURS * 60 * 60,
        samesite="lax",
    )
    return LoginResponse(success=True, message="Logged in successfully")


@router.post("/reviewer/logout", response_model=LoginResponse)
async def reviewer_logout(response: Response):
    response.delete_cookie(REVIEWER_COOKIE_NAME)
    return LoginResponse(success=True, message="Logged out successfully")
