from pydantic import BaseModel, field_validator
from typing import Literal, Optional


class OtpSendRequest(BaseModel):
    email: str
    purpose: Literal["poster", "member"] = "poster"

    @field_validator("email")
    @classmethod
    def lower_email(cls, v):
        return v.strip().lower()


class OtpVerifyRequest(BaseModel):
    email: str
    code: str

    @field_validator("email")
    @classmethod
    def lower_email(cls, v):
        return v.strip().lower()


class SessionResponse(BaseModel):
    authenticated: bool
    email: Optional[str] = None
    is_member: bool = False


class LoginRequest(BaseModel):
    password: str


class LoginResponse(BaseModel):
    success: bool
    message: str
