from pydantic_settings import BaseSettings
from functools import lru_cache


class Settings(BaseSettings):
    database_url: str = "sqlite:///./data/jobboard.db"
    secret_key: str = "dev-secret-key-change-in-production"
    log_level: str = "INFO"

    # Reviewer sign-in (shared moderation password)
    reviewer_password: str = "changeme"

    # Session cookie
    session_expire_days: int = 7

    # One-time passcodes
    otp_length: int = 6
    otp_ttl_seconds: int = 600
    otp_max_attempts: int = 5

    # Redis configuration (OTP store)
    redis_url: str = "redis://localhost:6379"

    # Celery configuration
    celery_broker_url: str = "redis://localhost:6379/0"
    celery_result_backend: str = "redis://localhost:6379/0"

    # External member/donor/subscriber lookup (optional)
    lookup_api_url: str = ""
    lookup_api_key: str = ""

    # Outbound email API
    email_api_url: str = ""
    email_api_key: str = ""
    email_from: str = "jobs@moyoungdemocrats.org"
    reviewer_emails: list[str] = []

    # File storage
    storage_public_url: str = "http://localhost:8000"
    storage_root: str = "./data/storage"
    applications_bucket: str = "job-applications"
    max_upload_bytes: int = 10 * 1024 * 1024

    # Public site
    site_url: str = "http://localhost:3000"
    membership_url: str = (
        "https://docs.google.com/forms/d/e/"
        "1FAIpQLSd5Hd_cgdFmgE7f9gdIxmwXSAdxkuFuITENO_x5VkhDrtR8Ag/viewform?pli=1"
    )
    member_login_url: str = "https://members.moyoungdemocrats.org/login"
    member_portal_url: str = "https://members.moyoungdemocrats.org/dashboard"
    cors_origins: list[str] = ["http://localhost:3000"]

    # Poster dashboard grouping: one hop (default) or full closure
    poster_full_email_closure: bool = False

    # Expiry sweep interval
    expiry_sweep_minutes: int = 60

    class Config:
        env_file = ".env"


@lru_cache
def get_settings() -> Settings:
    return Settings()
