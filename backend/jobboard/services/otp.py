"""
One-Time Passcode Store - passwordless email sign-in

Codes are numeric, single-use and short-lived. Only a SHA-256 digest of
the code is kept, in Redis, with a TTL. Each verification attempt bumps a
per-email counter; after OTP_MAX_ATTEMPTS failures the code is discarded.

Key Patterns:
    - otp:{email}           - code digest (TTL = OTP_TTL_SECONDS)
    - otp:attempts:{email}  - failed attempt counter (same TTL)

Usage:
    store = await get_otp_store()
    code = await store.issue("poster@example.org")
    await store.verify("poster@example.org", code)
"""

import hashlib
import hmac
import logging
import secrets
from typing import Optional

import redis.asyncio as redis

from jobboard.config import get_settings
from jobboard.utils import normalize_email

logger = logging.getLogger(__name__)


class OtpError(ValueError):
    pass


def hash_code(email: str, code: str) -> str:
    return hashlib.sha256(f"{email}:{code}".encode()).hexdigest()


def generate_code(length: int) -> str:
    return "".join(str(secrets.randbelow(10)) for _ in range(length))


class OtpStore:
    def __init__(self, redis_url: str, ttl: int = 600, max_attempts: int = 5, length: int = 6):
        self.redis_url = redis_url
        self.redis: Optional[redis.Redis] = None
        self.ttl = ttl
        self.max_attempts = max_attempts
        self.length = length

    async def _ensure_connected(self) -> redis.Redis:
        if self.redis is None:
            try:
                self.redis = redis.from_url(
                    self.redis_url,
                    encoding="utf-8",
                    decode_responses=True,
                )
            except Exception as e:
                logger.error(f"Failed to connect to Redis: {e}")
                raise OtpError("Sign-in is temporarily unavailable") from e
        return self.redis

    @staticmethod
    def _code_key(email: str) -> str:
        return f"otp:{email}"

    @staticmethod
    def _attempts_key(email: str) -> str:
        return f"otp:attempts:{email}"

    async def issue(self, email: str) -> str:
        """Create a fresh code for an email, replacing any outstanding one."""
        email = normalize_email(email)
        client = await self._ensure_connected()
        code = generate_code(self.length)
        try:
            await client.setex(self._code_key(email), self.ttl, hash_code(email, code))
            await client.delete(self._attempts_key(email))
        except redis.RedisError as e:
            logger.error(f"Redis error issuing code: {e}")
            raise OtpError("Sign-in is temporarily unavailable") from e
        return code

    async def verify(self, email: str, code: str) -> None:
        """
        Check a submitted code; a successful check consumes it.

        Raises:
            OtpError: missing/expired code, wrong code, or too many attempts
        """
        email = normalize_email(email)
        client = await self._ensure_connected()
        code_key = self._code_key(email)
        attempts_key = self._attempts_key(email)

        try:
            stored = await client.get(code_key)
            if stored is None:
                raise OtpError("Code has expired. Please request a new one.")

            attempts = await client.incr(attempts_key)
            await client.expire(attempts_key, self.ttl)
            if attempts > self.max_attempts:
                await client.delete(code_key, attempts_key)
                raise OtpError("Too many attempts. Please request a new code.")

            if not hmac.compare_digest(stored, hash_code(email, code.strip())):
                raise OtpError("Invalid code")

            await client.delete(code_key, attempts_key)
        except redis.RedisError as e:
            logger.error(f"Redis error verifying code: {e}")
            raise OtpError("Sign-in is temporarily unavailable") from e

    async def close(self) -> None:
        if self.redis:
            await self.redis.close()
            self.redis = None


_store_instance: Optional[OtpStore] = None


async def get_otp_store() -> OtpStore:
    global _store_instance

    if _store_instance is None:
        settings = get_settings()
        _store_instance = OtpStore(
            redis_url=settings.redis_url,
            ttl=settings.otp_ttl_seconds,
            max_attempts=settings.otp_max_attempts,
            length=settings.otp_length,
        )

    return _store_instance


async def close_otp_store() -> None:
    global _store_instance

    if _store_instance is not None:
        await _store_instance.close()
        _store_instance = None
