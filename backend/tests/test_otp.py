"""
Tests for the One-Time Passcode Store

Tests cover:
- Code generation and hashing
- Issuing stores only a digest, with the configured TTL
- Verification outcomes (expired, wrong, too many attempts, success)
- Redis failures surface as OtpError
"""

from unittest.mock import AsyncMock

import pytest
import redis.asyncio as redis

from jobboard.services.otp import OtpError, OtpStore, generate_code, hash_code


@pytest.fixture
def mock_redis():
    """Create a mock Redis client."""
    client = AsyncMock()
    client.get = AsyncMock(return_value=None)
    client.setex = AsyncMock(return_value=True)
    client.delete = AsyncMock(return_value=1)
    client.incr = AsyncMock(return_value=1)
    client.expire = AsyncMock(return_value=True)
    client.close = AsyncMock()
    return client


@pytest.fixture
def store(mock_redis):
    otp_store = OtpStore(redis_url="redis://localhost:6379", ttl=600, max_attempts=5, length=6)
    otp_store.redis = mock_redis
    return otp_store


class TestCodes:
    def test_generate_code_is_numeric(self):
        code = generate_code(6)
        assert len(code) == 6
        assert code.isdigit()

    def test_hash_is_bound_to_email(self):
        assert hash_code("a@example.org", "123456") != hash_code("b@example.org", "123456")
        assert hash_code("a@example.org", "123456") == hash_code("a@example.org", "123456")


class TestIssue:
    @pytest.mark.asyncio
    async def test_issue_stores_digest_with_ttl(self, store, mock_redis):
        code = await store.issue("Poster@Example.org")

        key, ttl, value = mock_redis.setex.call_args[0]
        assert key == "otp:poster@example.org"
        assert ttl == 600
        assert value == hash_code("poster@example.org", code)
        assert code not in value

    @pytest.mark.asyncio
    async def test_issue_resets_attempts(self, store, mock_redis):
        await store.issue("poster@example.org")
        mock_redis.delete.assert_called_once_with("otp:attempts:poster@example.org")

    @pytest.mark.asyncio
    async def test_issue_redis_failure(self, store, mock_redis):
        mock_redis.setex.side_effect = redis.ConnectionError("down")
        with pytest.raises(OtpError, match="temporarily unavailable"):
            await store.issue("poster@example.org")


class TestVerify:
    @pytest.mark.asyncio
    async def test_missing_code_is_expired(self, store, mock_redis):
        mock_redis.get.return_value = None
        with pytest.raises(OtpError, match="expired"):
            await store.verify("poster@example.org", "123456")

    @pytest.mark.asyncio
    async def test_wrong_code(self, store, mock_redis):
        mock_redis.get.return_value = hash_code("poster@example.org", "123456")
        with pytest.raises(OtpError, match="Invalid code"):
            await store.verify("poster@example.org", "654321")

    @pytest.mark.asyncio
    async def test_correct_code_is_consumed(self, store, mock_redis):
        mock_redis.get.return_value = hash_code("poster@example.org", "123456")

        await store.verify("POSTER@example.org", " 123456 ")

        mock_redis.delete.assert_called_once_with(
            "otp:poster@example.org", "otp:attempts:poster@example.org"
        )

    @pytest.mark.asyncio
    async def test_too_many_attempts_discards_code(self, store, mock_redis):
        mock_redis.get.return_value = hash_code("poster@example.org", "123456")
        mock_redis.incr.return_value = 6

        with pytest.raises(OtpError, match="Too many attempts"):
            await store.verify("poster@example.org", "123456")
        mock_redis.delete.assert_called_once()

    @pytest.mark.asyncio
    async def test_close(self, store, mock_redis):
        await store.close()
        mock_redis.close.assert_called_once()
        assert store.redis is None
