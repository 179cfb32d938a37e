"""Unit tests for JWT verification and the get_current_user_id dependency."""

from datetime import UTC, datetime, timedelta

import pytest
from fastapi import HTTPException
from fastapi.security import HTTPAuthorizationCredentials
from jose import jwt

from config.settings import settings
from src.pa_common.errors import InvalidCredentialsError
from src.pa_gateway.auth.dependencies import get_current_user_id
from src.pa_gateway.auth.jwt_handler import decode_token


def _token(claims: dict, secret: str | None = None) -> str:
    return jwt.encode(claims, secret or settings.JWT_SECRET, algorithm=settings.JWT_ALGORITHM)


def _exp(minutes: int) -> datetime:
    return datetime.now(UTC) + timedelta(minutes=minutes)


def test_decode_valid_token() -> None:
    payload = decode_token(_token({"sub": "user-abc", "exp": _exp(5)}))
    assert payload["sub"] == "user-abc"


def test_audience_claim_is_not_enforced() -> None:
    payload = decode_token(_token({"sub": "user-abc", "aud": "authenticated", "exp": _exp(5)}))
    assert payload["sub"] == "user-abc"


def test_expired_token_raises() -> None:
    with pytest.raises(InvalidCredentialsError):
        decode_token(_token({"sub": "user-abc", "exp": _exp(-1)}))


def test_wrong_secret_raises() -> None:
    with pytest.raises(InvalidCredentialsError):
        decode_token(_token({"sub": "user-abc"}, secret="another-secret"))


def test_missing_sub_raises() -> None:
    with pytest.raises(InvalidCredentialsError):
        decode_token(_token({"role": "authenticated"}))


def test_garbage_raises() -> None:
    with pytest.raises(InvalidCredentialsError):
        decode_token("not.a.jwt")


async def test_dependency_returns_sub() -> None:
    creds = HTTPAuthorizationCredentials(scheme="Bearer", credentials=_token({"sub": "u-42"}))
    assert await get_current_user_id(creds) == "u-42"


async def test_dependency_missing_header() -> None:
    with pytest.raises(HTTPException) as exc_info:
        await get_current_user_id(None)
    assert exc_info.value.status_code == 401


async def test_dependency_bad_token() -> None:
    creds = HTTPAuthorizationCredentials(scheme="Bearer", credentials="bogus")
    with pytest.raises(HTTPException) as exc_info:
        await get_current_user_id(creds)
    assert exc_info.value.status_code == 401
