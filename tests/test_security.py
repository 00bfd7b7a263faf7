"""Password hashing and access tokens."""
from datetime import timedelta

import jwt
import pytest

from cybershield.config import Settings, parse_duration
from cybershield.models.user import User, UserRole
from cybershield.security import (
    create_access_token,
    decode_access_token,
    hash_password,
    verify_password,
)
from cybershield.utils.errors import Unauthorized


def _user(**overrides) -> User:
    values = {"id": 7, "name": "Ana", "email": "ana@example.com", "role": UserRole.user}
    values.update(overrides)
    return User(**values)


def test_hash_and_verify_password():
    hashed = hash_password("correct horse")
    assert hashed != "correct horse"
    assert hashed.startswith("$2b$12$")
    assert verify_password("correct horse", hashed)
    assert not verify_password("wrong horse", hashed)


def test_verify_password_with_malformed_hash():
    assert verify_password("anything", "not-a-bcrypt-hash") is False


def test_long_passwords_use_first_72_bytes():
    password = "\u00f1" * 40  # 80 bytes in UTF-8
    hashed = hash_password(password, rounds=4)

    assert verify_password(password, hashed)
    assert verify_password("\u00f1" * 36 + "tail", hashed)
    assert not verify_password("\u00f1" * 35, hashed)


def test_token_round_trip():
    token = create_access_token(_user(role=UserRole.admin))
    claims = decode_access_token(token)

    assert claims.user_id == 7
    assert claims.email == "ana@example.com"
    assert claims.role == UserRole.admin
    assert claims.exp - claims.iat == int(timedelta(days=7).total_seconds())


def test_expired_token_is_unauthorized():
    token = create_access_token(_user(), expires_in=timedelta(seconds=-1))
    with pytest.raises(Unauthorized):
        decode_access_token(token)


def test_token_signed_with_other_secret_is_unauthorized():
    token = jwt.encode({"user_id": 7, "email": "a@x.com", "role": "user", "exp": 9999999999}, "other", algorithm="HS256")
    with pytest.raises(Unauthorized):
        decode_access_token(token)


def test_token_without_expiry_is_unauthorized():
    settings = Settings(_env_file=None, JWT_SECRET="k")
    token = jwt.encode({"user_id": 7, "email": "a@x.com", "role": "user"}, "k", algorithm="HS256")
    with pytest.raises(Unauthorized):
        decode_access_token(token, settings=settings)


def test_configured_expiry_is_used():
    settings = Settings(_env_file=None, JWT_SECRET="k", JWT_EXPIRES_IN="2h")
    claims = decode_access_token(create_access_token(_user(), settings=settings), settings=settings)
    assert claims.exp - claims.iat == 7200


@pytest.mark.parametrize(
    ("raw", "expected"),
    [("7d", timedelta(days=7)), ("12h", timedelta(hours=12)), ("30m", timedelta(minutes=30)), ("45", timedelta(seconds=45)), (90, timedelta(seconds=90))],
)
def test_parse_duration(raw, expected):
    assert parse_duration(raw) == expected


def test_parse_duration_rejects_garbage():
    with pytest.raises(ValueError):
        parse_duration("one week")
