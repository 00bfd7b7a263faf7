# cybershield/security.py
"""Password hashing, access tokens and the bearer-token dependency."""
from __future__ import annotations

from datetime import timedelta

import bcrypt
import jwt
from fastapi import Depends, Header, Request
from pydantic import ValidationError

from cybershield.config import Settings, get_settings
from cybershield.models.user import User
from cybershield.schemas.user import TokenClaims
from cybershield.utils.errors import Unauthorized
from cybershield.utils.time import utcnow

# bcrypt only reads the first 72 bytes of a secret.
BCRYPT_MAX_BYTES = 72


def _password_bytes(password: str) -> bytes:
    return password.encode("utf-8")[:BCRYPT_MAX_BYTES]


def hash_password(password: str, rounds: int | None = None) -> str:
    """Return a salted bcrypt hash of ``password``."""

    cost = rounds if rounds is not None else get_settings().BCRYPT_ROUNDS
    hashed = bcrypt.hashpw(_password_bytes(password), bcrypt.gensalt(rounds=cost))
    return hashed.decode("utf-8")


def verify_password(password: str, password_hash: str) -> bool:
    """Constant-time check of ``password`` against a stored bcrypt hash."""

    try:
        return bcrypt.checkpw(_password_bytes(password), password_hash.encode("utf-8"))
    except ValueError:
        # Malformed stored hash.
        return False


def _signing_secret(settings: Settings) -> str:
    if not settings.JWT_SECRET:
        raise RuntimeError("JWT_SECRET is not configured.")
    return settings.JWT_SECRET


def create_access_token(
    user: User,
    *,
    settings: Settings | None = None,
    expires_in: timedelta | None = None,
) -> str:
    """Sign a token embedding the user's id, email and role."""

    settings = settings or get_settings()
    now = utcnow()
    lifetime = expires_in if expires_in is not None else settings.jwt_expires_delta
    role = user.role.value if user.role is not None else "user"
    payload = {
        "user_id": user.id,
        "email": user.email,
        "role": role,
        "iat": int(now.timestamp()),
        "exp": int((now + lifetime).timestamp()),
    }
    return jwt.encode(payload, _signing_secret(settings), algorithm=settings.JWT_ALGORITHM)


def decode_access_token(token: str, *, settings: Settings | None = None) -> TokenClaims:
    """Verify signature and expiry; raise ``Unauthorized`` on any failure."""

    settings = settings or get_settings()
    try:
        payload = jwt.decode(
            token,
            _signing_secret(settings),
            algorithms=[settings.JWT_ALGORITHM],
            options={"require": ["exp"]},
        )
        return TokenClaims(**payload)
    except (jwt.InvalidTokenError, ValidationError) as exc:
        raise Unauthorized("Invalid or expired token.") from exc


def _extract_bearer(authorization: str | None = Header(default=None)) -> str | None:
    """Read the token from ``Authorization: Bearer <token>``."""
    if authorization and authorization.startswith("Bearer "):
        token = authorization.split(" ", 1)[1].strip()
        return token or None
    return None


def require_user(
    request: Request,
    token: str | None = Depends(_extract_bearer),
) -> TokenClaims:
    """Validate the bearer token and expose its claims on ``request.state.user``."""

    if not token:
        raise Unauthorized("Access token required.")
    claims = decode_access_token(token)
    request.state.user = claims
    return claims


__all__ = [
    "hash_password",
    "verify_password",
    "create_access_token",
    "decode_access_token",
    "require_user",
]
