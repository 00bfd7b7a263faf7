"""Registration, login and profile lookup."""
import logging
from functools import lru_cache

from fastapi import BackgroundTasks
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from cybershield.utils.masking import mask_email
from cybershield.models.user import User, UserRole
from cybershield.schemas.user import LoginRequest, RegisterRequest, TokenClaims
from cybershield.security import create_access_token, hash_password, verify_password
from cybershield.services.notifications import Mailer, notify_welcome
from cybershield.services.persistence import commit_or_fail, read_or_fail
from cybershield.utils.errors import DuplicateEmail, InvalidCredentials, NotFound
from cybershield.utils.time import utcnow

logger = logging.getLogger(__name__)


@lru_cache(maxsize=1)
def _dummy_hash() -> str:
    """Hash checked when the e-mail is unknown so both failure paths cost one bcrypt round."""
    return hash_password("cybershield-dummy-password")


def get_user_by_email(db: Session, email: str) -> User | None:
    stmt = select(User).where(User.email == email.lower()).limit(1)
    with read_or_fail(db, action="get_user_by_email"):
        return db.scalars(stmt).first()


def register_user(
    db: Session,
    payload: RegisterRequest,
    *,
    background_tasks: BackgroundTasks,
    mailer: Mailer,
) -> tuple[User, str]:
    """Create an active ``user`` account and return it with a fresh token."""

    if get_user_by_email(db, payload.email) is not None:
        raise DuplicateEmail()

    user = User(
        name=payload.name,
        email=payload.email,
        password_hash=hash_password(payload.password),
        company=payload.company,
        phone=payload.phone,
        is_active=True,
        role=UserRole.user,
        created_at=utcnow(),
    )
    db.add(user)
    try:
        db.flush()
    except IntegrityError as exc:
        # Concurrent registration with the same address.
        db.rollback()
        raise DuplicateEmail() from exc
    commit_or_fail(db, action="register_user", message="Error creating the account.")

    token = create_access_token(user)
    logger.info("User registered", extra={"user_id": user.id, "email": mask_email(user.email)})
    notify_welcome(background_tasks, mailer, user)
    return user, token


def authenticate_user(db: Session, payload: LoginRequest) -> tuple[User, str]:
    """Check credentials, stamp ``last_login`` and issue a token.

    Unknown address, inactive account and wrong password all raise the same
    ``InvalidCredentials`` error.
    """

    user = get_user_by_email(db, payload.email)
    if user is None or not user.is_active:
        verify_password(payload.password, _dummy_hash())
        logger.info("Login rejected", extra={"email": mask_email(payload.email)})
        raise InvalidCredentials()
    if not verify_password(payload.password, user.password_hash):
        logger.info("Login rejected", extra={"email": mask_email(payload.email)})
        raise InvalidCredentials()

    user.last_login = utcnow()
    commit_or_fail(db, action="login")
    logger.info("User logged in", extra={"user_id": user.id})
    return user, create_access_token(user)


def get_profile(db: Session, claims: TokenClaims) -> User:
    with read_or_fail(db, action="get_profile"):
        user = db.get(User, claims.user_id)
    if user is None or not user.is_active:
        raise NotFound("User not found.")
    return user


__all__ = ["get_user_by_email", "register_user", "authenticate_user", "get_profile"]
