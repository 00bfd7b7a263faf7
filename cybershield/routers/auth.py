"""Authentication endpoints."""
from fastapi import APIRouter, BackgroundTasks, Depends, status
from sqlalchemy.orm import Session

from cybershield.db import get_db
from cybershield.schemas.common import SuccessResponse
from cybershield.schemas.user import AuthData, LoginRequest, ProfileData, RegisterRequest, TokenClaims, UserRead
from cybershield.security import require_user
from cybershield.services import auth as auth_service
from cybershield.services.notifications import Mailer, get_mailer
from cybershield.services.rate_limit import rate_limit

router = APIRouter(prefix="/api/auth", tags=["auth"])


@router.post(
    "/register",
    response_model=SuccessResponse[AuthData],
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(rate_limit("auth"))],
)
def register(
    payload: RegisterRequest,
    background_tasks: BackgroundTasks,
    db: Session = Depends(get_db),
    mailer: Mailer = Depends(get_mailer),
) -> SuccessResponse[AuthData]:
    """Create an account and return it with an access token."""

    user, token = auth_service.register_user(db, payload, background_tasks=background_tasks, mailer=mailer)
    return SuccessResponse[AuthData](
        message="Account created successfully.",
        data=AuthData(user=UserRead.model_validate(user), token=token),
    )


@router.post(
    "/login",
    response_model=SuccessResponse[AuthData],
    dependencies=[Depends(rate_limit("auth"))],
)
def login(payload: LoginRequest, db: Session = Depends(get_db)) -> SuccessResponse[AuthData]:
    user, token = auth_service.authenticate_user(db, payload)
    return SuccessResponse[AuthData](
        message="Login successful.",
        data=AuthData(user=UserRead.model_validate(user), token=token),
    )


@router.get("/me", response_model=SuccessResponse[ProfileData])
def me(
    claims: TokenClaims = Depends(require_user),
    db: Session = Depends(get_db),
) -> SuccessResponse[ProfileData]:
    """Return the profile of the token holder."""

    user = auth_service.get_profile(db, claims)
    return SuccessResponse[ProfileData](data=ProfileData(user=UserRead.model_validate(user)))
