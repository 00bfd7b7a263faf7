"""User directory endpoints."""
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from cybershield.db import get_db
from cybershield.schemas.common import ListResponse, SuccessResponse
from cybershield.schemas.user import UserRead, UserStats
from cybershield.security import require_user
from cybershield.services.users import list_active_users, user_stats

# Any valid token is accepted; roles are not enforced here (see DESIGN.md).
router = APIRouter(prefix="/api/users", tags=["users"], dependencies=[Depends(require_user)])


@router.get("", response_model=ListResponse[UserRead])
def get_users(db: Session = Depends(get_db)) -> ListResponse[UserRead]:
    users = [UserRead.model_validate(user) for user in list_active_users(db)]
    return ListResponse[UserRead](data=users, count=len(users))


@router.get("/stats", response_model=SuccessResponse[UserStats])
def get_user_stats(db: Session = Depends(get_db)) -> SuccessResponse[UserStats]:
    return SuccessResponse[UserStats](data=user_stats(db))
