"""User and authentication schemas."""
from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator

from cybershield.models.user import UserRole
from cybershield.schemas.common import UtcDatetime


class RegisterRequest(BaseModel):
    name: str = Field(min_length=2, max_length=100)
    email: EmailStr
    password: str = Field(min_length=6, max_length=100)
    company: str | None = Field(default=None, max_length=100)
    phone: str | None = Field(default=None, max_length=20)

    model_config = ConfigDict(extra="forbid")

    @field_validator("email")
    @classmethod
    def _lower_email(cls, value: str) -> str:
        return value.lower()


class LoginRequest(BaseModel):
    email: EmailStr
    password: str = Field(min_length=1)

    model_config = ConfigDict(extra="forbid")

    @field_validator("email")
    @classmethod
    def _lower_email(cls, value: str) -> str:
        return value.lower()


class UserRead(BaseModel):
    id: int
    name: str
    email: EmailStr
    company: str | None = None
    phone: str | None = None
    role: UserRole
    is_active: bool
    created_at: UtcDatetime
    last_login: UtcDatetime | None = None

    model_config = ConfigDict(from_attributes=True)


class AuthData(BaseModel):
    user: UserRead
    token: str


class ProfileData(BaseModel):
    user: UserRead


class TokenClaims(BaseModel):
    """Decoded access token payload."""

    user_id: int
    email: str
    role: UserRole
    exp: int
    iat: int | None = None


class UserStats(BaseModel):
    totalUsers: int
    todayUsers: int
    monthlyStats: dict[str, int]
