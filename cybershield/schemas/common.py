"""Response envelopes shared by every endpoint."""
from datetime import datetime
from typing import Annotated, Generic, TypeVar

from pydantic import AfterValidator, BaseModel

from cybershield.utils.time import ensure_utc

T = TypeVar("T")

# SQLite hands timestamps back without an offset.
UtcDatetime = Annotated[datetime, AfterValidator(ensure_utc)]


class SuccessResponse(BaseModel, Generic[T]):
    success: bool = True
    message: str | None = None
    data: T


class ListResponse(BaseModel, Generic[T]):
    success: bool = True
    data: list[T]
    count: int
