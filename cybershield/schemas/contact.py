"""Contact form schemas."""
from pydantic import BaseModel, ConfigDict, EmailStr, Field

from cybershield.models.contact import ContactStatus
from cybershield.schemas.common import UtcDatetime


class ContactCreate(BaseModel):
    name: str = Field(min_length=2, max_length=100)
    email: EmailStr
    message: str = Field(min_length=10, max_length=1000)
    company: str | None = Field(default=None, max_length=100)
    phone: str | None = Field(default=None, max_length=20)

    model_config = ConfigDict(extra="forbid")


class ContactCreated(BaseModel):
    id: int
    timestamp: UtcDatetime


class ContactRead(BaseModel):
    id: int
    name: str
    email: str
    message: str
    company: str | None = None
    phone: str | None = None
    status: ContactStatus
    created_at: UtcDatetime

    model_config = ConfigDict(from_attributes=True)
