"""Audit request schemas."""
from pydantic import BaseModel, ConfigDict, EmailStr, Field

from cybershield.models.audit_request import (
    AuditBudget,
    AuditPriority,
    AuditStatus,
    AuditUrgency,
    PreferredContact,
)
from cybershield.schemas.common import UtcDatetime


class AuditRequestCreate(BaseModel):
    name: str = Field(min_length=2, max_length=100)
    email: EmailStr
    company: str = Field(min_length=2, max_length=100)
    employees: int = Field(ge=1, le=10000)
    industry: str | None = Field(default=None, max_length=100)
    description: str = Field(min_length=20, max_length=2000)
    urgency: AuditUrgency = AuditUrgency.medium
    budget: AuditBudget | None = None
    phone: str | None = Field(default=None, max_length=20)
    preferred_contact: PreferredContact = PreferredContact.email

    model_config = ConfigDict(extra="forbid")


class AuditRequestCreated(BaseModel):
    id: int
    status: AuditStatus
    created_at: UtcDatetime


class AuditRequestRead(BaseModel):
    id: int
    name: str
    email: str
    company: str
    employees: int
    industry: str | None = None
    description: str
    urgency: AuditUrgency
    priority: AuditPriority
    status: AuditStatus
    budget: AuditBudget | None = None
    phone: str | None = None
    preferred_contact: PreferredContact
    created_at: UtcDatetime

    model_config = ConfigDict(from_attributes=True)


class AuditStatusRead(BaseModel):
    id: int
    status: AuditStatus
    created_at: UtcDatetime
    company: str
    urgency: AuditUrgency

    model_config = ConfigDict(from_attributes=True)
