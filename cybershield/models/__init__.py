"""ORM models package."""
from .audit_request import (
    AuditBudget,
    AuditPriority,
    AuditRequest,
    AuditStatus,
    AuditUrgency,
    PreferredContact,
)
from .base import Base
from .contact import Contact, ContactStatus
from .user import User, UserRole

__all__ = [
    "AuditBudget",
    "AuditPriority",
    "AuditRequest",
    "AuditStatus",
    "AuditUrgency",
    "Base",
    "Contact",
    "ContactStatus",
    "PreferredContact",
    "User",
    "UserRole",
]
