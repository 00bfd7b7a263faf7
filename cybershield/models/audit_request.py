"""Free security audit request model."""
import enum

from sqlalchemy import Enum, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from .base import Base


class AuditUrgency(str, enum.Enum):
    low = "low"
    medium = "medium"
    high = "high"
    critical = "critical"


class AuditPriority(str, enum.Enum):
    normal = "normal"
    medium = "medium"
    high = "high"


class AuditStatus(str, enum.Enum):
    pending = "pending"
    in_progress = "in_progress"
    resolved = "resolved"


class AuditBudget(str, enum.Enum):
    under_1k = "under_1k"
    from_1k_to_5k = "1k_5k"
    from_5k_to_10k = "5k_10k"
    over_10k = "10k_plus"
    to_discuss = "to_discuss"


class PreferredContact(str, enum.Enum):
    email = "email"
    phone = "phone"
    both = "both"


def _str_enum(enum_cls: type[enum.Enum], name: str) -> Enum:
    return Enum(
        enum_cls,
        name=name,
        native_enum=False,
        values_callable=lambda members: [member.value for member in members],
    )


class AuditRequest(Base):
    """A prospect asking for the free security audit."""

    __tablename__ = "audit_requests"

    name: Mapped[str] = mapped_column(String(100), nullable=False)
    email: Mapped[str] = mapped_column(String(255), nullable=False)
    company: Mapped[str] = mapped_column(String(100), nullable=False)
    employees: Mapped[int] = mapped_column(Integer, nullable=False)
    industry: Mapped[str | None] = mapped_column(String(100), nullable=True)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    urgency: Mapped[AuditUrgency] = mapped_column(
        _str_enum(AuditUrgency, "auditurgency"), default=AuditUrgency.medium, nullable=False
    )
    priority: Mapped[AuditPriority] = mapped_column(
        _str_enum(AuditPriority, "auditpriority"), default=AuditPriority.normal, nullable=False
    )
    status: Mapped[AuditStatus] = mapped_column(
        _str_enum(AuditStatus, "auditstatus"), default=AuditStatus.pending, nullable=False, index=True
    )
    budget: Mapped[AuditBudget | None] = mapped_column(_str_enum(AuditBudget, "auditbudget"), nullable=True)
    phone: Mapped[str | None] = mapped_column(String(20), nullable=True)
    preferred_contact: Mapped[PreferredContact] = mapped_column(
        _str_enum(PreferredContact, "preferredcontact"), default=PreferredContact.email, nullable=False
    )
