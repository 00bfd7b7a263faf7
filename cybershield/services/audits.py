"""Free audit request intake and lookup."""
import logging

from fastapi import BackgroundTasks
from sqlalchemy import select
from sqlalchemy.orm import Session

from cybershield.models.audit_request import AuditPriority, AuditRequest, AuditStatus, AuditUrgency
from cybershield.schemas.audit import AuditRequestCreate
from cybershield.services.notifications import Mailer, notify_audit_request
from cybershield.services.persistence import commit_or_fail, read_or_fail
from cybershield.utils.errors import NotFound
from cybershield.utils.time import utcnow

logger = logging.getLogger(__name__)

AUDIT_LIST_LIMIT = 100
# Largest signed 64-bit integer.
MAX_AUDIT_ID = 2**63 - 1

_PRIORITY_BY_URGENCY = {
    AuditUrgency.critical: AuditPriority.high,
    AuditUrgency.high: AuditPriority.medium,
}


def priority_for_urgency(urgency: AuditUrgency | str) -> AuditPriority:
    """critical -> high, high -> medium, anything else -> normal."""

    try:
        key = AuditUrgency(urgency)
    except ValueError:
        return AuditPriority.normal
    return _PRIORITY_BY_URGENCY.get(key, AuditPriority.normal)


def submit_audit_request(
    db: Session,
    payload: AuditRequestCreate,
    *,
    background_tasks: BackgroundTasks,
    mailer: Mailer,
) -> AuditRequest:
    audit = AuditRequest(
        **payload.model_dump(),
        priority=priority_for_urgency(payload.urgency),
        status=AuditStatus.pending,
        created_at=utcnow(),
    )
    db.add(audit)
    commit_or_fail(db, action="submit_audit_request")
    logger.info(
        "Audit request stored",
        extra={"audit_id": audit.id, "urgency": audit.urgency.value, "priority": audit.priority.value},
    )
    notify_audit_request(background_tasks, mailer, audit)
    return audit


def list_audit_requests(db: Session, limit: int = AUDIT_LIST_LIMIT) -> list[AuditRequest]:
    stmt = (
        select(AuditRequest)
        .order_by(AuditRequest.created_at.desc(), AuditRequest.id.desc())
        .limit(limit)
    )
    with read_or_fail(db, action="list_audit_requests"):
        return list(db.scalars(stmt).all())


def _parse_audit_id(raw: int | str) -> int | None:
    try:
        value = int(raw)
    except (TypeError, ValueError):
        return None
    if not 0 < value <= MAX_AUDIT_ID:
        return None
    return value


def get_audit_request(db: Session, audit_id: int | str) -> AuditRequest:
    """Look up one request; ids that cannot exist are reported as not found."""

    key = _parse_audit_id(audit_id)
    if key is None:
        raise NotFound("Request not found.")
    with read_or_fail(db, action="get_audit_request"):
        audit = db.get(AuditRequest, key)
    if audit is None:
        raise NotFound("Request not found.")
    return audit
