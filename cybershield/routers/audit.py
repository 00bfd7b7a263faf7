"""Free audit request endpoints."""
from fastapi import APIRouter, BackgroundTasks, Depends, status
from sqlalchemy.orm import Session

from cybershield.db import get_db
from cybershield.schemas.audit import (
    AuditRequestCreate,
    AuditRequestCreated,
    AuditRequestRead,
    AuditStatusRead,
)
from cybershield.schemas.common import ListResponse, SuccessResponse
from cybershield.security import require_user
from cybershield.services.audits import get_audit_request, list_audit_requests, submit_audit_request
from cybershield.services.notifications import Mailer, get_mailer
from cybershield.services.rate_limit import rate_limit

router = APIRouter(prefix="/api/audit", tags=["audit"])


@router.post(
    "/request",
    response_model=SuccessResponse[AuditRequestCreated],
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(rate_limit("audit"))],
)
def request_audit(
    payload: AuditRequestCreate,
    background_tasks: BackgroundTasks,
    db: Session = Depends(get_db),
    mailer: Mailer = Depends(get_mailer),
) -> SuccessResponse[AuditRequestCreated]:
    audit = submit_audit_request(db, payload, background_tasks=background_tasks, mailer=mailer)
    return SuccessResponse[AuditRequestCreated](
        message="Audit request received. We will contact you within 24 hours.",
        data=AuditRequestCreated(id=audit.id, status=audit.status, created_at=audit.created_at),
    )


@router.get(
    "/requests",
    response_model=ListResponse[AuditRequestRead],
    dependencies=[Depends(require_user)],
)
def get_audit_requests(db: Session = Depends(get_db)) -> ListResponse[AuditRequestRead]:
    """Latest audit requests for any authenticated user."""

    items = [AuditRequestRead.model_validate(item) for item in list_audit_requests(db)]
    return ListResponse[AuditRequestRead](data=items, count=len(items))


@router.get("/status/{audit_id}", response_model=SuccessResponse[AuditStatusRead])
def get_audit_status(audit_id: str, db: Session = Depends(get_db)) -> SuccessResponse[AuditStatusRead]:
    audit = get_audit_request(db, audit_id)
    return SuccessResponse[AuditStatusRead](data=AuditStatusRead.model_validate(audit))
