"""Contact form intake."""
import logging

from fastapi import BackgroundTasks
from sqlalchemy import select
from sqlalchemy.orm import Session

from cybershield.models.contact import Contact, ContactStatus
from cybershield.schemas.contact import ContactCreate
from cybershield.services.notifications import Mailer, notify_contact
from cybershield.services.persistence import commit_or_fail, read_or_fail
from cybershield.utils.time import utcnow

logger = logging.getLogger(__name__)

CONTACT_LIST_LIMIT = 50


def submit_contact(
    db: Session,
    payload: ContactCreate,
    *,
    background_tasks: BackgroundTasks,
    mailer: Mailer,
) -> Contact:
    """Persist a contact message and queue the operator notification."""

    contact = Contact(
        **payload.model_dump(),
        status=ContactStatus.pending,
        created_at=utcnow(),
    )
    db.add(contact)
    commit_or_fail(
        db,
        action="submit_contact",
        message="Internal server error. Please try again later.",
    )
    logger.info("Contact message stored", extra={"contact_id": contact.id})
    notify_contact(background_tasks, mailer, contact)
    return contact


def list_contacts(db: Session, limit: int = CONTACT_LIST_LIMIT) -> list[Contact]:
    stmt = select(Contact).order_by(Contact.created_at.desc(), Contact.id.desc()).limit(limit)
    with read_or_fail(db, action="list_contacts"):
        return list(db.scalars(stmt).all())
