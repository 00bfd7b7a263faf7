"""Contact form endpoints."""
from fastapi import APIRouter, BackgroundTasks, Depends
from sqlalchemy.orm import Session

from cybershield.db import get_db
from cybershield.schemas.common import ListResponse, SuccessResponse
from cybershield.schemas.contact import ContactCreate, ContactCreated, ContactRead
from cybershield.services.contacts import list_contacts, submit_contact
from cybershield.services.notifications import Mailer, get_mailer
from cybershield.services.rate_limit import rate_limit

router = APIRouter(prefix="/api/contact", tags=["contact"])


@router.post(
    "",
    response_model=SuccessResponse[ContactCreated],
    dependencies=[Depends(rate_limit("contact"))],
)
def create_contact(
    payload: ContactCreate,
    background_tasks: BackgroundTasks,
    db: Session = Depends(get_db),
    mailer: Mailer = Depends(get_mailer),
) -> SuccessResponse[ContactCreated]:
    """Store a contact message; the operator e-mail is sent in the background."""

    contact = submit_contact(db, payload, background_tasks=background_tasks, mailer=mailer)
    return SuccessResponse[ContactCreated](
        message="Message sent. We will get back to you soon.",
        data=ContactCreated(id=contact.id, timestamp=contact.created_at),
    )


# Public like the rest of the contact surface; see DESIGN.md.
@router.get("", response_model=ListResponse[ContactRead])
def get_contacts(db: Session = Depends(get_db)) -> ListResponse[ContactRead]:
    contacts = [ContactRead.model_validate(item) for item in list_contacts(db)]
    return ListResponse[ContactRead](data=contacts, count=len(contacts))
