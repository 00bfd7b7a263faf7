"""Transactional e-mail notifications.

Every notification is scheduled on FastAPI ``BackgroundTasks``: the response
is already decided by the time a message is rendered and sent, and a failed
delivery is logged and dropped.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from email.message import EmailMessage
from typing import Any

import aiosmtplib
from fastapi import BackgroundTasks, Request
from jinja2 import Environment, PackageLoader, StrictUndefined, select_autoescape

from cybershield.config import Settings, get_settings
from cybershield.utils.masking import mask_email
from cybershield.models.audit_request import AuditRequest
from cybershield.models.contact import Contact
from cybershield.models.user import User

logger = logging.getLogger(__name__)

_templates = Environment(
    loader=PackageLoader("cybershield", "templates"),
    autoescape=select_autoescape(enabled_extensions=("html",), default_for_string=False),
    undefined=StrictUndefined,
)


class NotificationError(RuntimeError):
    """Raised when a message cannot be handed to the transport."""


@dataclass(frozen=True)
class SmtpTransport:
    name: str
    hostname: str
    port: int
    username: str
    password: str


def _select_transport(settings: Settings) -> SmtpTransport | None:
    if settings.RESEND_API_KEY:
        return SmtpTransport("resend", "smtp.resend.com", 587, "resend", settings.RESEND_API_KEY)
    if settings.GMAIL_USER and settings.GMAIL_APP_PASSWORD:
        return SmtpTransport(
            "gmail", "smtp.gmail.com", 587, settings.GMAIL_USER, settings.GMAIL_APP_PASSWORD
        )
    return None


@dataclass(frozen=True)
class RenderedEmail:
    to: str
    subject: str
    html: str
    text: str


def render_email(template: str, *, to: str, subject: str, **context: Any) -> RenderedEmail:
    """Render ``emails/<template>.html`` and ``.txt`` into one message."""

    html = _templates.get_template(f"emails/{template}.html").render(**context)
    text = _templates.get_template(f"emails/{template}.txt").render(**context)
    return RenderedEmail(to=to, subject=subject, html=html, text=text.strip())


class Mailer:
    """SMTP sender configured from the Resend or Gmail credentials."""

    def __init__(self, settings: Settings | None = None) -> None:
        self.settings = settings or get_settings()
        self.transport = _select_transport(self.settings)
        self.sender = self.settings.FROM_EMAIL or self.settings.GMAIL_USER

    @property
    def enabled(self) -> bool:
        return self.transport is not None and self.sender is not None

    @property
    def admin_email(self) -> str | None:
        return self.settings.ADMIN_EMAIL

    async def send(self, email: RenderedEmail) -> None:
        if not self.enabled:
            raise NotificationError("No email transport configured")
        assert self.transport is not None and self.sender is not None

        message = EmailMessage()
        message["From"] = self.sender
        message["To"] = email.to
        message["Subject"] = email.subject
        message.set_content(email.text)
        message.add_alternative(email.html, subtype="html")

        await aiosmtplib.send(
            message,
            hostname=self.transport.hostname,
            port=self.transport.port,
            username=self.transport.username,
            password=self.transport.password,
            start_tls=True,
            timeout=self.settings.EMAIL_TIMEOUT_SECONDS,
        )


def get_mailer(request: Request) -> Mailer:
    return request.app.state.mailer


async def deliver(
    mailer: Mailer,
    kind: str,
    *,
    to: str,
    subject: str,
    context: dict[str, Any],
) -> bool:
    """Background task body: render and send one message, log the outcome, never raise."""

    if not mailer.enabled:
        logger.info("Email transport not configured; notification skipped", extra={"kind": kind})
        return False
    try:
        await mailer.send(render_email(kind, to=to, subject=subject, **context))
    except Exception:  # noqa: BLE001
        logger.exception(
            "Notification delivery failed", extra={"kind": kind, "to": mask_email(to)}
        )
        return False
    logger.info("Notification sent", extra={"kind": kind, "to": mask_email(to)})
    return True


def _schedule(
    background_tasks: BackgroundTasks,
    mailer: Mailer,
    kind: str,
    *,
    to: str,
    subject: str,
    **context: Any,
) -> None:
    background_tasks.add_task(deliver, mailer, kind, to=to, subject=subject, context=context)


def _admin_address(mailer: Mailer, kind: str) -> str | None:
    address = mailer.admin_email
    if address is None:
        logger.warning("ADMIN_EMAIL not configured; notification skipped", extra={"kind": kind})
    return address


def notify_contact(background_tasks: BackgroundTasks, mailer: Mailer, contact: Contact) -> None:
    admin = _admin_address(mailer, "contact")
    if admin is None:
        return
    _schedule(
        background_tasks,
        mailer,
        "contact",
        to=admin,
        subject=f"New contact from {contact.name} - CyberShield",
        contact=contact,
    )


def notify_welcome(background_tasks: BackgroundTasks, mailer: Mailer, user: User) -> None:
    _schedule(
        background_tasks,
        mailer,
        "welcome",
        to=user.email,
        subject="Welcome to CyberShield",
        user=user,
    )


def notify_audit_request(
    background_tasks: BackgroundTasks, mailer: Mailer, audit: AuditRequest
) -> None:
    """Queue the operator alert and the requester confirmation independently."""

    admin = _admin_address(mailer, "audit_admin")
    if admin is not None:
        _schedule(
            background_tasks,
            mailer,
            "audit_admin",
            to=admin,
            subject=f"New audit requested by {audit.name}",
            audit=audit,
        )
    _schedule(
        background_tasks,
        mailer,
        "audit_confirmation",
        to=audit.email,
        subject="Audit request received - CyberShield",
        audit=audit,
    )


__all__ = [
    "Mailer",
    "NotificationError",
    "RenderedEmail",
    "SmtpTransport",
    "deliver",
    "get_mailer",
    "notify_audit_request",
    "notify_contact",
    "notify_welcome",
    "render_email",
]
