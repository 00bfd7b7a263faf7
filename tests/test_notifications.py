"""E-mail rendering, transport selection and best-effort delivery."""
import logging

import pytest

from cybershield.config import Settings
from cybershield.models.audit_request import AuditPriority, AuditRequest, AuditUrgency, PreferredContact
from cybershield.models.contact import Contact
from cybershield.services import notifications
from cybershield.services.notifications import Mailer, NotificationError, deliver, render_email


class _FakeUser:
    name = "Ana"
    email = "a@x.com"


def _settings(**overrides) -> Settings:
    base = {
        "JWT_SECRET": "x",
        "RESEND_API_KEY": None,
        "GMAIL_USER": None,
        "GMAIL_APP_PASSWORD": None,
        "FROM_EMAIL": None,
        "ADMIN_EMAIL": None,
    }
    base.update(overrides)
    return Settings(_env_file=None, **base)


def test_contact_template_escapes_html():
    contact = Contact(name="<script>alert(1)</script>", email="a@x.com", message="hello <b>there</b>")
    email = render_email("contact", to="ops@example.com", subject="s", contact=contact)

    assert "<script>" not in email.html
    assert "&lt;script&gt;" in email.html
    assert "hello <b>there</b>" in email.text


def test_audit_templates_render_enum_values():
    audit = AuditRequest(
        id=42,
        name="Carlos",
        email="carlos@example.com",
        company="Ruiz",
        employees=10,
        description="Long enough description of the problem",
        urgency=AuditUrgency.critical,
        priority=AuditPriority.high,
        preferred_contact=PreferredContact.phone,
        phone="+34 600 000 000",
    )
    admin = render_email("audit_admin", to="ops@example.com", subject="s", audit=audit)
    confirmation = render_email("audit_confirmation", to=audit.email, subject="s", audit=audit)

    assert "critical" in admin.text
    assert "+34 600 000 000" in admin.html
    assert "#42" in confirmation.text


def test_transport_prefers_resend():
    mailer = Mailer(
        _settings(RESEND_API_KEY="re_123", GMAIL_USER="me@gmail.com", GMAIL_APP_PASSWORD="pw", FROM_EMAIL="no-reply@example.com")
    )
    assert mailer.enabled
    assert mailer.transport.name == "resend"
    assert mailer.transport.hostname == "smtp.resend.com"
    assert mailer.sender == "no-reply@example.com"


def test_transport_falls_back_to_gmail():
    mailer = Mailer(_settings(GMAIL_USER="me@gmail.com", GMAIL_APP_PASSWORD="pw"))
    assert mailer.transport.name == "gmail"
    assert mailer.sender == "me@gmail.com"


def test_no_transport_disables_mailer():
    assert Mailer(_settings()).enabled is False


@pytest.mark.anyio("asyncio")
async def test_send_without_transport_raises():
    mailer = Mailer(_settings())
    with pytest.raises(NotificationError):
        await mailer.send(render_email("welcome", to="a@x.com", subject="s", user=_FakeUser()))


@pytest.mark.anyio("asyncio")
async def test_send_uses_starttls(monkeypatch):
    calls = []

    async def _fake_send(message, **kwargs):
        calls.append((message, kwargs))

    monkeypatch.setattr(notifications.aiosmtplib, "send", _fake_send)
    mailer = Mailer(_settings(RESEND_API_KEY="re_123", FROM_EMAIL="no-reply@example.com"))

    await mailer.send(render_email("welcome", to="a@x.com", subject="Welcome", user=_FakeUser()))

    message, kwargs = calls[0]
    assert message["To"] == "a@x.com"
    assert message["From"] == "no-reply@example.com"
    assert kwargs["start_tls"] is True
    assert kwargs["username"] == "resend"
    assert kwargs["port"] == 587


@pytest.mark.anyio("asyncio")
async def test_deliver_logs_and_swallows_failures(caplog):
    class Broken:
        enabled = True

        async def send(self, email):
            raise TimeoutError("smtp timeout")

    with caplog.at_level(logging.ERROR, logger="cybershield.services.notifications"):
        ok = await deliver(
            Broken(), "welcome", to="a@x.com", subject="Welcome", context={"user": _FakeUser()}
        )

    assert ok is False
    assert "Notification delivery failed" in caplog.text


@pytest.mark.anyio("asyncio")
async def test_deliver_skips_when_disabled():
    ok = await deliver(
        Mailer(_settings()), "welcome", to="a@x.com", subject="Welcome", context={"user": _FakeUser()}
    )
    assert ok is False
