"""Mailer tests — message templates and never-raising delivery."""

import smtplib

from peoplehub.config import settings
from peoplehub.services.mailer import (
    MailMessage,
    Mailer,
    invitation_message,
    password_reset_message,
)


def test_password_reset_message_links_to_frontend():
    message = password_reset_message("ann@acme.test", "abc123")
    assert message.to == "ann@acme.test"
    assert f"{settings.frontend_base}/reset-password/abc123" in message.body


def test_invitation_message_names_company():
    message = invitation_message("boss@acme.test", "Acme", "def456")
    assert "Acme" in message.body
    assert f"{settings.frontend_base}/accept-invitation/def456" in message.body


def test_send_without_smtp_host_is_skipped(monkeypatch):
    def explode(*args, **kwargs):
        raise AssertionError("SMTP must not be contacted")

    monkeypatch.setattr(smtplib, "SMTP", explode)
    assert Mailer(smtp_host="").deliver(MailMessage("a@b.test", "Hi", "Body")) is True


def test_delivery_failure_is_swallowed_and_reported(monkeypatch):
    def refuse(*args, **kwargs):
        raise ConnectionRefusedError("smtp down")

    monkeypatch.setattr(smtplib, "SMTP", refuse)
    mailer = Mailer(smtp_host="smtp.invalid")
    assert mailer.deliver(MailMessage("a@b.test", "Hi", "Body")) is False


def test_send_speaks_smtp(monkeypatch):
    sent = []

    class FakeSMTP:
        def __init__(self, host, port):
            self.host, self.port = host, port

        def __enter__(self):
            return self

        def __exit__(self, *exc):
            return False

        def starttls(self):
            sent.append("starttls")

        def login(self, username, password):
            sent.append(("login", username))

        def sendmail(self, from_addr, to_addrs, body):
            sent.append(("sendmail", from_addr, tuple(to_addrs)))

    monkeypatch.setattr(smtplib, "SMTP", FakeSMTP)
    mailer = Mailer(
        smtp_host="smtp.test",
        username="mailer",
        password="secret",
        from_addr="no-reply@peoplehub.test",
    )
    mailer.send(MailMessage("ann@acme.test", "Hi", "Body"))
    assert sent == [
        "starttls",
        ("login", "mailer"),
        ("sendmail", "no-reply@peoplehub.test", ("ann@acme.test",)),
    ]
