"""Outgoing mail — the notification collaborator of the token workflows.

Learn: Delivery is fire-and-forget relative to the HTTP response. Routes
hand a MailMessage to FastAPI BackgroundTasks, which calls deliver()
after the response is sent. By then the token is already committed, so
a delivery failure is logged and nothing is rolled back or retried.

With no PEOPLEHUB_SMTP_HOST configured (local dev, tests) messages are
logged as skipped instead of sent. Bodies are never logged: they carry
redemption links.
"""

import smtplib
from dataclasses import dataclass
from email.mime.text import MIMEText

import structlog

from peoplehub.config import settings

logger = structlog.get_logger()


@dataclass(frozen=True)
class MailMessage:
    to: str
    subject: str
    body: str


class Mailer:
    """Send plain-text mail over SMTP."""

    def __init__(
        self,
        smtp_host: str,
        smtp_port: int = 587,
        username: str | None = None,
        password: str | None = None,
        from_addr: str = "no-reply@peoplehub.local",
        use_tls: bool = True,
    ):
        self.smtp_host = smtp_host
        self.smtp_port = smtp_port
        self.username = username
        self.password = password
        self.from_addr = from_addr
        self.use_tls = use_tls

    @classmethod
    def from_settings(cls) -> "Mailer":
        return cls(
            smtp_host=settings.smtp_host,
            smtp_port=settings.smtp_port,
            username=settings.smtp_username or None,
            password=settings.smtp_password or None,
            from_addr=settings.mail_from,
            use_tls=settings.smtp_use_tls,
        )

    def send(self, message: MailMessage) -> None:
        """Send one message. Raises on SMTP failure."""
        if not self.smtp_host:
            logger.info("mail.skipped", to=message.to, subject=message.subject)
            return

        msg = MIMEText(message.body, "plain")
        msg["Subject"] = message.subject
        msg["From"] = self.from_addr
        msg["To"] = message.to

        with smtplib.SMTP(self.smtp_host, self.smtp_port) as server:
            if self.use_tls:
                server.starttls()
            if self.username and self.password:
                server.login(self.username, self.password)
            server.sendmail(self.from_addr, [message.to], msg.as_string())

        logger.info("mail.sent", to=message.to, subject=message.subject)

    def deliver(self, message: MailMessage) -> bool:
        """Background-task entry point: send, log any failure, never raise."""
        try:
            self.send(message)
            return True
        except Exception:
            logger.exception(
                "mail.delivery_failed", to=message.to, subject=message.subject
            )
            return False


def get_mailer() -> Mailer:
    """FastAPI dependency — overridden in tests with a recording fake."""
    return Mailer.from_settings()


# ─── Message templates ──────────────────────────────────


def password_reset_message(email: str, token: str) -> MailMessage:
    reset_url = f"{settings.frontend_base}/reset-password/{token}"
    return MailMessage(
        to=email,
        subject="Password Reset Request",
        body=(
            "You requested a password reset. "
            f"Click the link to reset: {reset_url}\n\n"
            f"The link expires in {settings.reset_token_expire_minutes} minutes."
        ),
    )


def invitation_message(email: str, company_name: str, token: str) -> MailMessage:
    invitation_url = f"{settings.frontend_base}/accept-invitation/{token}"
    return MailMessage(
        to=email,
        subject="Company Invitation",
        body=(
            f"You've been invited to join {company_name} as an admin. "
            f"Click the link to accept: {invitation_url}\n\n"
            f"The invitation expires in {settings.invitation_expire_hours} hours."
        ),
    )
