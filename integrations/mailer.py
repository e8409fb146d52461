"""
SMTP delivery of rendered reports.
"""
import smtplib
from email.message import EmailMessage
from typing import Optional

from core.config import get_settings
from core.exceptions import DeliveryError
from core.logger import setup_logger
from core.schema import EmailCredentials

logger = setup_logger(__name__)

# Plain-text login is only allowed against these hosts
LOCAL_HOSTS = {"localhost", "127.0.0.1", "::1"}


def build_message(
    sender: str,
    recipient: str,
    subject: str,
    html_body: str,
    text_body: Optional[str] = None,
) -> EmailMessage:
    """Build a MIME message with an optional plain-text part and an HTML part."""
    message = EmailMessage()
    message["Subject"] = subject
    message["From"] = sender
    message["To"] = recipient
    if text_body is not None:
        message.set_content(text_body)
        message.add_alternative(html_body, subtype="html")
    else:
        message.set_content(html_body, subtype="html")
    return message


class SmtpMailer:
    """Sends messages through an authenticated SMTP submission port."""

    def __init__(self, port: Optional[int] = None, timeout: Optional[int] = None):
        settings = get_settings()
        self.port = port or settings.smtp_port
        self.timeout = timeout or settings.smtp_timeout

    def send(
        self,
        credentials: EmailCredentials,
        recipient: str,
        subject: str,
        html_body: str,
        text_body: Optional[str] = None,
    ) -> None:
        """
        Deliver one report.

        Not retried: a failed send is reported to the caller as-is.

        Raises:
            DeliveryError: On any SMTP or connection failure
        """
        message = build_message(credentials.username, recipient, subject, html_body, text_body)
        logger.info(f"Sending '{subject}' to {recipient} via {credentials.host}:{self.port}")
        try:
            with smtplib.SMTP(credentials.host, self.port, timeout=self.timeout) as smtp:
                smtp.ehlo()
                if smtp.has_extn("starttls"):
                    smtp.starttls()
                    smtp.ehlo()
                elif credentials.host not in LOCAL_HOSTS:
                    raise DeliveryError(
                        f"{credentials.host} does not offer STARTTLS; refusing to send credentials in cleartext",
                        details={"host": credentials.host, "port": self.port}
                    )
                smtp.login(credentials.username, credentials.password)
                smtp.send_message(message)
        except (smtplib.SMTPException, OSError) as e:
            logger.error(f"SMTP delivery to {recipient} failed: {e}")
            raise DeliveryError(
                f"Failed to deliver report to {recipient}",
                details={"host": credentials.host, "port": self.port, "error": str(e)}
            )
        logger.info(f"Delivered report to {recipient}")
