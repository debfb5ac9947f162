# hotel_api/services/mailer.py
import logging
from dataclasses import dataclass
from email.message import EmailMessage
from typing import Optional, Sequence

import aiosmtplib

from hotel_api.core.config import Settings, get_settings

logger = logging.getLogger("uvicorn.error")


@dataclass(frozen=True)
class Attachment:
    filename: str
    content: bytes
    mime_type: str = "application/pdf"


class Mailer:
    """
    Outbound mail interface. send() raises on failure; callers decide
    whether a failure matters.
    """

    async def send(
        self,
        to: str,
        subject: str,
        html: str,
        attachments: Optional[Sequence[Attachment]] = None,
    ) -> None:
        raise NotImplementedError


class SMTPMailer(Mailer):
    def __init__(self, settings: Settings):
        self.settings = settings

    def build_message(
        self,
        to: str,
        subject: str,
        html: str,
        attachments: Optional[Sequence[Attachment]] = None,
    ) -> EmailMessage:
        msg = EmailMessage()
        msg["From"] = f'"{self.settings.EMAIL_FROM_NAME}" <{self.settings.EMAIL_USER}>'
        msg["To"] = to
        msg["Subject"] = subject
        msg.set_content("This message requires an HTML capable mail client.")
        msg.add_alternative(html, subtype="html")
        for att in attachments or []:
            maintype, _, subtype = att.mime_type.partition("/")
            msg.add_attachment(
                att.content,
                maintype=maintype,
                subtype=subtype or "octet-stream",
                filename=att.filename,
            )
        return msg

    async def send(
        self,
        to: str,
        subject: str,
        html: str,
        attachments: Optional[Sequence[Attachment]] = None,
    ) -> None:
        msg = self.build_message(to, subject, html, attachments)
        await aiosmtplib.send(
            msg,
            hostname=self.settings.EMAIL_HOST,
            port=self.settings.EMAIL_PORT,
            username=self.settings.EMAIL_USER or None,
            password=self.settings.EMAIL_PASS or None,
            start_tls=True,
            timeout=self.settings.MAIL_TIMEOUT_SECONDS,
        )
        logger.info("email sent to %s (%s)", to, subject)


_mailer: Mailer | None = None


def get_mailer() -> Mailer:
    """
    FastAPI dependency; tests override it with a fake.
    """
    global _mailer
    if _mailer is None:
        _mailer = SMTPMailer(get_settings())
    return _mailer
