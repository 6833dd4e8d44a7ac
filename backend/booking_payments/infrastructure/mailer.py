"""
Mail transport for booking notifications.

Outside development mail goes through Mailgun's SMTP relay; in development it
is captured by Mailtrap so nothing reaches real inboxes.
"""

import asyncio
import smtplib
from abc import ABC, abstractmethod
from dataclasses import dataclass
from email.message import EmailMessage
from typing import Sequence

from booking_payments.core.config import Settings
from booking_payments.core.metrics import track_external_call


class Mailer(ABC):
    @abstractmethod
    async def send(
        self,
        to: str,
        from_addr: str,
        subject: str,
        html: str,
        cc: Sequence[str] = (),
    ) -> None:
        pass


@dataclass
class SmtpConfig:
    host: str
    port: int
    username: str = ""
    password: str = ""
    timeout: int = 10

    @classmethod
    def from_settings(cls, settings: Settings) -> "SmtpConfig":
        if settings.is_development:
            return cls(
                host=settings.MAILTRAP_SMTP_HOST,
                port=settings.MAILTRAP_SMTP_PORT,
                username=settings.MAILTRAP_USER,
                password=settings.MAILTRAP_PASSWORD,
                timeout=settings.SMTP_TIMEOUT_SECONDS,
            )
        return cls(
            host=settings.MAILGUN_SMTP_HOST,
            port=settings.MAILGUN_SMTP_PORT,
            username=settings.MAILGUN_USER,
            password=settings.MAILGUN_PASSWORD,
            timeout=settings.SMTP_TIMEOUT_SECONDS,
        )


class SmtpMailer(Mailer):
    def __init__(self, config: SmtpConfig):
        self.config = config

    async def send(
        self,
        to: str,
        from_addr: str,
        subject: str,
        html: str,
        cc: Sequence[str] = (),
    ) -> None:
        msg = EmailMessage()
        msg["From"] = from_addr
        msg["To"] = to
        if cc:
            msg["Cc"] = ", ".join(cc)
        msg["Subject"] = subject
        msg.set_content("This message requires an HTML capable mail client.")
        msg.add_alternative(html, subtype="html")

        with track_external_call("smtp"):
            await asyncio.to_thread(self._deliver, msg)

    def _deliver(self, msg: EmailMessage) -> None:
        with smtplib.SMTP(self.config.host, self.config.port, timeout=self.config.timeout) as smtp:
            smtp.ehlo()
            if smtp.has_extn("starttls"):
                smtp.starttls()
                smtp.ehlo()
            if self.config.username:
                smtp.login(self.config.username, self.config.password)
            smtp.send_message(msg)
