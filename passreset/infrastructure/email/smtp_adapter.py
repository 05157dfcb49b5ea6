"""
SMTP delivery through aiosmtplib.

Defaults match a typical submission server with implicit TLS on port 465;
set `start_tls` (and usually port 587) for servers that upgrade in-band.
"""

from __future__ import annotations

import logging
from email.message import EmailMessage
from email.utils import formataddr

import aiosmtplib

from passreset.domain.errors import DeliveryFailed
from passreset.domain.ports.email_port import EmailPort

logger = logging.getLogger(__name__)


class SmtpEmailAdapter(EmailPort):
    def __init__(
        self,
        *,
        hostname: str,
        port: int = 465,
        username: str | None = None,
        password: str | None = None,
        use_tls: bool = True,
        start_tls: bool = False,
        from_address: str,
        from_name: str | None = None,
        timeout: float = 10.0,
    ) -> None:
        if use_tls and start_tls:
            raise ValueError("use_tls and start_tls are mutually exclusive")
        self._hostname = hostname
        self._port = port
        self._username = username
        self._password = password
        self._use_tls = use_tls
        self._start_tls = start_tls
        self._sender = formataddr((from_name, from_address)) if from_name else from_address
        self._timeout = timeout

    def build_message(
        self, *, to: str, subject: str, body: str, html_body: str | None = None
    ) -> EmailMessage:
        msg = EmailMessage()
        msg["Subject"] = subject
        msg["From"] = self._sender
        msg["To"] = to
        msg.set_content(body)
        if html_body is not None:
            msg.add_alternative(html_body, subtype="html")
        return msg

    async def send(
        self,
        *,
        to: str,
        subject: str,
        body: str,
        html_body: str | None = None,
    ) -> None:
        msg = self.build_message(to=to, subject=subject, body=body, html_body=html_body)

        try:
            await aiosmtplib.send(
                msg,
                hostname=self._hostname,
                port=self._port,
                username=self._username,
                password=self._password,
                use_tls=self._use_tls,
                start_tls=self._start_tls,
                timeout=self._timeout,
            )
        except (aiosmtplib.SMTPException, OSError) as e:
            raise DeliveryFailed(f"SMTP error: {e}") from e
        logger.info("email sent", extra={"to": to, "smtp_host": self._hostname})

    async def aclose(self) -> None:
        # aiosmtplib.send opens and closes its own connection per message
        return None
