"""Email (SMTP) and SMS (Twilio REST) delivery channels."""

from __future__ import annotations

import logging
import re
import smtplib
from email.message import EmailMessage
from typing import Optional

import httpx
from anyio import to_thread


logger = logging.getLogger(__name__)

TWILIO_API_BASE = "https://api.twilio.com/2010-04-01"


def normalize_phone(phone: Optional[str]) -> Optional[str]:
    """Normalize a phone number to E.164.

    Ten-digit numbers (optionally prefixed with 1) are treated as US numbers;
    numbers already written with a leading ``+`` keep their country code.
    Raises ``ValueError`` when the number cannot be normalized.
    """
    if not phone:
        return None
    stripped = phone.strip()
    digits = re.sub(r"\D", "", stripped)
    if stripped.startswith("+") and 8 <= len(digits) <= 15:
        return f"+{digits}"
    if digits.startswith("1") and len(digits) == 11:
        digits = digits[1:]
    if len(digits) != 10:
        raise ValueError(f"Phone number must be 10 digits for US numbers: {phone}")
    return f"+1{digits}"


class SmtpEmailSender:
    def __init__(
        self,
        host: str,
        port: int,
        from_address: str,
        *,
        username: Optional[str] = None,
        password: Optional[str] = None,
        timeout: float = 10.0,
    ):
        self.host = host
        self.port = port
        self.from_address = from_address
        self.username = username
        self.password = password
        self.timeout = timeout

    def _build(self, to_address: str, subject: str, body: str) -> EmailMessage:
        message = EmailMessage()
        message["From"] = self.from_address
        message["To"] = to_address
        message["Subject"] = subject
        message.set_content(body)
        return message

    def _send_sync(self, message: EmailMessage) -> None:
        if self.port == 465:
            with smtplib.SMTP_SSL(self.host, self.port, timeout=self.timeout) as smtp:
                if self.username and self.password:
                    smtp.login(self.username, self.password)
                smtp.send_message(message)
            return
        with smtplib.SMTP(self.host, self.port, timeout=self.timeout) as smtp:
            smtp.ehlo()
            if smtp.has_extn("starttls"):
                smtp.starttls()
                smtp.ehlo()
            if self.username and self.password:
                smtp.login(self.username, self.password)
            smtp.send_message(message)

    async def send(self, to_address: str, subject: str, body: str) -> None:
        message = self._build(to_address, subject, body)
        await to_thread.run_sync(self._send_sync, message)
        logger.info("Email '%s' sent to %s", subject, to_address)


class TwilioSmsSender:
    def __init__(
        self,
        account_sid: str,
        auth_token: str,
        from_number: str,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
        timeout: float = 10.0,
    ):
        self.account_sid = account_sid
        self.auth_token = auth_token
        self.from_number = from_number
        self._transport = transport
        self.timeout = timeout

    async def send(self, to_phone: str, body: str) -> str:
        url = f"{TWILIO_API_BASE}/Accounts/{self.account_sid}/Messages.json"
        async with httpx.AsyncClient(transport=self._transport, timeout=self.timeout) as client:
            response = await client.post(
                url,
                auth=(self.account_sid, self.auth_token),
                data={"To": to_phone, "From": self.from_number, "Body": body},
            )
        response.raise_for_status()
        message_sid = response.json().get("sid", "")
        logger.info("SMS %s sent to %s", message_sid, to_phone)
        return message_sid
