"""Notification gateways: resolve a recipient and deliver over email and SMS."""

from __future__ import annotations

import logging
from typing import Any, Mapping, Optional, Protocol, runtime_checkable

from golfleague.config import LeagueSettings
from golfleague.errors import NotFoundError
from golfleague.persistence import PlayerDirectory

from .channels import SmtpEmailSender, TwilioSmsSender, normalize_phone
from .events import EventType
from .messages import render_message


logger = logging.getLogger(__name__)


@runtime_checkable
class NotificationGateway(Protocol):
    async def notify(self, event_type: EventType, payload: Mapping[str, Any]) -> Any:
        """Deliver one event; ``payload["recipient_id"]`` names the addressee."""
        ...


@runtime_checkable
class EmailSender(Protocol):
    async def send(self, to_address: str, subject: str, body: str) -> Any: ...


@runtime_checkable
class SmsSender(Protocol):
    async def send(self, to_phone: str, body: str) -> Any: ...


class LoggingGateway:
    """Gateway used when no delivery channel is configured."""

    async def notify(self, event_type: EventType, payload: Mapping[str, Any]) -> None:
        logger.info(
            "Notification %s for %s (week %s, swap %s)",
            event_type.value,
            payload.get("recipient_id"),
            payload.get("week_id"),
            payload.get("swap_id"),
        )


class DirectoryGateway:
    """Looks the recipient up in the roster and sends on every channel it has.

    Channels are independent: an email failure does not stop the SMS and vice
    versa. Failures are reported in the returned dict and logged.
    """

    def __init__(
        self,
        directory: PlayerDirectory,
        *,
        email_sender: Optional[EmailSender] = None,
        sms_sender: Optional[SmsSender] = None,
    ):
        self.directory = directory
        self.email_sender = email_sender
        self.sms_sender = sms_sender

    async def notify(self, event_type: EventType, payload: Mapping[str, Any]) -> dict[str, Any]:
        recipient_id = payload.get("recipient_id")
        recipient = self.directory.get(recipient_id) if recipient_id else None
        if recipient is None:
            raise NotFoundError(f"Notification recipient not found: {recipient_id}")

        message = render_message(event_type, recipient, payload)
        result: dict[str, Any] = {"email_sent": False, "sms_sent": False, "email_error": None, "sms_error": None}

        if self.email_sender is not None and recipient.email:
            try:
                await self.email_sender.send(recipient.email, message.subject, message.body)
                result["email_sent"] = True
            except Exception as exc:
                result["email_error"] = str(exc)
                logger.error("Failed to send %s email to %s: %s", event_type.value, recipient.email, exc)

        if self.sms_sender is not None and recipient.phone_number:
            try:
                phone = normalize_phone(recipient.phone_number)
            except ValueError as exc:
                result["sms_error"] = str(exc)
                logger.warning("Invalid phone number for %s: %s", recipient.player_id, recipient.phone_number)
            else:
                try:
                    await self.sms_sender.send(phone, message.sms)
                    result["sms_sent"] = True
                except Exception as exc:
                    result["sms_error"] = str(exc)
                    logger.error("Failed to send %s SMS to %s: %s", event_type.value, phone, exc)

        return result


async def notify_best_effort(
    gateway: NotificationGateway, event_type: EventType, payload: Mapping[str, Any]
) -> bool:
    """Send one event, logging instead of raising when delivery fails."""
    try:
        await gateway.notify(event_type, payload)
    except Exception:
        logger.exception(
            "Notification %s to %s failed (week %s, swap %s)",
            event_type.value,
            payload.get("recipient_id"),
            payload.get("week_id"),
            payload.get("swap_id"),
        )
        return False
    return True


def build_gateway(settings: LeagueSettings, directory: PlayerDirectory) -> NotificationGateway:
    email_sender = None
    sms_sender = None
    if settings.email_enabled:
        email_sender = SmtpEmailSender(
            settings.smtp_host or "",
            settings.smtp_port,
            settings.email_from or "",
            username=settings.smtp_username,
            password=settings.smtp_password,
        )
    if settings.sms_enabled:
        sms_sender = TwilioSmsSender(
            settings.twilio_account_sid or "",
            settings.twilio_auth_token or "",
            settings.twilio_from_number or "",
        )
    if email_sender is None and sms_sender is None:
        logger.info("No email or SMS channel configured; notifications will only be logged")
        return LoggingGateway()
    return DirectoryGateway(directory, email_sender=email_sender, sms_sender=sms_sender)
