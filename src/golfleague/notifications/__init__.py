"""Outbound player notifications."""

from .channels import SmtpEmailSender, TwilioSmsSender, normalize_phone
from .events import EventType
from .gateway import (
    DirectoryGateway,
    EmailSender,
    LoggingGateway,
    NotificationGateway,
    SmsSender,
    build_gateway,
    notify_best_effort,
)
from .messages import RenderedMessage, render_message

__all__ = [
    "DirectoryGateway",
    "EmailSender",
    "EventType",
    "LoggingGateway",
    "NotificationGateway",
    "RenderedMessage",
    "SmsSender",
    "SmtpEmailSender",
    "TwilioSmsSender",
    "build_gateway",
    "normalize_phone",
    "notify_best_effort",
    "render_message",
]
