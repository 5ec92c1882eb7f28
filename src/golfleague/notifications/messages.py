"""Email and SMS wording for each notification event."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping

from golfleague.models import PlayerRecord

from .events import EventType


SIGNATURE = "Best regards,\nGolf League Manager"


@dataclass(frozen=True)
class RenderedMessage:
    subject: str
    body: str
    sms: str


def render_message(event_type: EventType, recipient: PlayerRecord, payload: Mapping[str, Any]) -> RenderedMessage:
    week_id = payload.get("week_id", "")
    greeting = f"Hello {recipient.name},"

    if event_type is EventType.SWAP_REQUESTED:
        requester = payload.get("requester_name") or payload.get("requesting_player_id", "Another player")
        return RenderedMessage(
            subject="Golf League Swap Request",
            body=(
                f"{greeting}\n\n{requester} has requested to swap weeks with you for week {week_id}.\n\n"
                "Please log in to the Golf League Manager to accept or decline this request.\n\n"
                f"{SIGNATURE}"
            ),
            sms=f"Swap Request: {requester} wants to swap week {week_id}",
        )

    if event_type is EventType.SWAP_APPROVED:
        counterpart = payload.get("counterpart_name", "the other player")
        return RenderedMessage(
            subject="Golf League Swap Approved",
            body=(
                f"{greeting}\n\nYour swap with {counterpart} for week {week_id} has been approved.\n\n"
                "Please log in to the Golf League Manager to view your updated schedule.\n\n"
                f"{SIGNATURE}"
            ),
            sms=f"Swap Approved: Your swap with {counterpart} for week {week_id} is confirmed",
        )

    if event_type is EventType.SWAP_REJECTED:
        counterpart = payload.get("counterpart_name", "the other player")
        return RenderedMessage(
            subject="Golf League Swap Declined",
            body=(
                f"{greeting}\n\nYour swap request with {counterpart} for week {week_id} was declined.\n\n"
                "Your schedule is unchanged.\n\n"
                f"{SIGNATURE}"
            ),
            sms=f"Swap Declined: {counterpart} declined the swap for week {week_id}",
        )

    if event_type is EventType.SCHEDULE_UPDATED:
        time = payload.get("time", "")
        course = payload.get("course", "")
        return RenderedMessage(
            subject="Golf League Schedule Update",
            body=(
                f"{greeting}\n\nYour golf league schedule has been updated for week {week_id}.\n\n"
                f"Time: {time}\nCourse: {course}\n\n"
                "Please log in to the Golf League Manager to view your updated schedule.\n\n"
                f"{SIGNATURE}"
            ),
            sms=f"Golf League Update: Week {week_id} - Time: {time}, Course: {course}",
        )

    raise ValueError(f"Unsupported event type: {event_type}")
