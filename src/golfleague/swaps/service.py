"""Swap request lifecycle: create, approve and reject week swaps."""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Callable, List, Optional

from golfleague.errors import ConflictError, DependencyFailure, InvalidStateError, NotFoundError, ValidationError
from golfleague.models import PlayerRecord, SwapMode, SwapRequest, SwapStatus
from golfleague.notifications import EventType, NotificationGateway, notify_best_effort
from golfleague.persistence import PlayerDirectory, Reassignment, ScheduleStore, SwapRequestLedger


logger = logging.getLogger("uvicorn.error")

# Older clients send ACCEPTED for an approval.
_DECISION_ALIASES = {"ACCEPTED": SwapStatus.APPROVED}


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _clean(value: object) -> str:
    return value.strip() if isinstance(value, str) else ""


def coerce_decision(decision: SwapStatus | str) -> SwapStatus:
    if isinstance(decision, SwapStatus):
        status = decision
    else:
        raw = _clean(decision).upper()
        status = _DECISION_ALIASES.get(raw) or next((s for s in SwapStatus if s.value == raw), None)
        if status is None:
            raise ValidationError(f"Unknown decision: {decision!r}")
    if not status.is_terminal:
        raise ValidationError("Decision must be APPROVED or REJECTED")
    return status


class SwapCoordinator:
    """Sole writer of swap status and sole trigger of swap-driven schedule changes.

    Approval ordering is: status compare-and-set, then schedule reassignment,
    then notifications. The compare-and-set makes concurrent decides on one
    request resolve to a single winner, so the schedule is mutated at most once.
    """

    def __init__(
        self,
        ledger: SwapRequestLedger,
        schedule: ScheduleStore,
        directory: PlayerDirectory,
        notifier: NotificationGateway,
        *,
        swap_mode: SwapMode = SwapMode.REPOINT,
        notify_rejections: bool = False,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        self.ledger = ledger
        self.schedule = schedule
        self.directory = directory
        self.notifier = notifier
        self.swap_mode = swap_mode
        self.notify_rejections = notify_rejections
        self._clock = clock or _utcnow

    def get(self, swap_id: str) -> SwapRequest:
        request = self.ledger.get(swap_id)
        if request is None:
            raise NotFoundError(f"Swap request {swap_id} not found")
        return request

    def list_pending(self) -> List[SwapRequest]:
        return list(self.ledger.query_pending())

    async def create_swap_request(
        self,
        week_id: str,
        requesting_player_id: str,
        target_player_id: str,
    ) -> SwapRequest:
        fields = {
            "weekId": _clean(week_id),
            "requestingPlayerId": _clean(requesting_player_id),
            "targetPlayerId": _clean(target_player_id),
        }
        missing = [name for name, value in fields.items() if not value]
        if missing:
            raise ValidationError(f"Missing required fields: {', '.join(missing)}")
        week_id, requesting_player_id, target_player_id = fields.values()
        if requesting_player_id == target_player_id:
            raise ValidationError("A player cannot request a swap with themselves")

        requester = self._require_player(requesting_player_id)
        self._require_player(target_player_id)

        request = SwapRequest.pending(
            week_id,
            requesting_player_id,
            target_player_id,
            created_at=self._clock(),
        )
        created = self.ledger.create_pending(request)
        logger.info("Swap request %s created", created.swap_id)

        await notify_best_effort(
            self.notifier,
            EventType.SWAP_REQUESTED,
            {
                "recipient_id": target_player_id,
                "swap_id": created.swap_id,
                "week_id": week_id,
                "requesting_player_id": requesting_player_id,
                "target_player_id": target_player_id,
                "requester_name": requester.name,
            },
        )
        return created

    async def decide(self, swap_id: str, decision: SwapStatus | str) -> SwapRequest:
        status = coerce_decision(decision)
        request = self.get(swap_id)
        if request.derived_id != request.swap_id:
            raise ConflictError(
                f"Swap request {swap_id} names {request.requesting_player_id} and "
                f"{request.target_player_id} in week {request.week_id}, which do not match its id"
            )
        if request.status is not SwapStatus.PENDING:
            raise InvalidStateError(f"Swap request {swap_id} was already {request.status.value}")
        if status is SwapStatus.APPROVED:
            return await self._approve(request)
        return await self._reject(request)

    async def approve(self, swap_id: str) -> SwapRequest:
        return await self.decide(swap_id, SwapStatus.APPROVED)

    async def reject(self, swap_id: str) -> SwapRequest:
        return await self.decide(swap_id, SwapStatus.REJECTED)

    async def _approve(self, request: SwapRequest) -> SwapRequest:
        # Fail before the status write so a missing slot leaves the request PENDING.
        if self.schedule.get(request.week_id, request.requesting_player_id) is None:
            raise NotFoundError(
                f"No schedule entry for {request.requesting_player_id} in week {request.week_id}"
            )

        approved = self.ledger.transition(
            request.swap_id, SwapStatus.PENDING, SwapStatus.APPROVED, self._clock()
        )
        try:
            reassignment = self._reassign(approved)
        except Exception as exc:
            context = {
                "swap_id": approved.swap_id,
                "week_id": approved.week_id,
                "requesting_player_id": approved.requesting_player_id,
                "target_player_id": approved.target_player_id,
                "swap_mode": self.swap_mode.value,
            }
            logger.error(
                "Swap %s is APPROVED but the schedule was not reassigned; reconcile manually: %s (%s)",
                approved.swap_id,
                exc,
                context,
            )
            raise DependencyFailure(
                f"Swap request {approved.swap_id} approved but schedule reassignment failed: {exc}",
                operation="schedule_reassignment",
                context=context,
                partial=True,
            ) from exc

        if reassignment.displaced is not None:
            logger.warning(
                "Swap %s replaced the existing week %s entry for %s (%s, %s)",
                approved.swap_id,
                approved.week_id,
                reassignment.displaced.player_id,
                reassignment.displaced.time,
                reassignment.displaced.course,
            )
        logger.info("Swap request %s approved", approved.swap_id)

        requester_name = self._display_name(approved.requesting_player_id)
        target_name = self._display_name(approved.target_player_id)
        for recipient_id, counterpart_name in (
            (approved.requesting_player_id, target_name),
            (approved.target_player_id, requester_name),
        ):
            await notify_best_effort(
                self.notifier,
                EventType.SWAP_APPROVED,
                self._decision_payload(approved, recipient_id, counterpart_name),
            )
        return approved

    async def _reject(self, request: SwapRequest) -> SwapRequest:
        rejected = self.ledger.transition(
            request.swap_id, SwapStatus.PENDING, SwapStatus.REJECTED, self._clock()
        )
        logger.info("Swap request %s rejected", rejected.swap_id)
        if self.notify_rejections:
            await notify_best_effort(
                self.notifier,
                EventType.SWAP_REJECTED,
                self._decision_payload(
                    rejected,
                    rejected.requesting_player_id,
                    self._display_name(rejected.target_player_id),
                ),
            )
        return rejected

    def _reassign(self, request: SwapRequest) -> Reassignment:
        if self.swap_mode is SwapMode.EXCHANGE:
            return self.schedule.exchange(
                request.week_id, request.requesting_player_id, request.target_player_id
            )
        return self.schedule.reassign(
            request.week_id, request.requesting_player_id, request.target_player_id
        )

    def _require_player(self, player_id: str) -> PlayerRecord:
        player = self.directory.get(player_id)
        if player is None:
            raise NotFoundError(f"Player {player_id} not found")
        return player

    def _display_name(self, player_id: str) -> str:
        try:
            player = self.directory.get(player_id)
        except DependencyFailure:
            return player_id
        return player.name if player is not None else player_id

    def _decision_payload(self, request: SwapRequest, recipient_id: str, counterpart_name: str) -> dict:
        return {
            "recipient_id": recipient_id,
            "swap_id": request.swap_id,
            "week_id": request.week_id,
            "requesting_player_id": request.requesting_player_id,
            "target_player_id": request.target_player_id,
            "counterpart_name": counterpart_name,
        }
