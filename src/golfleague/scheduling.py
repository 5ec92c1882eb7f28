"""Direct schedule assignment, outside of the swap flow."""

from __future__ import annotations

import logging

from golfleague.errors import NotFoundError
from golfleague.models import ScheduleEntry
from golfleague.notifications import EventType, NotificationGateway, notify_best_effort
from golfleague.persistence import PlayerDirectory, ScheduleStore


logger = logging.getLogger(__name__)


class ScheduleService:
    def __init__(self, schedule: ScheduleStore, directory: PlayerDirectory, notifier: NotificationGateway):
        self.schedule = schedule
        self.directory = directory
        self.notifier = notifier

    async def assign(self, entry: ScheduleEntry, *, notify: bool = True) -> ScheduleEntry:
        """Upsert a tee time and tell the player about it."""
        if self.directory.get(entry.player_id) is None:
            raise NotFoundError(f"Player {entry.player_id} not found")
        stored = self.schedule.put(entry)
        logger.info("Scheduled %s for week %s at %s (%s)", entry.player_id, entry.week_id, entry.time, entry.course)
        if notify:
            await notify_best_effort(
                self.notifier,
                EventType.SCHEDULE_UPDATED,
                {
                    "recipient_id": entry.player_id,
                    "week_id": entry.week_id,
                    "time": entry.time,
                    "course": entry.course,
                },
            )
        return stored
