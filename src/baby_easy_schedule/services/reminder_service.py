"""Reminder planning for EASY schedule items. Delivery is someone else's job."""

import logging
from collections.abc import Sequence
from dataclasses import dataclass
from datetime import datetime, time, timedelta
from zoneinfo import ZoneInfo

from baby_easy_schedule.models import ActivityType, ScheduleItem

logger = logging.getLogger(__name__)

ACTIVITY_EMOJI = {
    ActivityType.EAT: "🍼",
    ActivityType.EAT_ACTIVITY: "🍼",
    ActivityType.ACTIVITY: "🧸",
    ActivityType.SLEEP: "😴",
}


@dataclass
class Reminder:
    """A planned notification."""

    fire_at: datetime
    activity_start: datetime
    activity_type: ActivityType
    label: str
    title: str
    body: str


def plan_reminders(
    items: Sequence[ScheduleItem],
    now: datetime,
    tz: ZoneInfo,
    advance_minutes: int = 10,
    days_ahead: int = 2,
) -> list[Reminder]:
    """
    Reminders for every non Your-time item over the next days_ahead days,
    advance_minutes before each start. Only reminders after now are kept.
    """
    local_now = now.astimezone(tz)
    reminders: list[Reminder] = []
    for day_offset in range(days_ahead):
        day = local_now.date() + timedelta(days=day_offset)
        midnight = datetime.combine(day, time(0, 0), tzinfo=tz)
        for item in items:
            if item.activity_type is ActivityType.YOUR_TIME:
                continue
            start = midnight + timedelta(minutes=item.start_minutes)
            fire_at = start - timedelta(minutes=advance_minutes)
            if fire_at <= local_now:
                continue
            emoji = ACTIVITY_EMOJI.get(item.activity_type, "📅")
            reminders.append(
                Reminder(
                    fire_at=fire_at,
                    activity_start=start,
                    activity_type=item.activity_type,
                    label=item.label,
                    title=f"{emoji} {item.label}",
                    body=f"{item.label} starts at {item.start_time} (in {advance_minutes} min)",
                )
            )
    logger.debug("Planned %d reminders over %d days", len(reminders), days_ahead)
    return sorted(reminders, key=lambda r: r.fire_at)
