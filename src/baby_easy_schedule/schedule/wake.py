"""Resolve the day's first wake time from logged sleep, the profile, or defaults."""

import logging
from collections.abc import Iterable
from dataclasses import dataclass
from datetime import date
from zoneinfo import ZoneInfo

from baby_easy_schedule.models import ActivityKind, ActivityRecord, BabyProfile, WakeSource
from baby_easy_schedule.schedule.clock import format_time, parse_time

logger = logging.getLogger(__name__)


@dataclass
class WakeResolution:
    """Chosen first wake time and how it was picked."""

    time: str
    source: WakeSource
    offset_minutes: int = 0


def morning_wakes(
    activities: Iterable[ActivityRecord],
    on: date,
    tz: ZoneInfo,
    earliest: str,
    latest: str,
) -> list[int]:
    """Local wake minutes of sleep records ending on `on` inside [earliest, latest)."""
    lower, upper = parse_time(earliest), parse_time(latest)
    wakes: list[int] = []
    for record in activities:
        if record.kind is not ActivityKind.SLEEP or record.ended_at is None:
            continue
        local_end = record.ended_at.astimezone(tz)
        if local_end.date() != on:
            continue
        minutes = local_end.hour * 60 + local_end.minute
        if lower <= minutes < upper:
            wakes.append(minutes)
    return sorted(wakes)


def resolve_first_wake(
    profile: BabyProfile | None,
    activities: Iterable[ActivityRecord],
    on: date,
    *,
    default_time: str = "07:00",
    earliest: str = "04:00",
    latest: str = "12:00",
    override: str | None = None,
    pinned: str | None = None,
) -> WakeResolution:
    """
    Pick the first wake time for `on`.
    Order: explicit override, the wake pinned by a phase adjustment for that day,
    earliest logged morning wake, profile, default.
    """
    if override is not None:
        return WakeResolution(format_time(parse_time(override)), WakeSource.OVERRIDE)
    if profile is None:
        return WakeResolution(default_time, WakeSource.DEFAULT)
    if pinned is not None:
        offset = parse_time(pinned) - parse_time(profile.first_wake_time)
        return WakeResolution(format_time(parse_time(pinned)), WakeSource.ADJUSTED, offset)

    wakes = morning_wakes(activities, on, profile.tzinfo, earliest, latest)
    if wakes:
        logged = wakes[0]
        offset = logged - parse_time(profile.first_wake_time)
        if offset:
            logger.info(
                "Baby %s woke at %s, %+d min from usual %s",
                profile.baby_id,
                format_time(logged),
                offset,
                profile.first_wake_time,
            )
        return WakeResolution(format_time(logged), WakeSource.LOGGED, offset)

    return WakeResolution(profile.first_wake_time, WakeSource.PROFILE)
