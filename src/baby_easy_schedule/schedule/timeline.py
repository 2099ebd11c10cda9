"""Timeline helpers over generated schedule items."""

from collections.abc import Sequence
from dataclasses import dataclass
from enum import Enum

from baby_easy_schedule.models.schedule import ActivityType, ScheduleItem
from baby_easy_schedule.schedule.clock import MINUTES_IN_DAY, parse_time


class PhaseState(str, Enum):
    UPCOMING = "upcoming"
    CURRENT = "current"
    PAST = "past"


@dataclass
class PhaseStatus:
    """Where the clock is relative to one item."""

    state: PhaseState
    progress: float = 0.0


def group_cycles(items: Sequence[ScheduleItem]) -> list[list[ScheduleItem]]:
    """Split items into consecutive EASY cycles."""
    groups: list[list[ScheduleItem]] = []
    for item in items:
        if not groups or groups[-1][0].cycle != item.cycle:
            groups.append([])
        groups[-1].append(item)
    return groups


def visible_items(items: Sequence[ScheduleItem]) -> list[ScheduleItem]:
    """Items shown on a timeline; Your time overlaps Sleep and is hidden."""
    return [i for i in items if i.activity_type is not ActivityType.YOUR_TIME]


def spans_overnight(items: Sequence[ScheduleItem]) -> bool:
    return any(i.end_minutes > MINUTES_IN_DAY for i in items)


def normalize_now(items: Sequence[ScheduleItem], now_minutes: int) -> int:
    """
    Map a wall-clock minute onto the schedule's absolute axis.
    Before the first start on an overnight schedule, now belongs to the next day.
    """
    if not items:
        return now_minutes
    first_start = items[0].start_minutes
    if now_minutes < first_start and spans_overnight(items):
        return now_minutes + MINUTES_IN_DAY
    return now_minutes


def phase_status(
    item: ScheduleItem,
    now_minutes: int,
    items: Sequence[ScheduleItem] | None = None,
) -> PhaseStatus:
    """Status of item at now_minutes; pass the full items list to handle overnight schedules."""
    now = normalize_now(items, now_minutes) if items else now_minutes
    if now >= item.end_minutes:
        return PhaseStatus(PhaseState.PAST)
    if now >= item.start_minutes:
        progress = 0.0
        if item.duration_minutes > 0:
            progress = (now - item.start_minutes) / item.duration_minutes
        return PhaseStatus(PhaseState.CURRENT, progress)
    return PhaseStatus(PhaseState.UPCOMING)


def current_item(items: Sequence[ScheduleItem], now_minutes: int) -> ScheduleItem | None:
    """The visible item in progress at now_minutes, if any."""
    shown = visible_items(items)
    for item in shown:
        if phase_status(item, now_minutes, shown).state is PhaseState.CURRENT:
            return item
    return None


def start_delta(item: ScheduleItem, new_start: str) -> int:
    """Minutes item moves when it starts at new_start (HH:MM) on the same day offset."""
    return item.day_offset * MINUTES_IN_DAY + parse_time(new_start) - item.start_minutes
