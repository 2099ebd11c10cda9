"""E.A.S.Y. schedule generator.

Each cycle phase expands to Eat -> Activity -> Sleep, with Your time
overlapping Sleep. Eat and Activity collapse into a single E.A item when the
phase carries an ``eat_activity`` duration or is marked ``combined``.
"""

import logging
from collections.abc import Sequence

from baby_easy_schedule.errors import ScheduleError
from baby_easy_schedule.models.formula import EasyCyclePhase
from baby_easy_schedule.models.schedule import ActivityType, ScheduleItem, ScheduleLabels
from baby_easy_schedule.schedule.clock import format_time, parse_time

logger = logging.getLogger(__name__)


class _Builder:
    """Accumulates items while advancing the clock."""

    def __init__(self, start_minutes: int) -> None:
        self.items: list[ScheduleItem] = []
        self.clock = start_minutes

    def emit(
        self,
        activity_type: ActivityType,
        duration: int,
        label: str,
        cycle: int,
        *,
        advance: bool = True,
    ) -> None:
        self.items.append(
            ScheduleItem(
                activity_type=activity_type,
                start_time=format_time(self.clock),
                start_minutes=self.clock,
                duration_minutes=duration,
                order=len(self.items),
                cycle=cycle,
                label=label,
            )
        )
        if advance:
            self.clock += duration


def generate_easy_schedule(
    first_wake_time: str,
    phases: Sequence[EasyCyclePhase],
    labels: ScheduleLabels | None,
) -> list[ScheduleItem]:
    """
    Expand phases into ordered schedule items starting at first_wake_time (HH:MM).
    Raises ScheduleError when labels or phases are missing or the time is invalid.
    """
    if labels is None:
        raise ScheduleError("Schedule labels are required")
    if not phases:
        raise ScheduleError("Schedule phases are required; load a formula rule first")

    builder = _Builder(parse_time(first_wake_time))
    for index, phase in enumerate(phases):
        cycle = index + 1
        eat = phase.eat or 0
        activity = phase.activity or 0

        if phase.eat_activity:
            builder.emit(ActivityType.EAT_ACTIVITY, phase.eat_activity, labels.combined, cycle)
        elif phase.combined and eat > 0 and activity > 0:
            builder.emit(ActivityType.EAT_ACTIVITY, eat + activity, labels.combined, cycle)
        else:
            if eat > 0:
                builder.emit(ActivityType.EAT, eat, labels.eat, cycle)
            if activity > 0:
                builder.emit(ActivityType.ACTIVITY, activity, labels.activity, cycle)

        if phase.sleep > 0:
            builder.emit(ActivityType.SLEEP, phase.sleep, labels.sleep(cycle), cycle, advance=False)
            builder.emit(ActivityType.YOUR_TIME, phase.sleep, labels.your_time, cycle)

    logger.debug(
        "Generated %d schedule items from %d phases starting %s",
        len(builder.items),
        len(phases),
        first_wake_time,
    )
    return builder.items
