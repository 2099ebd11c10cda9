"""Generated EASY schedule data model."""

from collections.abc import Callable
from dataclasses import dataclass
from datetime import date
from enum import Enum

from pydantic import BaseModel, Field, computed_field

from baby_easy_schedule.schedule.clock import MINUTES_IN_DAY, format_duration, format_time


class ActivityType(str, Enum):
    """Schedule item type."""

    EAT = "E"
    ACTIVITY = "A"
    EAT_ACTIVITY = "E.A"
    SLEEP = "S"
    YOUR_TIME = "Y"


class FormulaSource(str, Enum):
    """Why a formula was chosen for the day."""

    DAY_OVERRIDE = "day_override"
    SELECTED = "selected"
    AGE = "age"
    DEFAULT = "default"


class WakeSource(str, Enum):
    """Where the day's first wake time came from."""

    OVERRIDE = "override"
    ADJUSTED = "adjusted"
    LOGGED = "logged"
    PROFILE = "profile"
    DEFAULT = "default"


def _default_sleep_label(nap_number: int) -> str:
    return f"Sleep {nap_number}"


@dataclass
class ScheduleLabels:
    """Display labels, usually from the caller's i18n layer."""

    eat: str = "Eat"
    activity: str = "Activity"
    sleep: Callable[[int], str] = _default_sleep_label
    your_time: str = "Your time"
    eat_and_activity: str | None = None

    @property
    def combined(self) -> str:
        return self.eat_and_activity or f"{self.eat} & {self.activity}"


class ScheduleItem(BaseModel):
    """One activity window in the day."""

    activity_type: ActivityType
    start_time: str = Field(..., description="Wall-clock start, HH:MM, wraps at midnight")
    start_minutes: int = Field(..., description="Minutes from the schedule day's midnight")
    duration_minutes: int = Field(..., ge=0)
    order: int = Field(..., ge=0)
    cycle: int = Field(..., ge=1, description="1-based EASY cycle (phase) number")
    label: str
    notes: str | None = Field(default=None)

    @computed_field
    @property
    def end_minutes(self) -> int:
        return self.start_minutes + self.duration_minutes

    @computed_field
    @property
    def end_time(self) -> str:
        return format_time(self.end_minutes)

    @property
    def day_offset(self) -> int:
        return self.start_minutes // MINUTES_IN_DAY


class EasySchedule(BaseModel):
    """A day's schedule with the decisions that produced it."""

    schedule_date: date
    baby_id: str | None = Field(default=None)
    rule_id: str
    rule_label: str
    formula_source: FormulaSource
    first_wake_time: str
    wake_source: WakeSource
    wake_offset_minutes: int = Field(
        default=0,
        description="Logged wake minus usual wake; negative means the baby woke early",
    )
    items: list[ScheduleItem] = Field(default_factory=list)

    def to_text(self) -> str:
        """Plain-text rendering, Your time rows omitted."""
        lines = [f"*EASY Schedule - {self.schedule_date}* ({self.rule_label})", ""]
        for item in self.items:
            if item.activity_type is ActivityType.YOUR_TIME:
                continue
            lines.append(f"{item.start_time}-{item.end_time} {item.label} ({format_duration(item.duration_minutes)})")
        return "\n".join(lines).strip()


class PhaseProgress(BaseModel):
    """Where a baby is in the day's schedule at a moment."""

    schedule_date: date
    now_time: str = Field(..., description="Wall-clock time in the baby's timezone, HH:MM")
    item: ScheduleItem | None = Field(default=None, description="Visible item in progress")
    progress: float | None = Field(default=None, ge=0, le=1, description="Share of item elapsed")
    next_item: ScheduleItem | None = Field(default=None)
    cycle_items: list[ScheduleItem] = Field(
        default_factory=list,
        description="Visible items of the EASY cycle in progress",
    )
