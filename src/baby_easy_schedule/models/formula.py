"""EASY formula rule data model."""

import json
import logging
from datetime import date
from typing import Any

from pydantic import BaseModel, Field, TypeAdapter, ValidationError, field_validator, model_validator

from baby_easy_schedule.schedule.clock import is_valid_time

logger = logging.getLogger(__name__)


class EasyCyclePhase(BaseModel):
    """One EASY block: Eat -> Activity -> Sleep (Your time overlaps Sleep). Minutes."""

    eat: int | None = Field(default=None, ge=0, description="Eat duration, 0 or missing to skip")
    activity: int | None = Field(default=None, ge=0, description="Activity duration")
    eat_activity: int | None = Field(
        default=None,
        ge=0,
        description="Combined E.A duration; replaces eat and activity when > 0",
    )
    sleep: int = Field(..., ge=0, description="Sleep duration, 0 for no nap")
    combined: bool = Field(default=False, description="Merge eat and activity into one E.A item")

    @property
    def awake_minutes(self) -> int:
        if self.eat_activity:
            return self.eat_activity
        return (self.eat or 0) + (self.activity or 0)

    @property
    def total_minutes(self) -> int:
        return self.awake_minutes + self.sleep


_PHASES_ADAPTER = TypeAdapter(list[EasyCyclePhase])


def parse_phases(raw: str | list[Any] | None) -> list[EasyCyclePhase]:
    """Lenient phase parsing for stored rules. Bad data yields an empty list."""
    if not raw:
        return []
    try:
        data = json.loads(raw) if isinstance(raw, str) else raw
        return _PHASES_ADAPTER.validate_python(data)
    except (json.JSONDecodeError, ValidationError) as e:
        logger.warning("Could not parse formula phases: %s", e)
        return []


class EasyFormulaRule(BaseModel):
    """Named, age-banded template of cycle phases."""

    id: str = Field(..., description="Rule id, e.g. easy4 or custom_<baby>_<ts>")
    min_weeks: int = Field(..., ge=0)
    max_weeks: int | None = Field(default=None, description="None means open-ended")
    label_key: str = Field(default="", description="Translation key for predefined rules")
    label_text: str | None = Field(default=None, description="Direct label for custom rules")
    age_range_key: str = Field(default="")
    age_range_text: str | None = Field(default=None)
    description: str | None = Field(default=None)
    phases: list[EasyCyclePhase] = Field(default_factory=list)
    valid_date: date | None = Field(default=None, description="Set for day-specific rules")
    is_custom: bool = Field(default=False)
    baby_id: str | None = Field(default=None, description="Owner of a custom rule")
    source_rule_id: str | None = Field(default=None, description="Rule a day-specific rule was cloned from")
    first_wake_time: str | None = Field(
        default=None,
        description="Wake time pinned for the date of a day-specific rule, HH:MM",
    )

    @model_validator(mode="after")
    def _check_week_range(self) -> "EasyFormulaRule":
        if self.max_weeks is not None and self.max_weeks < self.min_weeks:
            raise ValueError("max_weeks must not be less than min_weeks")
        return self

    @field_validator("first_wake_time")
    @classmethod
    def _check_wake_time(cls, value: str | None) -> str | None:
        if value is not None and not is_valid_time(value):
            raise ValueError(f"Invalid first_wake_time {value!r}, expected HH:MM")
        return value

    @property
    def display_label(self) -> str:
        return self.label_text or self.label_key

    @property
    def is_day_specific(self) -> bool:
        return self.valid_date is not None

    def covers_age(self, weeks: int) -> bool:
        """Inclusive week-range check."""
        if weeks < self.min_weeks:
            return False
        return self.max_weeks is None or weeks <= self.max_weeks
