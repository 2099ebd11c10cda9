"""Baby profile data model."""

from datetime import date
from enum import Enum
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic import BaseModel, Field, field_validator

from baby_easy_schedule.schedule.clock import is_valid_time

# Ids double as file names and Redis keys.
BABY_ID_PATTERN = r"^[A-Za-z0-9_-]+$"


class Gender(str, Enum):
    """Baby gender as entered at onboarding."""

    UNKNOWN = "unknown"
    BOY = "boy"
    GIRL = "girl"


class BabyProfile(BaseModel):
    """Primary owner entity. Activities and schedules are scoped to it."""

    baby_id: str = Field(..., pattern=BABY_ID_PATTERN, description="Unique baby identifier")
    nickname: str = Field(default="", description="Display name")
    gender: Gender = Field(default=Gender.UNKNOWN)
    birth_date: date = Field(..., description="Date of birth")
    due_date: date | None = Field(default=None, description="Original due date")
    first_wake_time: str = Field(default="07:00", description="Usual first wake time, HH:MM")
    selected_formula_id: str | None = Field(
        default=None,
        description="Explicit formula choice; age-based when unset",
    )
    timezone: str = Field(default="UTC", description="IANA timezone name")

    @field_validator("first_wake_time")
    @classmethod
    def _check_wake_time(cls, value: str) -> str:
        if not is_valid_time(value):
            raise ValueError(f"Invalid first_wake_time {value!r}, expected HH:MM")
        return value

    @field_validator("timezone")
    @classmethod
    def _check_timezone(cls, value: str) -> str:
        try:
            ZoneInfo(value)
        except (ZoneInfoNotFoundError, ValueError) as e:
            raise ValueError(f"Unknown timezone {value!r}") from e
        return value

    @property
    def tzinfo(self) -> ZoneInfo:
        return ZoneInfo(self.timezone)

    def age_in_weeks(self, reference_date: date | None = None) -> int:
        """Completed weeks since birth, never negative."""
        ref = reference_date or date.today()
        return max(0, (ref - self.birth_date).days // 7)
