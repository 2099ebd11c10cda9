"""Tracked activity records. Plain timestamped events owned by one baby."""

from enum import Enum
from typing import Any

from pydantic import AwareDatetime, BaseModel, Field, model_validator

from baby_easy_schedule.models.baby_profile import BABY_ID_PATTERN


class ActivityKind(str, Enum):
    """Kinds of tracked events."""

    FEEDING = "feeding"
    SLEEP = "sleep"
    DIAPER = "diaper"
    PUMPING = "pumping"
    HEALTH = "health"
    GROWTH = "growth"
    DIARY = "diary"


class ActivityRecord(BaseModel):
    """A logged event. created_at is assigned by the store."""

    id: str = Field(..., description="Record identifier")
    baby_id: str = Field(..., pattern=BABY_ID_PATTERN, description="Owning baby profile")
    kind: ActivityKind
    started_at: AwareDatetime = Field(..., description="Event start, timezone-aware")
    ended_at: AwareDatetime | None = Field(default=None, description="Event end, e.g. wake for sleep")
    details: dict[str, Any] = Field(default_factory=dict)
    created_at: AwareDatetime | None = Field(default=None)

    @model_validator(mode="after")
    def _check_interval(self) -> "ActivityRecord":
        if self.ended_at is not None and self.ended_at < self.started_at:
            raise ValueError("ended_at must not precede started_at")
        return self
