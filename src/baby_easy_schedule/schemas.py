"""Request bodies for the HTTP API."""

from datetime import date
from typing import Any

from pydantic import AwareDatetime, BaseModel, Field

from baby_easy_schedule.models import ActivityKind, EasyCyclePhase, Gender


class FormulaChoice(BaseModel):
    rule_id: str | None = Field(default=None, description="None returns to age-based selection")


class FirstWakeTimeUpdate(BaseModel):
    first_wake_time: str = Field(..., description="HH:MM")


class ActivityCreate(BaseModel):
    kind: ActivityKind
    started_at: AwareDatetime
    ended_at: AwareDatetime | None = None
    details: dict[str, Any] = Field(default_factory=dict)


class PhaseAdjustment(BaseModel):
    item_order: int = Field(..., ge=0)
    start_time: str = Field(..., description="New start, HH:MM")
    end_time: str = Field(..., description="New end, HH:MM; before start means next day")
    schedule_date: date | None = Field(default=None, description="Schedule day; today when unset")


class CustomFormulaCreate(BaseModel):
    name: str = Field(..., min_length=1)
    min_weeks: int = Field(..., ge=0)
    max_weeks: int | None = Field(default=None, ge=0)
    phases: list[EasyCyclePhase] = Field(..., min_length=1)
    description: str | None = None


class CustomFormulaUpdate(BaseModel):
    """Fields left out stay unchanged."""

    name: str | None = Field(default=None, min_length=1)
    min_weeks: int | None = Field(default=None, ge=0)
    max_weeks: int | None = Field(default=None, ge=0, description="null makes the rule open-ended")
    phases: list[EasyCyclePhase] | None = Field(default=None, min_length=1)
    description: str | None = None


class ProfileUpdate(BaseModel):
    """Fields left out stay unchanged. Formula and wake time have their own endpoints."""

    nickname: str | None = None
    gender: Gender | None = None
    birth_date: date | None = None
    due_date: date | None = Field(default=None, description="null clears the due date")
    timezone: str | None = Field(default=None, description="IANA timezone name")
