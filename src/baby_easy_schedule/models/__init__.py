"""Data models."""

from baby_easy_schedule.models.activity import ActivityKind, ActivityRecord
from baby_easy_schedule.models.baby_profile import BabyProfile, Gender
from baby_easy_schedule.models.formula import EasyCyclePhase, EasyFormulaRule, parse_phases
from baby_easy_schedule.models.schedule import (
    ActivityType,
    EasySchedule,
    FormulaSource,
    PhaseProgress,
    ScheduleItem,
    ScheduleLabels,
    WakeSource,
)

__all__ = [
    "ActivityKind",
    "ActivityRecord",
    "ActivityType",
    "BabyProfile",
    "EasyCyclePhase",
    "EasyFormulaRule",
    "EasySchedule",
    "FormulaSource",
    "Gender",
    "PhaseProgress",
    "ScheduleItem",
    "ScheduleLabels",
    "WakeSource",
    "parse_phases",
]
