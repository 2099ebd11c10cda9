"""Business logic services."""

from baby_easy_schedule.services.profile_service import ProfileService
from baby_easy_schedule.services.schedule_service import ScheduleService

__all__ = ["ProfileService", "ScheduleService"]
