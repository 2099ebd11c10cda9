"""
Tests for resolving the day's first wake time.
"""

import pytest

from baby_easy_schedule.errors import ScheduleError
from baby_easy_schedule.models import ActivityKind, ActivityRecord, WakeSource
from baby_easy_schedule.schedule.wake import resolve_first_wake

from helpers import SCHEDULE_DATE, sleep_record, utc


class TestResolveFirstWake:
    def test_no_profile_uses_default(self):
        result = resolve_first_wake(None, [], SCHEDULE_DATE, default_time="06:30")
        assert result.time == "06:30"
        assert result.source is WakeSource.DEFAULT

    def test_profile_wake_when_nothing_logged(self, profile):
        result = resolve_first_wake(profile, [], SCHEDULE_DATE)
        assert result.time == "07:00"
        assert result.source is WakeSource.PROFILE
        assert result.offset_minutes == 0

    def test_logged_early_wake(self, profile):
        night = sleep_record(profile.baby_id, utc(2026, 3, 15, 19, 30), utc(2026, 3, 16, 6, 15))
        result = resolve_first_wake(profile, [night], SCHEDULE_DATE)
        assert result.time == "06:15"
        assert result.source is WakeSource.LOGGED
        assert result.offset_minutes == -45

    def test_logged_late_wake(self, profile):
        night = sleep_record(profile.baby_id, utc(2026, 3, 15, 19, 30), utc(2026, 3, 16, 7, 40))
        assert resolve_first_wake(profile, [night], SCHEDULE_DATE).offset_minutes == 40

    def test_night_wakings_and_naps_ignored(self, profile):
        records = [
            sleep_record(profile.baby_id, utc(2026, 3, 15, 19, 0), utc(2026, 3, 16, 2, 10), "night"),
            sleep_record(profile.baby_id, utc(2026, 3, 16, 12, 0), utc(2026, 3, 16, 13, 30), "nap"),
            sleep_record(profile.baby_id, utc(2026, 3, 14, 19, 0), utc(2026, 3, 15, 6, 0), "yesterday"),
        ]
        result = resolve_first_wake(profile, records, SCHEDULE_DATE)
        assert result.source is WakeSource.PROFILE

    def test_earliest_morning_wake_wins(self, profile):
        records = [
            sleep_record(profile.baby_id, utc(2026, 3, 16, 6, 30), utc(2026, 3, 16, 7, 10), "back-to-sleep"),
            sleep_record(profile.baby_id, utc(2026, 3, 15, 19, 0), utc(2026, 3, 16, 5, 50), "night"),
        ]
        assert resolve_first_wake(profile, records, SCHEDULE_DATE).time == "05:50"

    def test_other_activity_kinds_ignored(self, profile):
        feed = ActivityRecord(
            id="f",
            baby_id=profile.baby_id,
            kind=ActivityKind.FEEDING,
            started_at=utc(2026, 3, 16, 5, 30),
            ended_at=utc(2026, 3, 16, 5, 50),
        )
        assert resolve_first_wake(profile, [feed], SCHEDULE_DATE).source is WakeSource.PROFILE

    def test_sleep_without_end_ignored(self, profile):
        ongoing = ActivityRecord(
            id="s",
            baby_id=profile.baby_id,
            kind=ActivityKind.SLEEP,
            started_at=utc(2026, 3, 15, 19, 0),
        )
        assert resolve_first_wake(profile, [ongoing], SCHEDULE_DATE).source is WakeSource.PROFILE

    def test_uses_profile_timezone(self, profile):
        """10:30 UTC is 06:30 in New York during daylight saving time."""
        profile = profile.model_copy(update={"timezone": "America/New_York"})
        night = sleep_record(profile.baby_id, utc(2026, 3, 15, 23, 0), utc(2026, 3, 16, 10, 30))
        result = resolve_first_wake(profile, [night], SCHEDULE_DATE)
        assert result.time == "06:30"
        assert result.offset_minutes == -30

    def test_override_wins(self, profile):
        night = sleep_record(profile.baby_id, utc(2026, 3, 15, 19, 30), utc(2026, 3, 16, 6, 15))
        result = resolve_first_wake(profile, [night], SCHEDULE_DATE, override="8:05")
        assert result.time == "08:05"
        assert result.source is WakeSource.OVERRIDE

    def test_invalid_override(self, profile):
        with pytest.raises(ScheduleError):
            resolve_first_wake(profile, [], SCHEDULE_DATE, override="late")

    def test_pinned_day_wake_beats_logged_wake(self, profile):
        night = sleep_record(profile.baby_id, utc(2026, 3, 15, 19, 30), utc(2026, 3, 16, 6, 15))
        result = resolve_first_wake(profile, [night], SCHEDULE_DATE, pinned="07:30")
        assert result.time == "07:30"
        assert result.source is WakeSource.ADJUSTED
        assert result.offset_minutes == 30

    def test_override_beats_pinned_day_wake(self, profile):
        result = resolve_first_wake(profile, [], SCHEDULE_DATE, override="06:00", pinned="07:30")
        assert result.source is WakeSource.OVERRIDE
