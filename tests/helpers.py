"""
Shared builders for EASY schedule tests.
"""

from datetime import date, datetime, timezone

from baby_easy_schedule.models import ActivityKind, ActivityRecord, EasyCyclePhase

# 2026-01-05 + 70 days: the baby is exactly 10 weeks old, inside easy4.
BIRTH_DATE = date(2026, 1, 5)
SCHEDULE_DATE = date(2026, 3, 16)


def utc(*args) -> datetime:
    return datetime(*args, tzinfo=timezone.utc)


def sleep_record(baby_id: str, start: datetime, end: datetime, record_id: str = "s1") -> ActivityRecord:
    return ActivityRecord(
        id=record_id,
        baby_id=baby_id,
        kind=ActivityKind.SLEEP,
        started_at=start,
        ended_at=end,
    )


def phases(*rows) -> list[EasyCyclePhase]:
    """Build phases from (eat, activity, sleep) tuples."""
    return [EasyCyclePhase(eat=e, activity=a, sleep=s) for e, a, s in rows]


def types(items) -> list[str]:
    return [i.activity_type.value for i in items]
