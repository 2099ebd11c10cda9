"""Activity log persistence - JSON file per baby."""

import json
import logging
from datetime import datetime, timedelta, timezone
from pathlib import Path

from pydantic import ValidationError

from baby_easy_schedule.models import ActivityKind, ActivityRecord
from baby_easy_schedule.persistence.profile_store import safe_key

logger = logging.getLogger(__name__)


class CreationClock:
    """Hands out strictly increasing UTC creation timestamps."""

    def __init__(self) -> None:
        self._last: datetime | None = None

    def next(self) -> datetime:
        now = datetime.now(timezone.utc)
        if self._last is not None and now <= self._last:
            now = self._last + timedelta(microseconds=1)
        self._last = now
        return now


def filter_activities(
    records: list[ActivityRecord],
    baby_id: str,
    kind: ActivityKind | None = None,
    since: datetime | None = None,
    until: datetime | None = None,
) -> list[ActivityRecord]:
    """Records of baby_id filtered by kind and start-time range [since, until), newest first."""
    selected = [
        r
        for r in records
        if r.baby_id == baby_id
        and (kind is None or r.kind == kind)
        and (since is None or r.started_at >= since)
        and (until is None or r.started_at < until)
    ]
    return sorted(selected, key=lambda r: r.started_at, reverse=True)


class ActivityStore:
    """File-based activity store."""

    def __init__(self, data_dir: Path) -> None:
        self._dir = Path(data_dir) / "activities"
        self._dir.mkdir(parents=True, exist_ok=True)
        self._clock = CreationClock()

    def _path(self, baby_id: str) -> Path:
        return self._dir / f"{safe_key(baby_id)}.json"

    def _load(self, baby_id: str) -> list[ActivityRecord]:
        path = self._path(baby_id)
        if not path.exists():
            return []
        try:
            with path.open() as f:
                data = json.load(f)
            return [ActivityRecord.model_validate(r) for r in data.get("activities", [])]
        except (json.JSONDecodeError, OSError, ValidationError) as e:
            logger.warning("Could not load activities %s: %s", path, e)
            return []

    def add(self, record: ActivityRecord) -> ActivityRecord:
        """Append a record, stamping created_at."""
        stored = record.model_copy(update={"created_at": self._clock.next()})
        records = self._load(record.baby_id)
        records.append(stored)
        path = self._path(record.baby_id)
        try:
            with path.open("w") as f:
                json.dump(
                    {"activities": [r.model_dump(mode="json") for r in records]},
                    f,
                    indent=2,
                )
        except OSError as e:
            logger.error("Could not save activities %s: %s", path, e)
            raise
        return stored

    def list(
        self,
        baby_id: str,
        kind: ActivityKind | None = None,
        since: datetime | None = None,
        until: datetime | None = None,
    ) -> list[ActivityRecord]:
        return filter_activities(self._load(baby_id), baby_id, kind, since, until)
