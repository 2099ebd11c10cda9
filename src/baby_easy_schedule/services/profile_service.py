"""Profile service - baby profiles and their activity log."""

import logging
import uuid
from datetime import datetime

from baby_easy_schedule.errors import ProfileNotFoundError
from baby_easy_schedule.models import ActivityKind, ActivityRecord, BabyProfile
from baby_easy_schedule.persistence import ActivityStore, ProfileStore

logger = logging.getLogger(__name__)


class ProfileService:
    """Handles profile CRUD and activity logging."""

    def __init__(
        self,
        profile_store: ProfileStore,
        activity_store: ActivityStore,
    ) -> None:
        self._store = profile_store
        self._activities = activity_store

    def get_profile(self, baby_id: str) -> BabyProfile:
        """Retrieve profile or raise ProfileNotFoundError."""
        profile = self._store.get(baby_id)
        if profile is None:
            raise ProfileNotFoundError(baby_id)
        return profile

    def save_profile(self, profile: BabyProfile) -> BabyProfile:
        """Save or update profile."""
        self._store.save(profile)
        return profile

    def update_profile(self, baby_id: str, **changes) -> BabyProfile:
        """Apply field changes, re-validating the result."""
        profile = self.get_profile(baby_id)
        data = profile.model_dump()
        data.update(changes)
        updated = BabyProfile.model_validate(data)
        self._store.save(updated)
        return updated

    def log_activity(
        self,
        baby_id: str,
        kind: ActivityKind,
        started_at: datetime,
        ended_at: datetime | None = None,
        details: dict | None = None,
    ) -> ActivityRecord:
        """Record an activity for an existing baby."""
        self.get_profile(baby_id)
        record = ActivityRecord(
            id=uuid.uuid4().hex,
            baby_id=baby_id,
            kind=kind,
            started_at=started_at,
            ended_at=ended_at,
            details=details or {},
        )
        stored = self._activities.add(record)
        logger.info("Logged %s for baby %s", kind.value, baby_id)
        return stored

    def list_activities(
        self,
        baby_id: str,
        kind: ActivityKind | None = None,
        since: datetime | None = None,
        until: datetime | None = None,
    ) -> list[ActivityRecord]:
        self.get_profile(baby_id)
        return self._activities.list(baby_id, kind, since, until)
