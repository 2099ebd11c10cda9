"""Baby profile persistence - JSON file storage."""

import json
import logging
from pathlib import Path

from pydantic import ValidationError

from baby_easy_schedule.models import BabyProfile

logger = logging.getLogger(__name__)


def safe_key(value: str) -> str:
    """Filesystem/Redis-safe form of an identifier."""
    return "".join(c for c in value if c.isalnum() or c in "-_")


class ProfileStore:
    """File-based profile store. One JSON file per baby."""

    def __init__(self, data_dir: Path) -> None:
        self._dir = Path(data_dir) / "profiles"
        self._dir.mkdir(parents=True, exist_ok=True)

    def _path(self, baby_id: str) -> Path:
        return self._dir / f"{safe_key(baby_id)}.json"

    def get(self, baby_id: str) -> BabyProfile | None:
        """Get profile by baby_id."""
        path = self._path(baby_id)
        if not path.exists():
            return None
        try:
            with path.open() as f:
                data = json.load(f)
            profile = BabyProfile.model_validate(data)
        except (json.JSONDecodeError, OSError, ValidationError) as e:
            logger.warning("Could not load profile %s: %s", path, e)
            return None
        return profile if profile.baby_id == baby_id else None

    def save(self, profile: BabyProfile) -> None:
        """Create or replace profile."""
        path = self._path(profile.baby_id)
        try:
            with path.open("w") as f:
                json.dump(profile.model_dump(mode="json"), f, indent=2)
        except OSError as e:
            logger.error("Could not save profile %s: %s", path, e)
            raise

    def list(self) -> list[BabyProfile]:
        profiles = []
        for path in sorted(self._dir.glob("*.json")):
            profile = self.get(path.stem)
            if profile:
                profiles.append(profile)
        return profiles
