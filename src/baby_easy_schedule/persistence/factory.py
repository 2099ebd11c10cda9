"""Store factory - creates file or Redis stores based on config."""

from dataclasses import dataclass
from pathlib import Path

from baby_easy_schedule.config import get_settings
from baby_easy_schedule.persistence.activity_store import ActivityStore
from baby_easy_schedule.persistence.formula_store import FormulaStore
from baby_easy_schedule.persistence.profile_store import ProfileStore
from baby_easy_schedule.persistence.redis_store import (
    RedisActivityStore,
    RedisFormulaStore,
    RedisProfileStore,
)


@dataclass
class Stores:
    """Profile, formula and activity stores."""

    profiles: ProfileStore | RedisProfileStore
    formulas: FormulaStore | RedisFormulaStore
    activities: ActivityStore | RedisActivityStore


def create_stores(data_dir: Path | None = None) -> Stores:
    """
    Create stores based on REDIS_URL.
    Uses Redis when REDIS_URL is set; otherwise file-based under data_dir.
    """
    settings = get_settings()
    if settings.redis_url and data_dir is None:
        return Stores(
            profiles=RedisProfileStore(settings.redis_url),
            formulas=RedisFormulaStore(settings.redis_url),
            activities=RedisActivityStore(settings.redis_url),
        )
    data_dir = Path(data_dir or settings.data_dir)
    data_dir.mkdir(parents=True, exist_ok=True)
    return Stores(
        profiles=ProfileStore(data_dir),
        formulas=FormulaStore(data_dir),
        activities=ActivityStore(data_dir),
    )
