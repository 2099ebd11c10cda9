"""Persistence layer."""

from baby_easy_schedule.persistence.activity_store import ActivityStore
from baby_easy_schedule.persistence.factory import Stores, create_stores
from baby_easy_schedule.persistence.formula_store import FormulaStore
from baby_easy_schedule.persistence.profile_store import ProfileStore
from baby_easy_schedule.persistence.redis_store import (
    RedisActivityStore,
    RedisFormulaStore,
    RedisProfileStore,
)

__all__ = [
    "ActivityStore",
    "FormulaStore",
    "ProfileStore",
    "RedisActivityStore",
    "RedisFormulaStore",
    "RedisProfileStore",
    "Stores",
    "create_stores",
]
