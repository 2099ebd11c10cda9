"""
Tests for file and Redis persistence, and the store factory.
"""

import fakeredis
import pytest

from baby_easy_schedule.config import get_settings
from baby_easy_schedule.models import ActivityKind, ActivityRecord, EasyFormulaRule
from baby_easy_schedule.persistence import (
    ActivityStore,
    FormulaStore,
    ProfileStore,
    RedisActivityStore,
    RedisFormulaStore,
    RedisProfileStore,
    create_stores,
)
from baby_easy_schedule.persistence.activity_store import filter_activities
from baby_easy_schedule.persistence.profile_store import safe_key

from helpers import phases, sleep_record, utc


def custom_rule(rule_id: str, baby_id: str) -> EasyFormulaRule:
    return EasyFormulaRule(
        id=rule_id,
        baby_id=baby_id,
        is_custom=True,
        min_weeks=0,
        label_text=rule_id,
        phases=phases((30, 30, 60)),
    )


def feeding(record_id: str, baby_id: str, hour: int) -> ActivityRecord:
    return ActivityRecord(
        id=record_id,
        baby_id=baby_id,
        kind=ActivityKind.FEEDING,
        started_at=utc(2026, 3, 16, hour),
        details={"amount_ml": 120},
    )


@pytest.fixture
def redis_client():
    return fakeredis.FakeRedis(decode_responses=True)


class TestSafeKey:
    def test_strips_path_characters(self):
        assert safe_key("../baby 1/x") == "baby1x"
        assert safe_key("day_baby-1_20260316_1") == "day_baby-1_20260316_1"


class TestKeyCollisions:
    """Lookups by ids that normalise to another baby's key find nothing."""

    def test_profile_lookup_checks_id(self, profile_store, profile):
        profile_store.save(profile.model_copy(update={"baby_id": "ab"}))
        assert profile_store.get("ab") is not None
        assert profile_store.get("a.b") is None

    def test_activities_belong_to_one_baby(self, activity_store):
        activity_store.add(feeding("f1", "ab", 6))
        assert [r.id for r in activity_store.list("ab")] == ["f1"]
        assert activity_store.list("a.b") == []

    def test_filter_activities_by_owner(self):
        records = [feeding("mine", "baby-1", 6), feeding("theirs", "baby-2", 7)]
        assert [r.id for r in filter_activities(records, "baby-1")] == ["mine"]

    def test_redis_lookups_check_id(self, redis_client, profile):
        profiles = RedisProfileStore("redis://unused", client=redis_client)
        activities = RedisActivityStore("redis://unused", client=redis_client)
        profiles.save(profile.model_copy(update={"baby_id": "ab"}))
        activities.add(feeding("f1", "ab", 6))
        assert profiles.get("a.b") is None
        assert activities.list("a.b") == []


class TestProfileStore:
    def test_round_trip(self, profile_store, profile):
        profile_store.save(profile)
        assert profile_store.get("baby-1") == profile
        assert profile_store.list() == [profile]

    def test_missing(self, profile_store):
        assert profile_store.get("nobody") is None

    def test_corrupt_file_is_skipped(self, tmp_path, profile_store, profile):
        profile_store.save(profile)
        (tmp_path / "profiles" / "broken.json").write_text("{not json")
        assert profile_store.get("broken") is None
        assert profile_store.list() == [profile]


class TestFormulaStore:
    def test_list_by_owner(self, formula_store):
        formula_store.save(custom_rule("custom_a_1", "a"))
        formula_store.save(custom_rule("custom_b_1", "b"))
        assert [r.id for r in formula_store.list("a")] == ["custom_a_1"]
        assert len(formula_store.list()) == 2

    def test_delete(self, formula_store):
        formula_store.save(custom_rule("custom_a_1", "a"))
        assert formula_store.delete("custom_a_1") is True
        assert formula_store.delete("custom_a_1") is False
        assert formula_store.get("custom_a_1") is None


class TestActivityStore:
    def test_filters_and_orders_newest_first(self, activity_store):
        activity_store.add(feeding("f1", "baby-1", 6))
        activity_store.add(sleep_record("baby-1", utc(2026, 3, 16, 9), utc(2026, 3, 16, 11)))
        activity_store.add(feeding("f2", "baby-1", 10))
        activity_store.add(feeding("other", "baby-2", 7))

        assert [r.id for r in activity_store.list("baby-1")] == ["f2", "s1", "f1"]
        assert [r.id for r in activity_store.list("baby-1", ActivityKind.FEEDING)] == ["f2", "f1"]
        window = activity_store.list("baby-1", since=utc(2026, 3, 16, 7), until=utc(2026, 3, 16, 10))
        assert [r.id for r in window] == ["s1"]

    def test_created_at_strictly_increasing(self, activity_store):
        stamps = [activity_store.add(feeding(f"f{i}", "baby-1", 6)).created_at for i in range(5)]
        assert all(a < b for a, b in zip(stamps, stamps[1:]))

    def test_details_persist(self, activity_store):
        activity_store.add(feeding("f1", "baby-1", 6))
        assert activity_store.list("baby-1")[0].details == {"amount_ml": 120}


class TestRedisStores:
    def test_profiles(self, redis_client, profile):
        store = RedisProfileStore("redis://unused", client=redis_client)
        assert store.get("baby-1") is None
        store.save(profile)
        assert store.get("baby-1") == profile
        assert store.list() == [profile]

    def test_formulas(self, redis_client):
        store = RedisFormulaStore("redis://unused", client=redis_client)
        store.save(custom_rule("custom_a_1", "a"))
        store.save(custom_rule("custom_b_1", "b"))
        assert store.get("custom_a_1").baby_id == "a"
        assert [r.id for r in store.list("b")] == ["custom_b_1"]
        assert store.delete("custom_a_1") is True
        assert store.delete("custom_a_1") is False

    def test_activities(self, redis_client):
        store = RedisActivityStore("redis://unused", client=redis_client)
        store.add(feeding("f1", "baby-1", 6))
        store.add(feeding("f2", "baby-1", 10))
        records = store.list("baby-1", ActivityKind.FEEDING)
        assert [r.id for r in records] == ["f2", "f1"]
        assert records[0].created_at > records[1].created_at


class TestCreateStores:
    @pytest.fixture(autouse=True)
    def fresh_settings(self):
        get_settings.cache_clear()
        yield
        get_settings.cache_clear()

    def test_file_stores_by_default(self, tmp_path, monkeypatch):
        monkeypatch.delenv("REDIS_URL", raising=False)
        monkeypatch.setenv("DATA_DIR", str(tmp_path / "data"))
        stores = create_stores()
        assert isinstance(stores.profiles, ProfileStore)
        assert isinstance(stores.formulas, FormulaStore)
        assert isinstance(stores.activities, ActivityStore)
        assert (tmp_path / "data" / "profiles").is_dir()

    def test_redis_when_configured(self, monkeypatch):
        monkeypatch.setenv("REDIS_URL", "redis://localhost:6379/0")
        stores = create_stores()
        assert isinstance(stores.profiles, RedisProfileStore)
        assert isinstance(stores.activities, RedisActivityStore)

    def test_explicit_data_dir_wins_over_redis(self, tmp_path, monkeypatch):
        monkeypatch.setenv("REDIS_URL", "redis://localhost:6379/0")
        stores = create_stores(tmp_path)
        assert isinstance(stores.formulas, FormulaStore)
