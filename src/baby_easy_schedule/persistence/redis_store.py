"""Redis-backed stores for cloud deployment. Use when REDIS_URL is set."""

import json
import logging
from datetime import datetime

from baby_easy_schedule.models import ActivityKind, ActivityRecord, BabyProfile, EasyFormulaRule
from baby_easy_schedule.persistence.activity_store import CreationClock, filter_activities
from baby_easy_schedule.persistence.profile_store import safe_key

logger = logging.getLogger(__name__)

KEY_PREFIX = "baby_easy_schedule"


class _RedisBacked:
    """Lazy Redis client shared by the stores below."""

    def __init__(self, redis_url: str, client=None) -> None:
        self._redis_url = redis_url
        self._client = client

    def _get_client(self):
        """Lazy-init Redis client."""
        if self._client is None:
            import redis
            self._client = redis.from_url(
                self._redis_url,
                decode_responses=True,
            )
        return self._client


class RedisProfileStore(_RedisBacked):
    """Redis-backed profile store. Keyed by baby_id."""

    def _key(self, baby_id: str) -> str:
        return f"{KEY_PREFIX}:profile:{safe_key(baby_id)}"

    def get(self, baby_id: str) -> BabyProfile | None:
        try:
            data = self._get_client().get(self._key(baby_id))
            if not data:
                return None
            profile = BabyProfile.model_validate(json.loads(data))
        except Exception as e:
            logger.warning("Redis profile get failed: %s", e)
            return None
        return profile if profile.baby_id == baby_id else None

    def save(self, profile: BabyProfile) -> None:
        try:
            r = self._get_client()
            r.set(self._key(profile.baby_id), json.dumps(profile.model_dump(mode="json")))
            r.sadd(f"{KEY_PREFIX}:profiles", profile.baby_id)
        except Exception as e:
            logger.error("Redis profile save failed: %s", e)
            raise

    def list(self) -> list[BabyProfile]:
        try:
            baby_ids = sorted(self._get_client().smembers(f"{KEY_PREFIX}:profiles"))
        except Exception as e:
            logger.warning("Redis profile list failed: %s", e)
            return []
        return [p for p in (self.get(b) for b in baby_ids) if p]


class RedisFormulaStore(_RedisBacked):
    """Redis-backed custom formula store. Rules live in one hash."""

    @property
    def _hash(self) -> str:
        return f"{KEY_PREFIX}:formulas"

    def get(self, rule_id: str) -> EasyFormulaRule | None:
        try:
            data = self._get_client().hget(self._hash, rule_id)
            if not data:
                return None
            return EasyFormulaRule.model_validate(json.loads(data))
        except Exception as e:
            logger.warning("Redis formula get failed: %s", e)
            return None

    def list(self, baby_id: str | None = None) -> list[EasyFormulaRule]:
        try:
            raw = self._get_client().hgetall(self._hash)
        except Exception as e:
            logger.warning("Redis formula list failed: %s", e)
            return []
        rules = []
        for rule_id in sorted(raw):
            try:
                rule = EasyFormulaRule.model_validate(json.loads(raw[rule_id]))
            except ValueError as e:
                logger.warning("Skipping bad formula %s: %s", rule_id, e)
                continue
            if baby_id is None or rule.baby_id == baby_id:
                rules.append(rule)
        return rules

    def save(self, rule: EasyFormulaRule) -> None:
        try:
            self._get_client().hset(self._hash, rule.id, json.dumps(rule.model_dump(mode="json")))
        except Exception as e:
            logger.error("Redis formula save failed: %s", e)
            raise

    def delete(self, rule_id: str) -> bool:
        try:
            return bool(self._get_client().hdel(self._hash, rule_id))
        except Exception as e:
            logger.error("Redis formula delete failed: %s", e)
            raise


class RedisActivityStore(_RedisBacked):
    """Redis-backed activity log. One list per baby."""

    def __init__(self, redis_url: str, client=None) -> None:
        super().__init__(redis_url, client)
        self._clock = CreationClock()

    def _key(self, baby_id: str) -> str:
        return f"{KEY_PREFIX}:activities:{safe_key(baby_id)}"

    def add(self, record: ActivityRecord) -> ActivityRecord:
        stored = record.model_copy(update={"created_at": self._clock.next()})
        try:
            self._get_client().rpush(self._key(record.baby_id), stored.model_dump_json())
        except Exception as e:
            logger.error("Redis activity append failed: %s", e)
            raise
        return stored

    def list(
        self,
        baby_id: str,
        kind: ActivityKind | None = None,
        since: datetime | None = None,
        until: datetime | None = None,
    ) -> list[ActivityRecord]:
        try:
            data = self._get_client().lrange(self._key(baby_id), 0, -1)
            records = [ActivityRecord.model_validate_json(m) for m in data]
        except Exception as e:
            logger.warning("Redis activity list failed: %s", e)
            return []
        return filter_activities(records, baby_id, kind, since, until)
