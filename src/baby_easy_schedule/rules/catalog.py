"""Formula catalog: predefined rules from config plus per-baby custom rules."""

import logging
import time
from collections.abc import Sequence
from datetime import date, timedelta
from typing import Any, Protocol

from baby_easy_schedule.config import get_formula_rules
from baby_easy_schedule.errors import ForbiddenRuleChangeError, FormulaNotFoundError
from baby_easy_schedule.models import EasyCyclePhase, EasyFormulaRule, parse_phases

logger = logging.getLogger(__name__)

# Marks an update keyword that was not passed, where None is a real value.
UNSET = object()


class RuleStore(Protocol):
    def get(self, rule_id: str) -> EasyFormulaRule | None: ...

    def list(self, baby_id: str | None = None) -> list[EasyFormulaRule]: ...

    def save(self, rule: EasyFormulaRule) -> None: ...

    def delete(self, rule_id: str) -> bool: ...


def load_predefined(config: dict[str, Any]) -> list[EasyFormulaRule]:
    """Build predefined rules from the YAML catalog, ordered by min_weeks."""
    rules = []
    for entry in config.get("formulas", []):
        data = dict(entry)
        data["phases"] = parse_phases(data.get("phases"))
        data["is_custom"] = False
        data["baby_id"] = None
        data["valid_date"] = None
        rules.append(EasyFormulaRule.model_validate(data))
    return sorted(rules, key=lambda r: r.min_weeks)


def age_range_text(min_weeks: int, max_weeks: int | None) -> str:
    return f"{min_weeks} - {max_weeks if max_weeks is not None else '∞'} weeks"


class FormulaCatalog:
    """Resolves formula rules. Predefined rules are read-only."""

    def __init__(
        self,
        store: RuleStore,
        predefined: Sequence[EasyFormulaRule] | None = None,
    ) -> None:
        self._store = store
        if predefined is None:
            predefined = load_predefined(get_formula_rules())
        self._predefined = sorted(predefined, key=lambda r: r.min_weeks)
        self._predefined_by_id = {r.id: r for r in self._predefined}
        if not self._predefined:
            logger.warning("Formula catalog has no predefined rules")

    def _new_id(self, prefix: str) -> str:
        rule_id = f"{prefix}_{int(time.time() * 1000)}"
        suffix = 1
        while self._store.get(rule_id) is not None:
            rule_id = f"{prefix}_{int(time.time() * 1000)}_{suffix}"
            suffix += 1
        return rule_id

    # Queries

    def predefined(self) -> list[EasyFormulaRule]:
        return list(self._predefined)

    def default_rule(self) -> EasyFormulaRule:
        """First predefined rule, used when nothing else applies."""
        if not self._predefined:
            raise FormulaNotFoundError("default")
        return self._predefined[0]

    def user_custom(self, baby_id: str) -> list[EasyFormulaRule]:
        """Custom rules of a baby, excluding day-specific ones."""
        return [r for r in self._store.list(baby_id) if r.is_custom and not r.is_day_specific]

    def day_specific(self, baby_id: str) -> list[EasyFormulaRule]:
        """Day-specific rules of a baby, newest date first."""
        rules = [r for r in self._store.list(baby_id) if r.is_day_specific]
        return sorted(rules, key=lambda r: r.valid_date, reverse=True)

    def rules(self, baby_id: str | None = None) -> list[EasyFormulaRule]:
        """Predefined plus the baby's custom rules, ordered by min_weeks."""
        rules = self.predefined()
        if baby_id:
            rules.extend(self.user_custom(baby_id))
        return sorted(rules, key=lambda r: r.min_weeks)

    def get_by_id(self, rule_id: str, baby_id: str | None = None) -> EasyFormulaRule | None:
        """Predefined rule, or a custom rule (day-specific included) owned by baby_id."""
        if rule_id in self._predefined_by_id:
            return self._predefined_by_id[rule_id]
        if not baby_id:
            return None
        rule = self._store.get(rule_id)
        if rule is None or rule.baby_id != baby_id:
            return None
        return rule

    def get_by_age(self, weeks: int, baby_id: str | None = None) -> EasyFormulaRule | None:
        """The baby's covering custom rule first, then the first covering predefined rule."""
        weeks = max(0, weeks)
        if baby_id:
            for rule in sorted(self.user_custom(baby_id), key=lambda r: r.min_weeks):
                if rule.covers_age(weeks):
                    return rule
        for rule in self._predefined:
            if rule.covers_age(weeks):
                return rule
        return None

    def get_by_date(self, baby_id: str, on: date) -> EasyFormulaRule | None:
        for rule in self._store.list(baby_id):
            if rule.is_custom and rule.valid_date == on:
                return rule
        return None

    # Mutations

    def create_custom(
        self,
        baby_id: str,
        name: str,
        min_weeks: int,
        max_weeks: int | None,
        phases: Sequence[EasyCyclePhase],
        description: str | None = None,
    ) -> EasyFormulaRule:
        rule = EasyFormulaRule(
            id=self._new_id(f"custom_{baby_id}"),
            baby_id=baby_id,
            is_custom=True,
            min_weeks=min_weeks,
            max_weeks=max_weeks,
            label_text=name,
            age_range_text=age_range_text(min_weeks, max_weeks),
            description=description,
            phases=list(phases),
        )
        self._store.save(rule)
        logger.info("Created custom formula %s for baby %s", rule.id, baby_id)
        return rule

    def _owned_custom(self, rule_id: str, baby_id: str) -> EasyFormulaRule:
        if rule_id in self._predefined_by_id:
            raise ForbiddenRuleChangeError(f"Cannot change predefined formula {rule_id!r}")
        rule = self._store.get(rule_id)
        if rule is None or not rule.is_custom or rule.baby_id != baby_id:
            raise FormulaNotFoundError(rule_id)
        return rule

    def update_custom(
        self,
        rule_id: str,
        baby_id: str,
        *,
        name: str | None = None,
        min_weeks: int | None = None,
        max_weeks: int | None | object = UNSET,
        phases: Sequence[EasyCyclePhase] | None = None,
        description: str | None | object = UNSET,
    ) -> EasyFormulaRule:
        """
        Update fields that are given; the age range text follows the weeks.
        An explicit None makes max_weeks open-ended or clears the description.
        """
        rule = self._owned_custom(rule_id, baby_id)
        data = rule.model_dump()
        if name is not None:
            data["label_text"] = name
        if min_weeks is not None:
            data["min_weeks"] = min_weeks
        if max_weeks is not UNSET:
            data["max_weeks"] = max_weeks
        if phases is not None:
            data["phases"] = [p.model_dump() for p in phases]
        if description is not UNSET:
            data["description"] = description
        data["age_range_text"] = age_range_text(data["min_weeks"], data["max_weeks"])
        updated = EasyFormulaRule.model_validate(data)
        self._store.save(updated)
        return updated

    def delete_custom(self, rule_id: str, baby_id: str) -> None:
        self._owned_custom(rule_id, baby_id)
        self._store.delete(rule_id)
        logger.info("Deleted custom formula %s for baby %s", rule_id, baby_id)

    def clone_for_date(
        self,
        baby_id: str,
        source_rule_id: str,
        on: date,
        phases: Sequence[EasyCyclePhase],
        first_wake_time: str | None = None,
    ) -> EasyFormulaRule:
        """
        Day-specific copy of source_rule_id with new phases.
        An existing rule for (baby, on) is updated in place; its pinned wake
        time is kept unless a new one is given.
        """
        source = self.get_by_id(source_rule_id, baby_id)
        if source is None:
            raise FormulaNotFoundError(source_rule_id)

        existing = self.get_by_date(baby_id, on)
        if existing:
            changes = {"source_rule_id": source_rule_id, "phases": list(phases)}
            if first_wake_time is not None:
                changes["first_wake_time"] = first_wake_time
            updated = existing.model_copy(update=changes)
            self._store.save(updated)
            return updated

        clone = source.model_copy(
            update={
                "id": self._new_id(f"day_{baby_id}_{on.strftime('%Y%m%d')}"),
                "baby_id": baby_id,
                "is_custom": True,
                "valid_date": on,
                "source_rule_id": source_rule_id,
                "phases": list(phases),
                "first_wake_time": first_wake_time,
            }
        )
        self._store.save(clone)
        logger.info("Cloned formula %s for baby %s on %s", source_rule_id, baby_id, on)
        return clone

    def prune_day_specific(self, older_than: date) -> int:
        """Delete day-specific rules dated before older_than. Returns count."""
        removed = 0
        for rule in self._store.list():
            if rule.valid_date is not None and rule.valid_date < older_than:
                self._store.delete(rule.id)
                removed += 1
        if removed:
            logger.info("Pruned %d day-specific formulas before %s", removed, older_than)
        return removed

    def prune_expired(self, today: date, retention_days: int) -> int:
        return self.prune_day_specific(today - timedelta(days=retention_days))
