"""Custom and day-specific formula persistence - JSON file storage."""

import json
import logging
from pathlib import Path

from pydantic import ValidationError

from baby_easy_schedule.models import EasyFormulaRule
from baby_easy_schedule.persistence.profile_store import safe_key

logger = logging.getLogger(__name__)


class FormulaStore:
    """File-based store for user-created rules. Predefined rules live in YAML."""

    def __init__(self, data_dir: Path) -> None:
        self._dir = Path(data_dir) / "formulas"
        self._dir.mkdir(parents=True, exist_ok=True)

    def _path(self, rule_id: str) -> Path:
        return self._dir / f"{safe_key(rule_id)}.json"

    def get(self, rule_id: str) -> EasyFormulaRule | None:
        path = self._path(rule_id)
        if not path.exists():
            return None
        try:
            with path.open() as f:
                rule = EasyFormulaRule.model_validate(json.load(f))
        except (json.JSONDecodeError, OSError, ValidationError) as e:
            logger.warning("Could not load formula %s: %s", path, e)
            return None
        return rule if rule.id == rule_id else None

    def list(self, baby_id: str | None = None) -> list[EasyFormulaRule]:
        """All stored rules, optionally only those owned by baby_id."""
        rules = []
        for path in sorted(self._dir.glob("*.json")):
            rule = self.get(path.stem)
            if rule is None:
                continue
            if baby_id is None or rule.baby_id == baby_id:
                rules.append(rule)
        return rules

    def save(self, rule: EasyFormulaRule) -> None:
        path = self._path(rule.id)
        try:
            with path.open("w") as f:
                json.dump(rule.model_dump(mode="json"), f, indent=2)
        except OSError as e:
            logger.error("Could not save formula %s: %s", path, e)
            raise

    def delete(self, rule_id: str) -> bool:
        """Remove a rule. Returns False if it did not exist."""
        path = self._path(rule_id)
        if not path.exists():
            return False
        path.unlink()
        return True
