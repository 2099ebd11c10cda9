"""Decides which formula applies to a baby on a given day."""

import logging
from dataclasses import dataclass
from datetime import date

from baby_easy_schedule.models import BabyProfile, EasyFormulaRule, FormulaSource
from baby_easy_schedule.rules import FormulaCatalog

logger = logging.getLogger(__name__)


@dataclass
class FormulaSelection:
    rule: EasyFormulaRule
    source: FormulaSource


def resolve_selected(
    catalog: FormulaCatalog,
    profile: BabyProfile,
    on: date,
) -> EasyFormulaRule | None:
    """
    The profile's explicit choice, if still available.
    A day-specific rule for another date falls back to the rule it was cloned from.
    """
    rule_id = profile.selected_formula_id
    if not rule_id:
        return None
    rule = catalog.get_by_id(rule_id, profile.baby_id)
    if rule is None:
        logger.warning("Selected formula %s for baby %s no longer exists", rule_id, profile.baby_id)
        return None
    if rule.is_day_specific and rule.valid_date != on:
        if not rule.source_rule_id:
            return None
        return catalog.get_by_id(rule.source_rule_id, profile.baby_id)
    return rule


def select_formula(
    catalog: FormulaCatalog,
    profile: BabyProfile | None,
    on: date,
) -> FormulaSelection:
    """Day override, then explicit selection, then age band, then the default rule."""
    if profile is None:
        return FormulaSelection(catalog.default_rule(), FormulaSource.DEFAULT)

    day_rule = catalog.get_by_date(profile.baby_id, on)
    if day_rule is not None:
        return FormulaSelection(day_rule, FormulaSource.DAY_OVERRIDE)

    selected = resolve_selected(catalog, profile, on)
    if selected is not None:
        return FormulaSelection(selected, FormulaSource.SELECTED)

    by_age = catalog.get_by_age(profile.age_in_weeks(on), profile.baby_id)
    if by_age is not None:
        return FormulaSelection(by_age, FormulaSource.AGE)

    return FormulaSelection(catalog.default_rule(), FormulaSource.DEFAULT)
