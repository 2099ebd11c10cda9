"""
Tests for choosing the day's formula.
"""

from datetime import date

from baby_easy_schedule.models import FormulaSource
from baby_easy_schedule.services.formula_selector import select_formula

from helpers import SCHEDULE_DATE, phases


class TestSelectFormula:
    def test_no_profile_uses_default(self, catalog):
        selection = select_formula(catalog, None, SCHEDULE_DATE)
        assert selection.rule.id == "easy3"
        assert selection.source is FormulaSource.DEFAULT

    def test_age_based(self, catalog, profile):
        selection = select_formula(catalog, profile, SCHEDULE_DATE)
        assert selection.rule.id == "easy4"
        assert selection.source is FormulaSource.AGE

    def test_explicit_selection(self, catalog, profile):
        profile = profile.model_copy(update={"selected_formula_id": "easy234"})
        selection = select_formula(catalog, profile, SCHEDULE_DATE)
        assert selection.rule.id == "easy234"
        assert selection.source is FormulaSource.SELECTED

    def test_stale_selection_falls_back_to_age(self, catalog, profile):
        profile = profile.model_copy(update={"selected_formula_id": "custom_gone_1"})
        selection = select_formula(catalog, profile, SCHEDULE_DATE)
        assert selection.rule.id == "easy4"
        assert selection.source is FormulaSource.AGE

    def test_day_override_wins(self, catalog, profile):
        clone = catalog.clone_for_date(profile.baby_id, "easy4", SCHEDULE_DATE, phases((45, 90, 120)))
        profile = profile.model_copy(update={"selected_formula_id": "easy234"})
        selection = select_formula(catalog, profile, SCHEDULE_DATE)
        assert selection.rule.id == clone.id
        assert selection.source is FormulaSource.DAY_OVERRIDE

    def test_day_override_expires(self, catalog, profile):
        catalog.clone_for_date(profile.baby_id, "easy4", SCHEDULE_DATE, phases((45, 90, 120)))
        selection = select_formula(catalog, profile, date(2026, 3, 17))
        assert selection.rule.id == "easy4"
        assert selection.source is FormulaSource.AGE

    def test_selected_day_rule_for_other_date_uses_source(self, catalog, profile):
        clone = catalog.clone_for_date(profile.baby_id, "easy234", SCHEDULE_DATE, phases((45, 90, 120)))
        profile = profile.model_copy(update={"selected_formula_id": clone.id})
        selection = select_formula(catalog, profile, date(2026, 3, 17))
        assert selection.rule.id == "easy234"
        assert selection.source is FormulaSource.SELECTED

    def test_custom_rule_by_age(self, catalog, profile):
        custom = catalog.create_custom(profile.baby_id, "Ours", 9, 11, phases((30, 90, 90)))
        selection = select_formula(catalog, profile, SCHEDULE_DATE)
        assert selection.rule.id == custom.id
        assert selection.source is FormulaSource.AGE

    def test_uncovered_age_uses_default(self, formula_store, predefined, profile):
        from baby_easy_schedule.rules import FormulaCatalog

        catalog = FormulaCatalog(formula_store, [r for r in predefined if r.id == "easy3"])
        selection = select_formula(catalog, profile, SCHEDULE_DATE)
        assert selection.rule.id == "easy3"
        assert selection.source is FormulaSource.DEFAULT
