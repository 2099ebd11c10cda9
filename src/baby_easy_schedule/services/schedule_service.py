"""Schedule service - business logic layer for EASY schedules."""

import logging
from datetime import date, datetime, time, timedelta

from baby_easy_schedule.config import Settings, get_settings
from baby_easy_schedule.errors import (
    FormulaNotFoundError,
    InvalidAdjustmentError,
    ProfileNotFoundError,
)
from baby_easy_schedule.models import (
    ActivityKind,
    ActivityType,
    BabyProfile,
    EasyCyclePhase,
    EasySchedule,
    FormulaSource,
    PhaseProgress,
    ScheduleItem,
    ScheduleLabels,
)
from baby_easy_schedule.persistence import ActivityStore, ProfileStore
from baby_easy_schedule.rules import FormulaCatalog
from baby_easy_schedule.schedule.clock import add_minutes, duration_between, format_time, parse_time
from baby_easy_schedule.schedule.generator import generate_easy_schedule
from baby_easy_schedule.schedule.timeline import (
    current_item,
    group_cycles,
    normalize_now,
    phase_status,
    start_delta,
    visible_items,
)
from baby_easy_schedule.schedule.wake import resolve_first_wake
from baby_easy_schedule.services.formula_selector import select_formula
from baby_easy_schedule.services.reminder_service import Reminder, plan_reminders

logger = logging.getLogger(__name__)


def adjusted_phase(phase: EasyCyclePhase, activity_type: ActivityType, minutes: int) -> EasyCyclePhase:
    """Copy of phase with the duration behind activity_type replaced."""
    if activity_type is ActivityType.EAT:
        return phase.model_copy(update={"eat": minutes})
    if activity_type is ActivityType.ACTIVITY:
        return phase.model_copy(update={"activity": minutes})
    if activity_type is ActivityType.EAT_ACTIVITY:
        return phase.model_copy(update={"eat_activity": minutes, "combined": False})
    return phase.model_copy(update={"sleep": minutes})


class ScheduleService:
    """Orchestrates formula selection, wake resolution and generation."""

    def __init__(
        self,
        profile_store: ProfileStore,
        activity_store: ActivityStore,
        catalog: FormulaCatalog,
        settings: Settings | None = None,
    ) -> None:
        self._profiles = profile_store
        self._activities = activity_store
        self._catalog = catalog
        self._settings = settings or get_settings()

    def _require_profile(self, baby_id: str) -> BabyProfile:
        profile = self._profiles.get(baby_id)
        if profile is None:
            raise ProfileNotFoundError(baby_id)
        return profile

    def _sleep_records(self, profile: BabyProfile, on: date):
        # Night sleep that ends on `on` usually started the evening before.
        since = datetime.combine(on - timedelta(days=1), time(0, 0), tzinfo=profile.tzinfo)
        until = datetime.combine(on + timedelta(days=1), time(0, 0), tzinfo=profile.tzinfo)
        return self._activities.list(profile.baby_id, ActivityKind.SLEEP, since, until)

    def get_schedule(
        self,
        baby_id: str,
        on: date | None = None,
        wake_override: str | None = None,
        labels: ScheduleLabels | None = None,
    ) -> EasySchedule:
        """Today's (or `on`'s) schedule for a baby."""
        profile = self._require_profile(baby_id)
        on = on or datetime.now(profile.tzinfo).date()
        selection = select_formula(self._catalog, profile, on)
        wake = resolve_first_wake(
            profile,
            self._sleep_records(profile, on),
            on,
            default_time=self._settings.default_first_wake_time,
            earliest=self._settings.earliest_wake_time,
            latest=self._settings.latest_wake_time,
            override=wake_override,
            pinned=selection.rule.first_wake_time if selection.source is FormulaSource.DAY_OVERRIDE else None,
        )
        items = generate_easy_schedule(wake.time, selection.rule.phases, labels or ScheduleLabels())
        logger.info(
            "Schedule for %s on %s: formula %s (%s), wake %s (%s)",
            baby_id,
            on,
            selection.rule.id,
            selection.source.value,
            wake.time,
            wake.source.value,
        )
        return EasySchedule(
            schedule_date=on,
            baby_id=baby_id,
            rule_id=selection.rule.id,
            rule_label=selection.rule.display_label,
            formula_source=selection.source,
            first_wake_time=wake.time,
            wake_source=wake.source,
            wake_offset_minutes=wake.offset_minutes,
            items=items,
        )

    def current_phase(self, baby_id: str, now: datetime | None = None) -> PhaseProgress:
        """The item in progress, how far along it is and what comes next."""
        profile = self._require_profile(baby_id)
        local = (now or datetime.now(profile.tzinfo)).astimezone(profile.tzinfo)
        schedule = self.get_schedule(baby_id, local.date())
        now_minutes = local.hour * 60 + local.minute

        shown = visible_items(schedule.items)
        item = current_item(shown, now_minutes)
        axis_now = normalize_now(shown, now_minutes)
        next_item = next((i for i in shown if i.start_minutes > axis_now), None)
        progress = None
        cycle_items: list[ScheduleItem] = []
        if item is not None:
            progress = phase_status(item, now_minutes, shown).progress
            cycle_items = next(g for g in group_cycles(shown) if g[0].cycle == item.cycle)
        return PhaseProgress(
            schedule_date=schedule.schedule_date,
            now_time=format_time(now_minutes),
            item=item,
            progress=progress,
            next_item=next_item,
            cycle_items=cycle_items,
        )

    def select_formula(self, baby_id: str, rule_id: str | None) -> BabyProfile:
        """Pin a formula for the baby; None returns to age-based selection."""
        profile = self._require_profile(baby_id)
        if rule_id is not None:
            rule = self._catalog.get_by_id(rule_id, baby_id)
            if rule is None or rule.is_day_specific:
                raise FormulaNotFoundError(rule_id)
        updated = profile.model_copy(update={"selected_formula_id": rule_id})
        self._profiles.save(updated)
        return updated

    def set_first_wake_time(self, baby_id: str, wake_time: str) -> BabyProfile:
        profile = self._require_profile(baby_id)
        updated = profile.model_copy(update={"first_wake_time": format_time(parse_time(wake_time))})
        self._profiles.save(updated)
        return updated

    def adjust_phase(
        self,
        baby_id: str,
        item_order: int,
        new_start: str,
        new_end: str,
        on: date | None = None,
    ) -> EasySchedule:
        """
        Change one item's timing for a single day.
        The duration goes into a day-specific copy of the active formula. A moved
        start pins that day's first wake on the copy and shifts the baby's usual
        wake time by the same number of minutes.
        """
        schedule = self.get_schedule(baby_id, on)
        on = schedule.schedule_date
        item = next((i for i in schedule.items if i.order == item_order), None)
        if item is None:
            raise InvalidAdjustmentError(
                f"Invalid item order {item_order} for {len(schedule.items)} schedule items"
            )

        minutes = duration_between(new_start, new_end)
        if minutes <= 0:
            raise InvalidAdjustmentError("Invalid duration: end time must be after start time")

        rule = self._catalog.get_by_id(schedule.rule_id, baby_id)
        if rule is None:
            raise FormulaNotFoundError(schedule.rule_id)
        phases = list(rule.phases)
        index = item.cycle - 1
        phases[index] = adjusted_phase(phases[index], item.activity_type, minutes)

        delta = start_delta(item, new_start)
        day_wake = add_minutes(schedule.first_wake_time, delta) if delta else None
        source_rule_id = rule.source_rule_id if rule.is_day_specific and rule.source_rule_id else rule.id
        day_rule = self._catalog.clone_for_date(baby_id, source_rule_id, on, phases, day_wake)
        logger.info(
            "Adjusted item %d (%s) of %s to %d min in %s",
            item_order,
            item.activity_type.value,
            baby_id,
            minutes,
            day_rule.id,
        )

        profile = self._require_profile(baby_id)
        changes = {}
        selected = profile.selected_formula_id
        if selected:
            selected_rule = self._catalog.get_by_id(selected, baby_id)
            if selected_rule is not None and selected_rule.is_day_specific:
                changes["selected_formula_id"] = selected_rule.source_rule_id
        if delta:
            changes["first_wake_time"] = add_minutes(profile.first_wake_time, delta)
        if changes:
            self._profiles.save(profile.model_copy(update=changes))

        return self.get_schedule(baby_id, on)

    def get_reminders(self, baby_id: str, now: datetime | None = None) -> list[Reminder]:
        """Reminders for the current schedule over the configured days ahead."""
        profile = self._require_profile(baby_id)
        now = now or datetime.now(profile.tzinfo)
        schedule = self.get_schedule(baby_id, now.astimezone(profile.tzinfo).date())
        return plan_reminders(
            schedule.items,
            now,
            profile.tzinfo,
            advance_minutes=self._settings.reminder_advance_minutes,
            days_ahead=self._settings.reminder_days_ahead,
        )

    def prune_day_overrides(self, today: date | None = None) -> int:
        """Drop day-specific formulas past the retention window."""
        today = today or date.today()
        return self._catalog.prune_expired(today, self._settings.day_rule_retention_days)
