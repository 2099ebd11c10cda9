"""FastAPI application - schedule, formula and profile endpoints."""

import logging
from contextlib import asynccontextmanager
from dataclasses import asdict
from datetime import date, datetime
from typing import Any

from fastapi import Depends, FastAPI, HTTPException, Query, Request, Response
from fastapi.responses import JSONResponse, PlainTextResponse

from baby_easy_schedule.config import get_settings
from baby_easy_schedule.errors import (
    ForbiddenRuleChangeError,
    FormulaNotFoundError,
    ProfileNotFoundError,
)
from baby_easy_schedule.models import (
    ActivityKind,
    ActivityRecord,
    BabyProfile,
    EasyFormulaRule,
    EasySchedule,
    PhaseProgress,
)
from baby_easy_schedule.persistence import create_stores
from baby_easy_schedule.rules import FormulaCatalog
from baby_easy_schedule.schemas import (
    ActivityCreate,
    CustomFormulaCreate,
    CustomFormulaUpdate,
    FirstWakeTimeUpdate,
    FormulaChoice,
    PhaseAdjustment,
    ProfileUpdate,
)
from baby_easy_schedule.services import ProfileService, ScheduleService

logging.basicConfig(
    level=get_settings().log_level.upper(),
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

# Dependency injection - created at startup
_catalog: FormulaCatalog | None = None
_profiles: ProfileService | None = None
_schedules: ScheduleService | None = None


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Initialize and cleanup."""
    global _catalog, _profiles, _schedules
    stores = create_stores()
    _catalog = FormulaCatalog(stores.formulas)
    _profiles = ProfileService(stores.profiles, stores.activities)
    _schedules = ScheduleService(stores.profiles, stores.activities, _catalog)
    pruned = _schedules.prune_day_overrides()
    logger.info("Started with %d predefined formulas, pruned %d day overrides", len(_catalog.predefined()), pruned)
    yield
    _catalog = _profiles = _schedules = None


app = FastAPI(
    title="Baby EASY Schedule",
    description="E.A.S.Y. routine generation for baby tracking",
    version="0.1.0",
    lifespan=lifespan,
)


def get_catalog() -> FormulaCatalog:
    if _catalog is None:
        raise HTTPException(status_code=503, detail="Service not ready")
    return _catalog


def get_profile_service() -> ProfileService:
    if _profiles is None:
        raise HTTPException(status_code=503, detail="Service not ready")
    return _profiles


def get_schedule_service() -> ScheduleService:
    if _schedules is None:
        raise HTTPException(status_code=503, detail="Service not ready")
    return _schedules


@app.exception_handler(ProfileNotFoundError)
@app.exception_handler(FormulaNotFoundError)
async def not_found_handler(request: Request, exc: Exception) -> JSONResponse:
    return JSONResponse(status_code=404, content={"detail": str(exc)})


@app.exception_handler(ForbiddenRuleChangeError)
async def forbidden_handler(request: Request, exc: ForbiddenRuleChangeError) -> JSONResponse:
    return JSONResponse(status_code=403, content={"detail": str(exc)})


@app.exception_handler(ValueError)
async def invalid_input_handler(request: Request, exc: ValueError) -> JSONResponse:
    """Schedule, adjustment and model validation errors raised inside services."""
    logger.warning("Rejected request %s: %s", request.url.path, exc)
    return JSONResponse(status_code=422, content={"detail": str(exc)})


@app.get("/health")
async def health() -> dict[str, str]:
    """Health check for load balancers."""
    return {"status": "ok"}


# Profiles


@app.post("/babies", status_code=201)
async def create_baby(
    profile: BabyProfile,
    profiles: ProfileService = Depends(get_profile_service),
) -> BabyProfile:
    try:
        profiles.get_profile(profile.baby_id)
    except ProfileNotFoundError:
        return profiles.save_profile(profile)
    raise HTTPException(status_code=409, detail=f"Baby profile {profile.baby_id!r} already exists")


@app.get("/babies/{baby_id}")
async def get_baby(
    baby_id: str,
    profiles: ProfileService = Depends(get_profile_service),
) -> BabyProfile:
    return profiles.get_profile(baby_id)


@app.put("/babies/{baby_id}")
async def update_baby(
    baby_id: str,
    body: ProfileUpdate,
    profiles: ProfileService = Depends(get_profile_service),
) -> BabyProfile:
    changes = {field: getattr(body, field) for field in body.model_fields_set}
    return profiles.update_profile(baby_id, **changes)


@app.put("/babies/{baby_id}/formula")
async def choose_formula(
    baby_id: str,
    choice: FormulaChoice,
    schedules: ScheduleService = Depends(get_schedule_service),
) -> BabyProfile:
    return schedules.select_formula(baby_id, choice.rule_id)


@app.put("/babies/{baby_id}/first-wake-time")
async def update_first_wake_time(
    baby_id: str,
    body: FirstWakeTimeUpdate,
    schedules: ScheduleService = Depends(get_schedule_service),
) -> BabyProfile:
    return schedules.set_first_wake_time(baby_id, body.first_wake_time)


# Activities


@app.post("/babies/{baby_id}/activities", status_code=201)
async def log_activity(
    baby_id: str,
    body: ActivityCreate,
    profiles: ProfileService = Depends(get_profile_service),
) -> ActivityRecord:
    return profiles.log_activity(baby_id, body.kind, body.started_at, body.ended_at, body.details)


@app.get("/babies/{baby_id}/activities")
async def list_activities(
    baby_id: str,
    kind: ActivityKind | None = None,
    since: datetime | None = None,
    until: datetime | None = None,
    profiles: ProfileService = Depends(get_profile_service),
) -> list[ActivityRecord]:
    return profiles.list_activities(baby_id, kind, since, until)


# Schedule


@app.get("/babies/{baby_id}/schedule")
async def get_schedule(
    baby_id: str,
    on: date | None = Query(default=None, alias="date"),
    wake: str | None = Query(default=None, description="Override first wake time, HH:MM"),
    schedules: ScheduleService = Depends(get_schedule_service),
) -> EasySchedule:
    return schedules.get_schedule(baby_id, on, wake_override=wake)


@app.get("/babies/{baby_id}/schedule/text")
async def get_schedule_text(
    baby_id: str,
    on: date | None = Query(default=None, alias="date"),
    schedules: ScheduleService = Depends(get_schedule_service),
) -> Response:
    return PlainTextResponse(schedules.get_schedule(baby_id, on).to_text())


@app.get("/babies/{baby_id}/schedule/current")
async def get_current_phase(
    baby_id: str,
    schedules: ScheduleService = Depends(get_schedule_service),
) -> PhaseProgress:
    return schedules.current_phase(baby_id)


@app.post("/babies/{baby_id}/schedule/adjust")
async def adjust_schedule(
    baby_id: str,
    body: PhaseAdjustment,
    schedules: ScheduleService = Depends(get_schedule_service),
) -> EasySchedule:
    return schedules.adjust_phase(
        baby_id,
        body.item_order,
        body.start_time,
        body.end_time,
        body.schedule_date,
    )


@app.get("/babies/{baby_id}/reminders")
async def get_reminders(
    baby_id: str,
    schedules: ScheduleService = Depends(get_schedule_service),
) -> list[dict[str, Any]]:
    return [asdict(r) for r in schedules.get_reminders(baby_id)]


# Formulas


@app.get("/formulas")
async def list_formulas(
    baby_id: str | None = None,
    catalog: FormulaCatalog = Depends(get_catalog),
) -> list[EasyFormulaRule]:
    return catalog.rules(baby_id)


@app.get("/babies/{baby_id}/formulas/day-specific")
async def list_day_formulas(
    baby_id: str,
    catalog: FormulaCatalog = Depends(get_catalog),
) -> list[EasyFormulaRule]:
    return catalog.day_specific(baby_id)


@app.post("/babies/{baby_id}/formulas", status_code=201)
async def create_formula(
    baby_id: str,
    body: CustomFormulaCreate,
    catalog: FormulaCatalog = Depends(get_catalog),
    profiles: ProfileService = Depends(get_profile_service),
) -> EasyFormulaRule:
    profiles.get_profile(baby_id)
    return catalog.create_custom(
        baby_id,
        body.name,
        body.min_weeks,
        body.max_weeks,
        body.phases,
        body.description,
    )


@app.put("/babies/{baby_id}/formulas/{rule_id}")
async def update_formula(
    baby_id: str,
    rule_id: str,
    body: CustomFormulaUpdate,
    catalog: FormulaCatalog = Depends(get_catalog),
) -> EasyFormulaRule:
    changes = {field: getattr(body, field) for field in body.model_fields_set}
    return catalog.update_custom(rule_id, baby_id, **changes)


@app.delete("/babies/{baby_id}/formulas/{rule_id}", status_code=204)
async def delete_formula(
    baby_id: str,
    rule_id: str,
    catalog: FormulaCatalog = Depends(get_catalog),
) -> Response:
    catalog.delete_custom(rule_id, baby_id)
    return Response(status_code=204)
