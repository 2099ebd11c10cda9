"""
Pytest fixtures for EASY schedule tests.
"""

import pytest

from baby_easy_schedule.config import DEFAULT_FORMULAS_PATH, Settings, load_yaml_config
from baby_easy_schedule.models import BabyProfile, ScheduleLabels
from baby_easy_schedule.persistence import ActivityStore, FormulaStore, ProfileStore
from baby_easy_schedule.rules import FormulaCatalog
from baby_easy_schedule.rules.catalog import load_predefined
from baby_easy_schedule.services import ProfileService, ScheduleService

from helpers import BIRTH_DATE


@pytest.fixture
def settings() -> Settings:
    return Settings(_env_file=None, redis_url=None)


@pytest.fixture
def predefined():
    return load_predefined(load_yaml_config(DEFAULT_FORMULAS_PATH))


@pytest.fixture
def labels() -> ScheduleLabels:
    return ScheduleLabels()


@pytest.fixture
def profile_store(tmp_path) -> ProfileStore:
    return ProfileStore(tmp_path)


@pytest.fixture
def formula_store(tmp_path) -> FormulaStore:
    return FormulaStore(tmp_path)


@pytest.fixture
def activity_store(tmp_path) -> ActivityStore:
    return ActivityStore(tmp_path)


@pytest.fixture
def catalog(formula_store, predefined) -> FormulaCatalog:
    return FormulaCatalog(formula_store, predefined)


@pytest.fixture
def profile() -> BabyProfile:
    return BabyProfile(baby_id="baby-1", nickname="Mai", birth_date=BIRTH_DATE)


@pytest.fixture
def saved_profile(profile_store, profile) -> BabyProfile:
    profile_store.save(profile)
    return profile


@pytest.fixture
def profile_service(profile_store, activity_store) -> ProfileService:
    return ProfileService(profile_store, activity_store)


@pytest.fixture
def schedule_service(profile_store, activity_store, catalog, settings) -> ScheduleService:
    return ScheduleService(profile_store, activity_store, catalog, settings)
