"""Configuration management - config-driven architecture."""

from functools import lru_cache
from pathlib import Path
from typing import Any

import yaml
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_FORMULAS_PATH = Path(__file__).parent / "rules" / "easy_formulas.yaml"


class Settings(BaseSettings):
    """Application settings from environment and .env."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Server
    host: str = Field(default="0.0.0.0", description="Bind host")
    port: int = Field(default=8000, description="Bind port")
    reload: bool = Field(default=False, description="Restart the server on code changes")
    log_level: str = Field(default="INFO", description="Log level for the app and the server")

    # Data
    data_dir: Path = Field(default=Path("data"), description="Directory for JSON persistence")
    redis_url: str | None = Field(default=None, description="Redis URL for cloud persistence (e.g. Upstash)")
    formulas_path: Path | None = Field(
        default=None,
        description="YAML file with predefined EASY formulas; bundled catalog when unset",
    )

    # Schedule
    default_first_wake_time: str = Field(default="07:00", description="First wake time when nothing else is known")
    earliest_wake_time: str = Field(default="04:00", description="Logged wakes before this are night wakings")
    latest_wake_time: str = Field(default="12:00", description="Logged wakes from this time on are nap wakes")
    day_rule_retention_days: int = Field(default=7, description="Days to keep day-specific formula overrides")

    # Reminders
    reminder_advance_minutes: int = Field(default=10, description="Minutes before an activity to remind")
    reminder_days_ahead: int = Field(default=2, description="Days of reminders to plan")


def load_yaml_config(config_path: Path) -> dict[str, Any]:
    """Load YAML config file."""
    if not config_path.exists():
        return {}
    with config_path.open() as f:
        return yaml.safe_load(f) or {}


@lru_cache
def get_settings() -> Settings:
    """Cached settings instance."""
    return Settings()


@lru_cache
def get_formula_rules(config_path_str: str = "") -> dict[str, Any]:
    """Load the predefined formula catalog from YAML."""
    if not config_path_str:
        formulas_path = get_settings().formulas_path or DEFAULT_FORMULAS_PATH
    else:
        formulas_path = Path(config_path_str)
    return load_yaml_config(formulas_path)
