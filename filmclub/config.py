"""Club configuration and runtime settings."""

import logging
import os
import re

from dotenv import load_dotenv
from pydantic import BaseModel, Field, ValidationError, field_validator

logger = logging.getLogger(__name__)

TIME_PATTERN = re.compile(r"^([0-1][0-9]|2[0-3]):[0-5][0-9]$")

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


class ConfigError(ValueError):
    """Raised when club configuration or settings are invalid."""
    pass


class VotingSchedule(BaseModel):
    """Weekly voting window.

    Days follow the club's convention: 0 = Sunday ... 6 = Saturday.
    Times are local "HH:mm".
    """

    open_day: int = Field(ge=0, le=6)
    open_time: str
    close_day: int = Field(ge=0, le=6)
    close_time: str

    @field_validator("open_time", "close_time")
    @classmethod
    def _check_time(cls, value: str) -> str:
        if not TIME_PATTERN.match(value):
            raise ValueError('Invalid time format. Use HH:mm (e.g., "18:00")')
        return value


class ClubConfig(BaseModel):
    """Club-wide configuration set once at setup."""

    club_name: str = Field(min_length=1)
    timezone: str = "UTC"
    voting_schedule: VotingSchedule

    @classmethod
    def from_dict(cls, data: dict) -> "ClubConfig":
        """Build from a stored config document (camelCase keys)."""
        schedule = data.get("votingSchedule") or {}
        try:
            return cls(
                club_name=data.get("clubName", ""),
                timezone=data.get("timezone", "UTC"),
                voting_schedule=VotingSchedule(
                    open_day=schedule.get("openDay", -1),
                    open_time=schedule.get("openTime", ""),
                    close_day=schedule.get("closeDay", -1),
                    close_time=schedule.get("closeTime", ""),
                ),
            )
        except ValidationError as e:
            raise ConfigError(f"Invalid club configuration: {e}") from e


class Settings(BaseModel):
    """Runtime settings, read from FILMCLUB_* environment variables."""

    algorithm: str = "condorcet"
    history_limit: int = Field(default=50, gt=0)
    log_level: str = "INFO"
    fetch_timeout: float = Field(default=30.0, gt=0)

    @classmethod
    def from_env(cls, environ: dict[str, str] | None = None) -> "Settings":
        """Load settings from the environment (and a .env file if present)."""
        if environ is None:
            load_dotenv()
            environ = dict(os.environ)

        values = {}
        for name in cls.model_fields:
            key = f"FILMCLUB_{name.upper()}"
            if key in environ:
                values[name] = environ[key]

        try:
            return cls(**values)
        except ValidationError as e:
            raise ConfigError(f"Invalid settings: {e}") from e


_settings: Settings | None = None


def get_settings() -> Settings:
    """Return process-wide settings, loading them on first use."""
    global _settings
    if _settings is None:
        _settings = Settings.from_env()
        logger.debug("Loaded settings: %s", _settings)
    return _settings


def configure_logging(level: str | None = None) -> None:
    """Set up root logging for scripts and the serverless handler."""
    level = (level or get_settings().log_level).upper()
    logging.basicConfig(level=level, format=LOG_FORMAT)
