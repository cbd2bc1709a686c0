"""Environment configuration for projectsync."""

import os

from dotenv import find_dotenv, load_dotenv
from pydantic import BaseModel, Field, ValidationError, field_validator

from projectsync.models import DEFAULT_BASE_PATH, SyncOptions
from projectsync.sync.fetcher import DEFAULT_FALLBACK, DEFAULT_TIMEOUT, PROJECTS_ZIP_URL, ArchiveFetcher

ENV_PREFIX = "PROJECTSYNC_"
VALID_LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


class ConfigError(Exception):
    """Raised when configuration values are invalid."""

    pass


def parse_bool(value: str) -> bool:
    return value.strip().lower() in ["true", "1", "yes"]


class Settings(BaseModel):
    """Settings for locating and synchronizing the project archive."""

    zip_url: str = Field(PROJECTS_ZIP_URL, description="Primary archive location")
    base_path: str = Field(DEFAULT_BASE_PATH, description="Directory project files are written under")
    app_url: str | None = Field(None, description="Deployment address used to derive the fallback")
    fallback_path: str = Field(DEFAULT_FALLBACK, description="Fallback archive location without an app URL")
    use_fallback: bool = Field(True, description="Allow the fallback location")
    timeout: float = Field(DEFAULT_TIMEOUT, gt=0, description="HTTP timeout in seconds")
    log_level: str = Field("INFO", description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)")
    debug: bool = Field(False, description="Enable file logging")
    log_file: str = Field("projectsync.log", description="Log file used in debug mode")

    @field_validator("log_level")
    @classmethod
    def _validate_log_level(cls, value: str) -> str:
        value = value.upper()
        if value not in VALID_LOG_LEVELS:
            raise ValueError(f"must be one of {', '.join(VALID_LOG_LEVELS)}")
        return value

    def fetcher(self) -> ArchiveFetcher:
        """Build an archive fetcher from these settings."""
        fallback = None if self.app_url else self.fallback_path
        return ArchiveFetcher(app_url=self.app_url, fallback=fallback, timeout=self.timeout)

    def options(self, **overrides) -> SyncOptions:
        """Build sync options from these settings, applying any overrides."""
        values = {"base_path": self.base_path, "use_fallback": self.use_fallback}
        values.update(overrides)
        return SyncOptions(**values)


def load_settings(**overrides) -> Settings:
    """
    Load settings from the environment and a local .env file.

    Environment variables use the ``PROJECTSYNC_`` prefix, e.g.
    ``PROJECTSYNC_ZIP_URL`` or ``PROJECTSYNC_LOG_LEVEL``. Keyword overrides
    win over the environment.

    Raises:
        ConfigError: If a value fails validation
    """
    load_dotenv(find_dotenv(usecwd=True))

    values: dict[str, object] = {}
    for name, field in Settings.model_fields.items():
        raw = os.getenv(ENV_PREFIX + name.upper())
        if raw is None or raw == "":
            continue
        values[name] = parse_bool(raw) if field.annotation is bool else raw
    values.update({key: value for key, value in overrides.items() if value is not None})

    try:
        return Settings(**values)
    except ValidationError as error:
        raise ConfigError(f"Invalid configuration: {error}") from error
