"""
Configuration Management.

Two sources, both resolved from the directory holding the .project_root marker:

    config/.env                 secrets (DB_PASSWORD, JWT_SECRET, ANTHROPIC_API_KEY,
                                optional DATABASE_URL override)
    config/settings/*.yaml      everything else, one file per AppConfig section

Both are loaded once and cached. Tests clear the caches with
get_settings.cache_clear() / get_app_config.cache_clear().
"""

from functools import lru_cache
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, ConfigDict, ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

from jotter.backend.core.config_schema import (
    ApplicationSchema,
    DatabaseSchema,
    FeaturesSchema,
    LoggingSchema,
    SecuritySchema,
)

PROJECT_MARKER = ".project_root"


def find_project_root() -> Path:
    """Walk up from the working directory to the .project_root marker."""
    current = Path.cwd()
    while current != current.parent:
        if (current / PROJECT_MARKER).exists():
            return current
        current = current.parent
    raise RuntimeError("Project root not found. Ensure .project_root file exists.")


def load_yaml_config(filename: str) -> dict[str, Any]:
    """Read config/settings/<filename>. An empty file yields an empty dict."""
    config_path = find_project_root() / "config" / "settings" / filename

    if not config_path.exists():
        raise FileNotFoundError(f"Configuration file not found: {config_path}")

    with open(config_path) as f:
        return yaml.safe_load(f) or {}


class Settings(BaseSettings):
    """Secrets loaded from config/.env or the process environment."""

    db_password: str
    jwt_secret: str
    anthropic_api_key: str = ""
    # Full SQLAlchemy URL; when set, database.yaml and DB_PASSWORD are ignored
    database_url: str = ""

    model_config = SettingsConfigDict(
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )


class AppConfig(BaseModel):
    """
    Typed view over config/settings/*.yaml.

    Each field is one YAML file validated against its schema. Use
    AppConfig.load() to read them from disk.
    """

    model_config = ConfigDict(frozen=True)

    application: ApplicationSchema
    database: DatabaseSchema
    logging: LoggingSchema
    features: FeaturesSchema
    security: SecuritySchema

    @classmethod
    def load(cls) -> "AppConfig":
        sections: dict[str, Any] = {}
        for section, field in cls.model_fields.items():
            filename = f"{section}.yaml"
            try:
                sections[section] = field.annotation(**load_yaml_config(filename))
            except ValidationError as e:
                raise ValueError(f"Invalid configuration in {filename}:\n{e}") from e
        return cls(**sections)


@lru_cache
def get_settings() -> Settings:
    env_path = find_project_root() / "config" / ".env"
    return Settings(_env_file=str(env_path))


@lru_cache
def get_app_config() -> AppConfig:
    return AppConfig.load()


def get_database_url(async_driver: bool = True) -> str:
    """
    Database URL for the engine (async) or for tooling (sync).

    DATABASE_URL wins when set. Otherwise the URL is built from
    database.yaml plus DB_PASSWORD.
    """
    settings = get_settings()
    if settings.database_url:
        return settings.database_url

    db = get_app_config().database
    driver = "postgresql+asyncpg" if async_driver else "postgresql"
    return f"{driver}://{db.user}:{settings.db_password}@{db.host}:{db.port}/{db.name}"


def get_public_entry_url(share_id: str) -> str:
    """Public URL a share token is served under."""
    base_url = get_app_config().application.sharing.public_base_url
    return f"{base_url.rstrip('/')}/{share_id}"
