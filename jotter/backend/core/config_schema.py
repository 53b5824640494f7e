"""
Configuration Schemas.

One model per file in config/settings/, named after the file. Unknown keys
are rejected so a typo in YAML fails at startup rather than silently
falling back to a default.
"""

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

MAX_SHARE_TOKEN_BYTES = 32


class _StrictBase(BaseModel):
    model_config = ConfigDict(extra="forbid")


# =============================================================================
# application.yaml
# =============================================================================


class ServerSchema(_StrictBase):
    host: str
    port: int = Field(ge=1, le=65535)


class CorsSchema(_StrictBase):
    origins: list[str]


class TimeoutsSchema(_StrictBase):
    """Seconds."""

    database: int = Field(gt=0)
    external_api: int = Field(gt=0)


class SharingSchema(_StrictBase):
    """
    Public share token allocation.

    token_bytes below 8 would make collisions likely enough to exhaust
    max_attempts in normal use, so it is the floor. Tokens are hex, twice
    token_bytes long, and must fit entries.public_share_id.
    """

    token_bytes: int = Field(default=8, ge=8, le=MAX_SHARE_TOKEN_BYTES)
    max_attempts: int = Field(default=5, ge=1)
    public_base_url: str

    @field_validator("public_base_url")
    @classmethod
    def _http_url(cls, value: str) -> str:
        if not value.startswith(("http://", "https://")):
            raise ValueError("public_base_url must be an http(s) URL")
        return value


class ApplicationSchema(_StrictBase):
    name: str
    version: str
    description: str
    environment: Literal["development", "test", "staging", "production"]
    debug: bool
    api_prefix: str
    server: ServerSchema
    cors: CorsSchema
    timeouts: TimeoutsSchema
    sharing: SharingSchema

    @field_validator("api_prefix")
    @classmethod
    def _leading_slash(cls, value: str) -> str:
        if not value.startswith("/") or value.endswith("/"):
            raise ValueError("api_prefix must start with '/' and not end with one")
        return value


# =============================================================================
# database.yaml
# =============================================================================


class DatabaseSchema(_StrictBase):
    host: str
    port: int = Field(ge=1, le=65535)
    name: str
    user: str
    pool_size: int = Field(ge=1)
    max_overflow: int = Field(ge=0)
    pool_timeout: int
    pool_recycle: int
    echo: bool


# =============================================================================
# logging.yaml
# =============================================================================


class ConsoleHandlerSchema(_StrictBase):
    enabled: bool


class FileHandlerSchema(_StrictBase):
    enabled: bool
    path: str
    max_bytes: int
    backup_count: int


class HandlersSchema(_StrictBase):
    console: ConsoleHandlerSchema
    file: FileHandlerSchema


class LoggingSchema(_StrictBase):
    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
    format: Literal["json", "console"]
    handlers: HandlersSchema

    @field_validator("level", mode="before")
    @classmethod
    def _upper(cls, value: str) -> str:
        return value.upper() if isinstance(value, str) else value


# =============================================================================
# features.yaml
# =============================================================================


class FeaturesSchema(_StrictBase):
    api_request_logging: bool
    notes_generation_enabled: bool


# =============================================================================
# security.yaml
# =============================================================================


class JwtSchema(_StrictBase):
    algorithm: str
    access_token_expire_minutes: int = Field(gt=0)
    audience: str


class SecuritySchema(_StrictBase):
    jwt: JwtSchema
