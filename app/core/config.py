"""Application configuration loaded from environment variables."""

from functools import lru_cache
from typing import Literal

from pydantic import Field, SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# Env-var prefix for database credentials, per deployment profile.
PROFILE_ENV_PREFIXES = {
    "cloudsql": "CLOUD_SQL_",
    "generic": "",
}


class Settings(BaseSettings):
    """Validated application settings from env and optional .env file."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=False,
    )

    APP_ENV: Literal["dev", "prod"] = "dev"
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"

    # HTTP listener
    HOST: str = "0.0.0.0"
    PORT: str = "8080"

    # Set automatically by Cloud Run; presence selects unix socket connections.
    K_SERVICE: str | None = None

    # Which env-var names carry the database credentials (see DatabaseSettings).
    CONFIG_PROFILE: Literal["cloudsql", "generic"] = "cloudsql"

    # Connection pool
    DB_POOL_SIZE: int = 5
    DB_MAX_OVERFLOW: int = 10

    @property
    def managed_environment(self) -> bool:
        """True when running on Cloud Run (K_SERVICE is set and non-empty)."""
        return bool(self.K_SERVICE and self.K_SERVICE.strip())

    @field_validator("PORT")
    @classmethod
    def validate_port(cls, v: str) -> str:
        v = v.strip()
        if not v.isdigit() or not (1 <= int(v) <= 65535):
            raise ValueError("PORT must be an integer between 1 and 65535")
        return v

    @field_validator("LOG_LEVEL")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        level = v.strip().upper()
        if level not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            raise ValueError("LOG_LEVEL must be one of DEBUG, INFO, WARNING, ERROR, CRITICAL")
        return level

    @field_validator("DB_POOL_SIZE")
    @classmethod
    def validate_pool_size(cls, v: int) -> int:
        if v < 1 or v > 100:
            raise ValueError("DB_POOL_SIZE must be between 1 and 100")
        return v

    @field_validator("DB_MAX_OVERFLOW")
    @classmethod
    def validate_max_overflow(cls, v: int) -> int:
        if v < 0 or v > 100:
            raise ValueError("DB_MAX_OVERFLOW must be between 0 and 100")
        return v


class DatabaseSettings(BaseSettings):
    """
    Database credentials.

    Field names are read with a profile-dependent prefix, e.g. the cloudsql
    profile reads CLOUD_SQL_DB_USERNAME while the generic profile reads DB_USERNAME.
    DB_HOST/DB_PORT are only used when not running in a managed environment.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=False,
    )

    DB_USERNAME: str = ""
    DB_PASSWORD: SecretStr = SecretStr("")
    DB_NAME: str
    INSTANCE_CONNECTION_NAME: str = ""

    # Aliased so the profile prefix does not apply.
    DB_HOST: str = Field(default="localhost", validation_alias="DB_HOST")
    DB_PORT: int = Field(default=3306, validation_alias="DB_PORT")

    @field_validator("DB_NAME")
    @classmethod
    def validate_db_name(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("DB_NAME must be set and non-empty")
        return v.strip()

    @field_validator("DB_PORT")
    @classmethod
    def validate_db_port(cls, v: int) -> int:
        if v < 1 or v > 65535:
            raise ValueError("DB_PORT must be between 1 and 65535")
        return v


def load_database_settings(profile: str) -> DatabaseSettings:
    """Resolve database credentials for the given deployment profile."""
    try:
        prefix = PROFILE_ENV_PREFIXES[profile]
    except KeyError:
        raise ValueError(f"Unknown configuration profile: {profile!r}") from None
    return DatabaseSettings(_env_prefix=prefix)


@lru_cache
def get_settings() -> Settings:
    """Return cached settings instance (safe to call from dependencies)."""
    return Settings()
