"""Centralised application configuration using pydantic-settings.

All environment variables are read through the Settings class.
Consumers call ``get_settings()`` to obtain a cached, validated instance.
Tests construct ``Settings(_env_file=None, ...)`` directly for isolation.
"""

from __future__ import annotations

import logging
from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import BaseModel, SecretStr, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger(__name__)

# src/reviewdesk/config.py  ->  parent x3  ->  project root
_PROJECT_ROOT = Path(__file__).resolve().parent.parent.parent


# ---------------------------------------------------------------------------
# Sub-models (one per configuration domain)
# ---------------------------------------------------------------------------
class StytchConfig(BaseModel):
    """Stytch B2B identity provider credentials."""

    project_id: str = ""
    secret: SecretStr = SecretStr("")
    organization_id: str = ""
    environment: Literal["test", "live"] = "test"

    @property
    def configured(self) -> bool:
        return bool(self.project_id and self.secret.get_secret_value())

    @model_validator(mode="after")
    def project_requires_organization(self) -> StytchConfig:
        if self.project_id and not self.organization_id:
            msg = "STYTCH__PROJECT_ID requires STYTCH__ORGANIZATION_ID to be set"
            raise ValueError(msg)
        return self


class DatabaseConfig(BaseModel):
    """Document store connection configuration."""

    url: str | None = None
    echo: bool = False


class StorageConfig(BaseModel):
    """Supabase Storage credentials for uploaded files."""

    supabase_url: str = ""
    supabase_key: SecretStr = SecretStr("")
    bucket: str = "submissions"

    @property
    def configured(self) -> bool:
        return bool(self.supabase_url and self.supabase_key.get_secret_value())


class LlmConfig(BaseModel):
    """Claude API configuration for feedback generation."""

    api_key: SecretStr = SecretStr("")
    model: str = "claude-sonnet-4-20250514"
    max_tokens: int = 2048


class AppConfig(BaseModel):
    """Application runtime configuration."""

    port: int = 8080
    storage_secret: SecretStr = SecretStr("dev-secret-change-me")
    log_dir: Path = Path("logs")
    max_upload_bytes: int = 10 * 1024 * 1024


class DevConfig(BaseModel):
    """Development and testing toggles."""

    demo_mode: bool = False
    reload: bool = True


# ---------------------------------------------------------------------------
# Root settings
# ---------------------------------------------------------------------------
class Settings(BaseSettings):
    """Application settings with automatic .env loading and type validation.

    Environment variables use double-underscore delimiter for nesting:
    ``STYTCH__PROJECT_ID``, ``DATABASE__URL``, ``LLM__API_KEY``, etc.

    A provider whose credentials are missing is replaced by its in-memory
    demo implementation at startup (see ``reviewdesk.services``).
    ``DEV__DEMO_MODE=true`` forces every provider into demo mode.
    """

    model_config = SettingsConfigDict(
        env_file=_PROJECT_ROOT / ".env",
        env_nested_delimiter="__",
        extra="ignore",
    )

    stytch: StytchConfig = StytchConfig()
    database: DatabaseConfig = DatabaseConfig()
    storage: StorageConfig = StorageConfig()
    llm: LlmConfig = LlmConfig()
    app: AppConfig = AppConfig()
    dev: DevConfig = DevConfig()


# ---------------------------------------------------------------------------
# Cached access
# ---------------------------------------------------------------------------
@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return a cached Settings instance.

    Call ``get_settings.cache_clear()`` in tests to reset.
    """
    settings = Settings()

    env_file = settings.model_config.get("env_file")
    if env_file is not None and Path(str(env_file)).is_file():
        logger.info("Settings loaded .env from: %s", env_file)
    else:
        logger.info("Settings: no .env file found, using env vars and defaults")

    return settings
