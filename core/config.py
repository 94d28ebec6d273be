"""
core/config.py -- Centralized application configuration via pydantic-settings.

All environment variable reads for the cake-order backend happen here. No
module should call os.getenv() or os.environ.get() directly -- import
get_settings() instead.

Design patterns used:
  Singleton via lru_cache: get_settings() instantiates Settings once at first
      call and returns the cached instance on every subsequent call. This is
      the official FastAPI dependency injection pattern for config.

  BaseSettings (pydantic-settings): Reads values from environment variables
      and an optional .env file automatically. Field names map to env var names
      (e.g. database_url -> DATABASE_URL). Type coercion and validation are
      built in.

Layer rule: core/ is the kernel. This module may not import from api/, auth/,
orders/, or catalog/.
"""

import logging
from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger("cakemaker.config")

_DEFAULT_DB_URL = f"sqlite:///{Path(__file__).resolve().parent.parent / 'cakemaker.db'}"


class Settings(BaseSettings):
    """Application settings loaded from environment variables and .env file.

    All fields have defaults so Settings() can be instantiated in test
    environments without a real .env file.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # ------------------------------------------------------------------
    # Core
    # ------------------------------------------------------------------

    debug: bool = False
    log_level: str = "INFO"

    # ------------------------------------------------------------------
    # Store and listener
    # ------------------------------------------------------------------

    database_url: str = _DEFAULT_DB_URL
    host: str = "127.0.0.1"
    port: int = Field(default=8087, ge=1, le=65535)
    # Reseed the layer catalog during startup, before the first request.
    reset_database: bool = False

    # ------------------------------------------------------------------
    # Domain
    # ------------------------------------------------------------------

    # "fixed": cakeName/topping/cover/layer1/layer2/sponge slots.
    # "ingredients": free-form list of layer/ingredient selections.
    cake_order_schema: Literal["fixed", "ingredients"] = "fixed"
    min_password_length: int = Field(default=4, ge=1)

    # ------------------------------------------------------------------
    # HTTP
    # ------------------------------------------------------------------

    cors_origins: list[str] = Field(default_factory=lambda: ["*"])

    # ------------------------------------------------------------------
    # Validators
    # ------------------------------------------------------------------

    @model_validator(mode="after")
    def validate_database_url(self) -> "Settings":
        """Refuse to start without a store connection string.

        An empty DATABASE_URL would otherwise surface later as an opaque
        SQLAlchemy ArgumentError on the first request.
        """
        if not self.database_url.strip():
            raise ValueError("DATABASE_URL must not be empty.")
        if self.debug:
            logger.warning("DEBUG is enabled -- do not run this configuration in production.")
        return self


@lru_cache
def get_settings() -> Settings:
    """Return the application Settings singleton.

    In tests: call get_settings.cache_clear() between test cases if you need
    to inject different environment variables.
    """
    return Settings()
