# src/memory_cache_pro/config/settings.py
# Copyright (c) Stacklion.
# SPDX-License-Identifier: MIT
"""Cache Configuration (Pydantic Settings, v2)

Summary:
    Typed, validated configuration for caches built through
    :func:`memory_cache_pro.dependencies.cache.build_ttl_cache`. Core classes
    never read the environment; they receive values via their constructor.

Design:
    - Pydantic v2 BaseSettings with ``extra='ignore'`` so unrelated process
      environment does not break loading.
    - Explicit field declarations with ``validation_alias`` per env variable.
    - Singleton accessor ``get_settings()`` with LRU cache.
    - Safe, structured logging of the resolved configuration.
"""

from __future__ import annotations

import logging
from functools import lru_cache

from pydantic import Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger(__name__)

_LOG_LEVELS = frozenset({"CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG", "NOTSET"})


class Settings(BaseSettings):
    """Typed cache configuration."""

    log_level: str = Field(
        default="INFO",
        description="Root log level applied by configure_root_logging().",
        validation_alias="LOG_LEVEL",
    )

    cache_debug: bool = Field(
        default=False,
        description="Start caches with instrumentation (hit/miss counters, debug logs) enabled.",
        validation_alias="CACHE_DEBUG",
    )

    cache_metrics_enabled: bool = Field(
        default=False,
        description="Attach Prometheus counters to caches built by the factory.",
        validation_alias="CACHE_METRICS_ENABLED",
    )

    cache_metrics_namespace: str = Field(
        default="default",
        min_length=1,
        max_length=128,
        description="Value of the 'namespace' metric label.",
        validation_alias="CACHE_METRICS_NAMESPACE",
    )

    cache_import_skip_duplicates: bool = Field(
        default=False,
        description="Default for import_from_json(): keep existing keys instead of overwriting.",
        validation_alias="CACHE_IMPORT_SKIP_DUPLICATES",
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        extra="ignore",
        case_sensitive=False,
        populate_by_name=True,
    )

    @field_validator("log_level", mode="before")
    @classmethod
    def _normalize_log_level(cls, value: object) -> str:
        """Upper-case and validate the log level name.

        Raises:
            ValueError: If the level is not a standard logging level name.
        """
        level = str(value).strip().upper()
        if level not in _LOG_LEVELS:
            raise ValueError(f"LOG_LEVEL must be one of {sorted(_LOG_LEVELS)}")
        return level


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return cached settings.

    Returns:
        Settings: Validated cache settings.

    Raises:
        RuntimeError: If configuration is invalid.
    """
    try:
        settings = Settings()
        logger.info(
            "Settings initialized",
            extra={
                "log_level": settings.log_level,
                "cache": {
                    "debug": settings.cache_debug,
                    "metrics_enabled": settings.cache_metrics_enabled,
                    "metrics_namespace": settings.cache_metrics_namespace,
                    "import_skip_duplicates": settings.cache_import_skip_duplicates,
                },
            },
        )
        return settings
    except ValidationError as exc:
        logger.exception("Invalid cache configuration")
        raise RuntimeError(f"Invalid configuration: {exc}") from exc
