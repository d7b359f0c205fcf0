"""Configuration for gridcalc.

Settings come from environment variables with the ``GRIDCALC_`` prefix, or
from a ``.env`` file in the working directory.

Environment Variables:
    GRIDCALC_DEFAULT_ROWS: Rows in a new grid (default: 20)
    GRIDCALC_DEFAULT_COLUMNS: Columns in a new grid (default: 10)
    GRIDCALC_DEFAULT_COLUMN_WIDTH: Width of new columns (default: 100)
    GRIDCALC_ERROR_MARKER: Display value of a failed formula (default: #ERROR)
    GRIDCALC_MAX_FORMULA_LENGTH: Longest arithmetic text evaluated (default: 4096)
    GRIDCALC_MAX_EXPRESSION_DEPTH: Deepest paren/sign nesting (default: 100)
    GRIDCALC_LOG_LEVEL: Level for the ``gridcalc`` logger (default: WARNING)
"""

from __future__ import annotations

import logging
from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

_LOG_LEVELS = ("CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG", "NOTSET")


class Settings(BaseSettings):
    """Grid defaults, evaluation bounds and logging level."""

    model_config = SettingsConfigDict(
        env_prefix="GRIDCALC_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    default_rows: int = Field(default=20, ge=1)
    default_columns: int = Field(default=10, ge=1)
    default_column_width: int = Field(default=100, ge=1)

    error_marker: str = "#ERROR"

    max_formula_length: int = Field(default=4096, ge=1)
    max_expression_depth: int = Field(default=100, ge=1)

    log_level: str = "WARNING"

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        level = v.upper()
        if level not in _LOG_LEVELS:
            raise ValueError(f"Unknown log level: {v}")
        return level


@lru_cache
def get_settings() -> Settings:
    """Cached settings instance; call ``get_settings.cache_clear()`` to reload."""
    return Settings()


def configure_logging(settings: Settings | None = None) -> logging.Logger:
    """Apply the configured level to the ``gridcalc`` logger tree.

    Handlers are left to the application; only the level is set here.
    """
    settings = settings or get_settings()
    logger = logging.getLogger("gridcalc")
    logger.setLevel(settings.log_level)
    return logger
