"""Centralized configuration for blockmail using Pydantic Settings (v2).

This module exposes a cached `load_settings()` loader that reads from:
- Real environment variables (highest precedence)
- `.env` files at the working directory: .env, .env.local, .env.dev/.env.test/.env.prod

The values here only tune defaults (new document preview mode, new table
padding) and logging; they never change validation semantics.
"""

from __future__ import annotations

import logging
import os
from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

EnvName = Literal["dev", "test", "prod"]
LogLevelName = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
PreviewModeName = Literal["mobile", "desktop"]


class Settings(BaseSettings):
    """Typed configuration loaded from env and `.env` files.

    Attributes
    ----------
    environment : EnvName
        Runtime environment flag; maps from `BLOCKMAIL_ENV`.
    log_level : LogLevelName
        Global log level string; maps from `LOG_LEVEL`.
    default_preview_mode : PreviewModeName
        Preview mode given to documents created without an explicit mode;
        maps from `BLOCKMAIL_DEFAULT_PREVIEW_MODE`.
    table_cell_padding : int | float
        Cell padding (px) assigned to newly created tables; maps from
        `BLOCKMAIL_TABLE_CELL_PADDING`.
    definitions : str
        Comma-separated `module:attribute` references to custom block
        definitions loaded by the CLI; maps from `BLOCKMAIL_DEFINITIONS`.
    """

    environment: EnvName = Field(default="dev", alias="BLOCKMAIL_ENV")
    log_level: LogLevelName = Field(default="INFO", alias="LOG_LEVEL")
    default_preview_mode: PreviewModeName = Field(
        default="mobile", alias="BLOCKMAIL_DEFAULT_PREVIEW_MODE"
    )
    table_cell_padding: int | float = Field(default=8, ge=0, alias="BLOCKMAIL_TABLE_CELL_PADDING")
    definitions: str = Field(default="", alias="BLOCKMAIL_DEFINITIONS")

    model_config = SettingsConfigDict(
        env_file=(".env", ".env.local", ".env.dev", ".env.test", ".env.prod"),
        env_file_encoding="utf-8",
        extra="ignore",
    )

    @property
    def is_dev(self) -> bool:
        """Return True if running in the development environment."""
        return self.environment == "dev"

    def log_level_numeric(self) -> int:
        """Return the numeric logging level corresponding to `self.log_level`."""
        return getattr(logging, self.log_level, logging.INFO)


@lru_cache(maxsize=1)
def load_settings() -> Settings:
    """Create and cache a `Settings` instance.

    Tests force a rebuild via `load_settings.cache_clear()` after mutating
    `os.environ`.
    """
    os.environ.setdefault("BLOCKMAIL_ENV", "dev")
    return Settings()


def get_logger(name: str = "blockmail") -> logging.Logger:
    """Return a process-global logger configured to the current `LOG_LEVEL`."""
    logger = logging.getLogger(name)
    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(
            logging.Formatter("%(asctime)s | %(levelname)s | %(name)s | %(message)s")
        )
        logger.addHandler(handler)
    logger.setLevel(load_settings().log_level_numeric())
    logger.propagate = False
    return logger


__all__ = ["Settings", "get_logger", "load_settings"]
