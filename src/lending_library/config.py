"""Configuration management for the lending library.

Settings come from keyword arguments, ``LENDING_LIBRARY_*`` environment
variables or a ``.env`` file, validated with Pydantic v2.
"""

import logging
import sys
from enum import Enum

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


class DuplicateIsbnPolicy(str, Enum):
    """What ``add_book`` does with an ISBN that is already cataloged."""

    APPEND = "append"
    REJECT = "reject"
    MERGE = "merge"


class LibraryConfig(BaseSettings):
    """Lending library configuration."""

    model_config = SettingsConfigDict(
        env_prefix="LENDING_LIBRARY_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    library_name: str = Field(
        default="lending-library",
        description="Name used in log messages",
        pattern=r"^[a-z0-9-]+$",
    )

    duplicate_isbn: DuplicateIsbnPolicy = Field(
        default=DuplicateIsbnPolicy.APPEND,
        description="Handling of add_book requests for an ISBN already in the catalog",
    )

    debug: bool = Field(
        default=False,
        description="Enable debug logging",
    )

    log_level: str = Field(
        default="INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR)",
        pattern=r"^(DEBUG|INFO|WARNING|ERROR)$",
    )

    @field_validator("log_level", mode="before")
    @classmethod
    def upper_log_level(cls, v):
        if isinstance(v, str):
            return v.strip().upper()
        return v

    @field_validator("library_name")
    @classmethod
    def validate_library_name(cls, v: str) -> str:
        if len(v) < 3:
            raise ValueError("Library name must be at least 3 characters")
        if len(v) > 50:
            raise ValueError("Library name must not exceed 50 characters")
        return v

    @property
    def is_development(self) -> bool:
        return self.debug or self.log_level == "DEBUG"

    @property
    def effective_log_level(self) -> int:
        if self.debug:
            return logging.DEBUG
        return logging.getLevelName(self.log_level)


class _ConfigStore:
    """Internal storage for the shared configuration."""

    _instance: LibraryConfig | None = None


def get_config() -> LibraryConfig:
    """Get or create the shared configuration instance."""
    if _ConfigStore._instance is None:  # type: ignore[reportPrivateUsage]
        _ConfigStore._instance = LibraryConfig()  # type: ignore[reportPrivateUsage]
    return _ConfigStore._instance  # type: ignore[reportPrivateUsage]


def reset_config() -> None:
    """Drop the shared configuration (useful for testing)."""
    _ConfigStore._instance = None  # type: ignore[reportPrivateUsage]


def configure_logging(config: LibraryConfig | None = None) -> None:
    """Send log records to stderr at the configured level.

    Intended for hosting processes; the library itself only creates loggers.
    """
    config = config or get_config()
    logging.basicConfig(
        level=config.effective_log_level,
        format=LOG_FORMAT,
        handlers=[logging.StreamHandler(sys.stderr)],
    )
    logging.getLogger("lending_library").setLevel(config.effective_log_level)
