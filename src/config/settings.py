"""
Configuration settings for the common utilities.

**Conceptual**: This module provides a strongly-typed configuration object
that loads from environment variables (via .env files). Settings are
validated when they are loaded, so a bad value fails fast with the name of
the offending variable instead of surfacing later as odd behaviour.

**Why centralized config?**
  - Single source of truth for the few knobs the utilities have.
  - Easy to test (inject a UtilitySettings instead of reading the environment).
  - Fail-fast validation (OSS_SEQUENCE_BITS=48 is rejected at startup).

This module uses python-dotenv to load .env files and dataclasses for type safety.
"""

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

# Load .env from project root (dev/local environments); a missing file is fine
env_path = Path(__file__).parent.parent.parent / ".env"
load_dotenv(dotenv_path=env_path)

DEFAULT_IMAGE_EXTENSION = ".jpg"
DEFAULT_SEQUENCE_BITS = 64
DEFAULT_LOG_LEVEL = "WARNING"

VALID_SEQUENCE_BITS = (32, 64)
VALID_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@dataclass(frozen=True)
class UtilitySettings:
    """
    Settings for the common utilities.

    Attributes:
        image_extension: Extension used by the default image file filter.
                         Lower-case, including the leading dot (".jpg").
        sequence_bits: Integer width at which the process-wide sequence
                       generator wraps around (32 or 64).
        log_level: Level name for the package logger configured by
                   src.utils.log.configure_logging().
    """
    image_extension: str = DEFAULT_IMAGE_EXTENSION
    sequence_bits: int = DEFAULT_SEQUENCE_BITS
    log_level: str = DEFAULT_LOG_LEVEL

    def __post_init__(self):
        """Validate settings after initialization."""
        if not self.image_extension or not self.image_extension.startswith("."):
            raise ValueError(
                "OSS_IMAGE_EXTENSION must start with '.', "
                f"got: {self.image_extension!r}"
            )
        if self.image_extension != self.image_extension.lower():
            raise ValueError(
                f"OSS_IMAGE_EXTENSION must be lower-case, got: {self.image_extension!r}"
            )
        if self.sequence_bits not in VALID_SEQUENCE_BITS:
            raise ValueError(
                f"OSS_SEQUENCE_BITS must be one of {VALID_SEQUENCE_BITS}, "
                f"got: {self.sequence_bits}"
            )
        if self.log_level not in VALID_LOG_LEVELS:
            raise ValueError(
                f"OSS_LOG_LEVEL must be one of {VALID_LOG_LEVELS}, got: {self.log_level!r}"
            )

    @property
    def log_level_number(self) -> int:
        """Numeric logging level for log_level."""
        return logging.getLevelName(self.log_level)

    @classmethod
    def from_env(cls) -> "UtilitySettings":
        """
        Load settings from environment variables.

        **Environment variables** (all optional):
          - OSS_IMAGE_EXTENSION: default ".jpg".
          - OSS_SEQUENCE_BITS: 32 or 64, default 64.
          - OSS_LOG_LEVEL: logging level name, default "WARNING".
            Case-insensitive.

        Returns:
            UtilitySettings object with values loaded from environment.

        Raises:
            ValueError: If any variable is set to an invalid value.
        """
        image_extension = os.getenv("OSS_IMAGE_EXTENSION", DEFAULT_IMAGE_EXTENSION)
        bits_str = os.getenv("OSS_SEQUENCE_BITS", str(DEFAULT_SEQUENCE_BITS))
        log_level = os.getenv("OSS_LOG_LEVEL", DEFAULT_LOG_LEVEL).upper()

        try:
            sequence_bits = int(bits_str)
        except ValueError:
            raise ValueError(
                f"OSS_SEQUENCE_BITS must be an integer, got: {bits_str}"
            )

        return cls(
            image_extension=image_extension,
            sequence_bits=sequence_bits,
            log_level=log_level,
        )


# Convenience singleton for accessing settings throughout the package.
# Tests can create UtilitySettings(...) directly instead of using this.
_default_settings: Optional[UtilitySettings] = None


def get_settings() -> UtilitySettings:
    """
    Get the global settings singleton.

    Settings are loaded from the environment on first call, then cached.

    Returns:
        Global UtilitySettings singleton.

    Raises:
        ValueError: If the environment holds an invalid value.
    """
    global _default_settings

    if _default_settings is None:
        _default_settings = UtilitySettings.from_env()
    return _default_settings


def reset_settings():
    """
    Reset the global settings singleton (for testing).

    **Testing pattern**:
      ```python
      def test_something(monkeypatch):
          monkeypatch.setenv("OSS_SEQUENCE_BITS", "32")
          reset_settings()
          assert get_settings().sequence_bits == 32
      ```
    """
    global _default_settings
    _default_settings = None
