"""Centralized configuration for the TCX heart-rate merger.

Settings come from environment variables (a .env file is loaded when the
package is imported). The command line only carries the two input paths.

Usage:
    from tcx_hr_merge.config import get_config

    config = get_config()
    level = config.log_level
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path

DEFAULT_LOG_LEVEL = "WARNING"
DEFAULT_INDENT = "  "


@dataclass(frozen=True)
class MergeConfig:
    """Immutable configuration for a merge run.

    All settings are resolved at creation time. Use `from_env()` to
    create from environment variables, or construct directly for testing.
    """

    log_level: str = DEFAULT_LOG_LEVEL
    log_dir: Path | None = None
    indent: str = DEFAULT_INDENT

    @property
    def indent_is_valid(self) -> bool:
        return not self.indent.strip(" \t")

    def validate(self) -> list[str]:
        """Validate configuration and return list of warnings.

        Returns:
            List of warning messages (empty if all OK).
        """
        warnings: list[str] = []
        if self.log_level.upper() not in logging.getLevelNamesMapping():
            warnings.append(f"Unknown log level: {self.log_level}")
        if self.log_dir is not None and self.log_dir.exists() and not self.log_dir.is_dir():
            warnings.append(f"Log directory is not a directory: {self.log_dir}")
        if not self.indent_is_valid:
            warnings.append(
                f"Indent must contain only spaces or tabs: {self.indent!r}; "
                "using the default"
            )
        return warnings

    @staticmethod
    def from_env() -> MergeConfig:
        """Create config from environment variables.

        Environment variables:
            TCX_MERGE_LOG_LEVEL: Log level name (default: WARNING)
            TCX_MERGE_LOG_DIR: Directory for a rotating log file (default: none)
            TCX_MERGE_INDENT: Indentation of the output document (default: two spaces)
        """
        log_dir = os.getenv("TCX_MERGE_LOG_DIR")

        return MergeConfig(
            log_level=os.getenv("TCX_MERGE_LOG_LEVEL", DEFAULT_LOG_LEVEL),
            log_dir=Path(log_dir).expanduser() if log_dir else None,
            indent=os.getenv("TCX_MERGE_INDENT", DEFAULT_INDENT),
        )


@lru_cache(maxsize=1)
def get_config() -> MergeConfig:
    """Get the singleton config instance.

    Returns:
        MergeConfig instance created from environment variables.
    """
    return MergeConfig.from_env()
