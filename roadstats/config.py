"""
roadstats.config — Runtime settings from the environment.

Environment variables:
    ROADSTATS_TABLE           Source table (default: countrydata).
    ROADSTATS_KEY_COLUMN      Country-code column (default: isocode).
    ROADSTATS_STRICT_PARSING  "0" selects lenient parsing (default: strict).
    ROADSTATS_LOG_LEVEL       Logging level name (default: INFO).
    ENV                       "dev" forces DEBUG logging.

CLI flags override every value read here.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, replace
from typing import Any, Mapping

from roadstats.constants import DEFAULT_KEY_COLUMN, DEFAULT_TABLE


@dataclass(frozen=True, slots=True)
class Settings:
    """Resolved settings for one statistics build."""

    table: str = DEFAULT_TABLE
    key_column: str = DEFAULT_KEY_COLUMN
    strict: bool = True
    log_level: str = "INFO"

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> Settings:
        env = os.environ if environ is None else environ
        log_level = env.get("ROADSTATS_LOG_LEVEL", "INFO").strip().upper() or "INFO"
        if env.get("ENV", "prod").strip().lower() == "dev":
            log_level = "DEBUG"
        return cls(
            table=env.get("ROADSTATS_TABLE", "").strip() or DEFAULT_TABLE,
            key_column=env.get("ROADSTATS_KEY_COLUMN", "").strip() or DEFAULT_KEY_COLUMN,
            strict=env.get("ROADSTATS_STRICT_PARSING", "1").strip() != "0",
            log_level=log_level,
        )

    def override(self, **changes: Any) -> Settings:
        """Return a copy with every non-None value in changes applied."""
        return replace(self, **{k: v for k, v in changes.items() if v is not None})


def configure_logging(level: str) -> None:
    """Plain-message logging to stderr; events are pre-rendered JSON."""
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(message)s",
        force=True,
    )
