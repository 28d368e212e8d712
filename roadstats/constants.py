"""
roadstats.constants — Single source of truth for road statistics constants.

Every module that needs these values MUST import from here.
No hardcoded duplicates anywhere in the codebase.
"""

from __future__ import annotations

# ---------------------------------------------------------------------------
# Source schema
# ---------------------------------------------------------------------------

DEFAULT_TABLE: str = "countrydata"
"""Table holding one row per country: key column, then one column per road class."""

DEFAULT_KEY_COLUMN: str = "isocode"
"""Country-code column. Always the first column of DEFAULT_TABLE."""

TOTAL_LABEL: str = "total"
"""Synthetic class label appended after all schema-derived labels."""

MAX_SPEED_TABLE: str = "rclassctrydata"

MAX_SPEED_CLASSES: tuple[str, ...] = ("Motorway", "Trunk", "Primary", "Secondary")
"""Road classes covered by the max-speed extract, in query order."""

# ---------------------------------------------------------------------------
# Output
# ---------------------------------------------------------------------------

DEFAULT_OUTPUT: str = "road_data.json"

ROUND_PRECISION: int = 2
"""Every road length in the report is written with exactly ROUND_PRECISION
decimal places, rounded half away from zero."""

# ---------------------------------------------------------------------------
# Exit codes — used by CLI, exposed for programmatic use
# ---------------------------------------------------------------------------

EXIT_OK: int = 0
EXIT_FAILURE: int = 1
EXIT_USAGE: int = 2
EXIT_CONNECTION: int = 3
EXIT_QUERY: int = 4
EXIT_PARSE: int = 5
