"""
roadstats.errors — Error taxonomy for the statistics builder.

Every failure at the connection or query boundary is fatal: the CLI maps
each class to an exit code and never writes a partial report.
ParseDegradation is the one non-fatal event; it is returned, not raised.
"""

from __future__ import annotations

from dataclasses import dataclass

from roadstats.constants import (
    EXIT_CONNECTION,
    EXIT_FAILURE,
    EXIT_PARSE,
    EXIT_QUERY,
    EXIT_USAGE,
)


class RoadStatsError(Exception):
    """Base class for all fatal roadstats errors."""

    exit_code: int = EXIT_FAILURE


class UsageError(RoadStatsError):
    """Raised when a required input argument is missing."""

    exit_code = EXIT_USAGE


class DatastoreConnectionError(RoadStatsError):
    """Raised when the statistics database cannot be opened."""

    exit_code = EXIT_CONNECTION

    def __init__(self, path: str, detail: str) -> None:
        self.path = path
        self.detail = detail
        super().__init__(f"Opening DB failed: {path}: {detail}")


class QueryError(RoadStatsError):
    """Raised when a query fails. Carries the engine message verbatim."""

    exit_code = EXIT_QUERY

    def __init__(self, sql: str, detail: str, prefix: str = "SQL error") -> None:
        self.sql = sql
        self.detail = detail
        super().__init__(f"{prefix}: {detail}")


class SchemaError(QueryError):
    """Raised when the class-label query fails or its columns cannot be labels."""


class AggregationError(QueryError):
    """Raised when the per-country data query fails."""


class RowParseError(AggregationError):
    """Raised in strict mode when a class column does not hold one number."""

    exit_code = EXIT_PARSE

    def __init__(self, country: str, column: str, value: object) -> None:
        self.country = country
        self.column = column
        self.value = value
        super().__init__(
            "",
            f"non-numeric value {value!r} in column '{column}' for country '{country}'",
            prefix="Parse error",
        )


class OutputError(RoadStatsError):
    """Raised when the report or one of its sidecars cannot be written."""

    exit_code = EXIT_FAILURE

    def __init__(self, path: str, detail: str) -> None:
        self.path = path
        self.detail = detail
        super().__init__(f"Writing output failed: {path}: {detail}")


@dataclass(frozen=True, slots=True)
class ParseDegradation:
    """A row whose lenient parse did not yield one value per class column."""

    country: str
    expected: int
    parsed: int
    raw: tuple[object, ...]

    def to_dict(self) -> dict[str, object]:
        return {
            "country": self.country,
            "expected": self.expected,
            "parsed": self.parsed,
            "raw": [None if v is None else str(v) for v in self.raw],
        }
