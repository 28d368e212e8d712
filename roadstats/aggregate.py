"""
roadstats.aggregate — Per-country road length vectors.

Turns rows of (country code, class value, class value, ...) into two
parallel sequences: country codes in row order, and one numeric record
per code whose last element is the sum of the preceding ones.

Parsing policy:
    strict (default) — exactly one finite number per class column.
        Anything else raises RowParseError naming the country and column.
    lenient — the historical behavior. Fields are joined with spaces and
        re-read as a token stream; empty fields vanish and reading stops
        at the first non-numeric token, so a record can come out shorter
        than the label list. Every such row is reported as a
        ParseDegradation and logged. Only the count is checked: a field
        holding two tokens next to an empty field yields the right count
        with values shifted into the wrong columns, and goes unreported.

Rows with an empty or NULL country code are skipped in both modes.
"""

from __future__ import annotations

import json
import logging
import math
import sqlite3
from dataclasses import dataclass, field
from typing import Any, Iterable, Sequence

from roadstats.datastore import quote_identifier, run_query
from roadstats.errors import AggregationError, ParseDegradation, RowParseError

logger = logging.getLogger("roadstats.aggregate")

CountryRecord = tuple[float, ...]


@dataclass
class CountryAggregate:
    """Parallel, positionally aligned country codes and records."""

    codes: list[str] = field(default_factory=list)
    records: list[CountryRecord] = field(default_factory=list)
    degradations: list[ParseDegradation] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.codes)


# ---------------------------------------------------------------------------
# Field parsing
# ---------------------------------------------------------------------------

def _strict_value(value: Any, country: str, column: str) -> float:
    if isinstance(value, bool):
        raise RowParseError(country, column, value)
    if isinstance(value, (int, float)):
        number = float(value)
    elif isinstance(value, str) and value.strip():
        try:
            number = float(value)
        except ValueError:
            raise RowParseError(country, column, value) from None
    else:
        raise RowParseError(country, column, value)
    if math.isnan(number) or math.isinf(number):
        raise RowParseError(country, column, value)
    return number


def _lenient_values(fields: Sequence[Any]) -> list[float]:
    line = " ".join("" if v is None else str(v) for v in fields)
    values: list[float] = []
    for token in line.split():
        try:
            number = float(token)
        except ValueError:
            break
        if math.isnan(number) or math.isinf(number):
            break
        values.append(number)
    return values


def parse_values(
    fields: Sequence[Any],
    strict: bool = True,
    country: str = "",
    columns: Sequence[str] | None = None,
) -> list[float]:
    """Parse the class fields of one row into floats.

    columns names each field for error messages; it defaults to the
    field's position.
    """
    if not strict:
        return _lenient_values(fields)
    if columns is not None and len(columns) != len(fields):
        raise ValueError(
            f"{len(columns)} column names for {len(fields)} fields of country '{country}'"
        )
    names = list(columns) if columns is not None else [str(i) for i in range(1, len(fields) + 1)]
    return [_strict_value(v, country, names[i]) for i, v in enumerate(fields)]


# ---------------------------------------------------------------------------
# Aggregation
# ---------------------------------------------------------------------------

def aggregate(
    rows: Iterable[Sequence[Any]],
    strict: bool = True,
    columns: Sequence[str] | None = None,
) -> CountryAggregate:
    """Build one record per qualifying row, in row order.

    Duplicate codes are kept; the report layer decides which one wins.
    columns, when given, is the full result header (key column first).
    """
    result = CountryAggregate()
    class_columns = list(columns[1:]) if columns is not None else None
    skipped = 0

    for row in rows:
        if not row:
            continue
        code, fields = row[0], row[1:]
        if code is None or code == "":
            skipped += 1
            continue
        code = str(code)

        values = parse_values(fields, strict=strict, country=code, columns=class_columns)
        if len(values) != len(fields):
            degradation = ParseDegradation(
                country=code,
                expected=len(fields),
                parsed=len(values),
                raw=tuple(fields),
            )
            result.degradations.append(degradation)
            logger.warning(json.dumps({"event": "parse_degradation", **degradation.to_dict()}))

        values.append(float(sum(values)))
        result.codes.append(code)
        result.records.append(tuple(values))

    logger.info(json.dumps({
        "event": "aggregate",
        "countries": len(result.codes),
        "skipped_empty_code": skipped,
        "degraded_rows": len(result.degradations),
        "strict": strict,
    }))
    return result


def fetch_country_rows(
    conn: sqlite3.Connection,
    table: str,
    key_column: str,
) -> tuple[list[str], list[tuple[Any, ...]]]:
    """Select every row of table whose key column is not the empty string."""
    sql = (
        f"SELECT * FROM {quote_identifier(table)} "
        f"WHERE {quote_identifier(key_column)} IS NOT ''"
    )
    return run_query(conn, sql, error_cls=AggregationError)
