"""
tests/conftest.py — Shared SQLite fixtures for road statistics tests.
"""

from __future__ import annotations

import sqlite3
from pathlib import Path
from typing import Any, Callable, Sequence

import pytest

DEFAULT_COLUMNS: tuple[str, ...] = ("isocode", "Motorway", "Trunk", "Primary")


def create_statistics_db(
    path: Path,
    rows: Sequence[Sequence[Any]],
    columns: Sequence[str] = DEFAULT_COLUMNS,
    table: str = "countrydata",
    speed_rows: Sequence[Sequence[Any]] | None = None,
) -> Path:
    """Write a statistics database with one country table (and optional speeds)."""
    conn = sqlite3.connect(path)
    try:
        col_defs = ", ".join(
            f'"{c}" TEXT' if i == 0 else f'"{c}" REAL' for i, c in enumerate(columns)
        )
        conn.execute(f'CREATE TABLE "{table}" ({col_defs})')
        placeholders = ",".join("?" for _ in columns)
        conn.executemany(f'INSERT INTO "{table}" VALUES ({placeholders})', rows)
        if speed_rows is not None:
            conn.execute("CREATE TABLE rclassctrydata (isocode TEXT, type TEXT, maxspeed INTEGER)")
            conn.executemany("INSERT INTO rclassctrydata VALUES (?,?,?)", speed_rows)
        conn.commit()
    finally:
        conn.close()
    return path


@pytest.fixture()
def make_db(tmp_path: Path) -> Callable[..., Path]:
    """Factory: make_db(rows, columns=..., name=...) -> database path."""

    def _make(
        rows: Sequence[Sequence[Any]],
        columns: Sequence[str] = DEFAULT_COLUMNS,
        name: str = "statistics.sqlite",
        **kwargs: Any,
    ) -> Path:
        return create_statistics_db(tmp_path / name, rows, columns, **kwargs)

    return _make


@pytest.fixture()
def sample_rows() -> list[tuple[Any, ...]]:
    return [
        ("US", 1000.25, 200.5, 34.0),
        ("CA", 987.65, 0.0, 12.125),
        ("", 5.0, 5.0, 5.0),
        ("DE", 13000.0, 0.0, 40500.75),
    ]
