"""
roadstats.report — Report construction and serialization.

Report layout (one entry per country, first-seen order):

    {
    "US" : {
      "name" : "US",
      "records": {
        "Motorway": 1234.50,
        "total": 1234.50
      }}
    }

Hard constraints:
    - Every number rendered via canonical_float() (two decimals, half away
      from zero, fixed-point).
    - Every string rendered via json.dumps() (full JSON escaping).
    - Duplicate country codes: last record wins, first position is kept.
    - A report with no countries is "{}".
    - Output always ends with exactly one newline.
    - All output files are staged under temp names and renamed together,
      so a failed build never leaves a partial report behind.
"""

from __future__ import annotations

import json
import logging
import math
import os
import uuid
from pathlib import Path
from typing import Any, Dict, Sequence

from pydantic import BaseModel, field_validator

from roadstats.constants import ROUND_PRECISION
from roadstats.errors import OutputError
from roadstats.formatting import canonical_float, sha256_text

logger = logging.getLogger("roadstats.report")


# ---------------------------------------------------------------------------
# Report entry model
# ---------------------------------------------------------------------------

class CountryEntry(BaseModel):
    """One country's entry in the report."""

    name: str
    records: Dict[str, float]

    @field_validator("name")
    @classmethod
    def _name_not_empty(cls, v: str) -> str:
        if not v:
            raise ValueError("country code must not be empty.")
        return v

    @field_validator("records")
    @classmethod
    def _records_finite(cls, v: Dict[str, float]) -> Dict[str, float]:
        for label, value in v.items():
            if math.isnan(value) or math.isinf(value):
                raise ValueError(f"non-finite value for '{label}': {value!r}")
        return v


# ---------------------------------------------------------------------------
# Construction
# ---------------------------------------------------------------------------

def build_report(
    codes: Sequence[str],
    records: Sequence[Sequence[float]],
    labels: Sequence[str],
) -> dict[str, CountryEntry]:
    """Pair each record with the class labels, keyed by country code.

    Only the first min(len(labels), len(record)) positions are paired, so
    a short record simply omits its trailing labels.
    """
    if len(codes) != len(records):
        raise ValueError(
            f"{len(codes)} country codes but {len(records)} records"
        )

    report: dict[str, CountryEntry] = {}
    for code, record in zip(codes, records):
        if code in report:
            logger.warning(json.dumps({"event": "duplicate_country", "country": code}))
        report[code] = CountryEntry(name=code, records=dict(zip(labels, record)))
    return report


# ---------------------------------------------------------------------------
# Serialization
# ---------------------------------------------------------------------------

def _render_entry(code: str, entry: CountryEntry) -> str:
    lines = [
        f"{json.dumps(code, ensure_ascii=False)} : {{",
        f'  "name" : {json.dumps(entry.name, ensure_ascii=False)},',
        '  "records": {',
    ]
    pairs = [
        f"    {json.dumps(label, ensure_ascii=False)}: {canonical_float(value)}"
        for label, value in entry.records.items()
    ]
    if pairs:
        lines.append(",\n".join(pairs))
    lines.append("  }}")
    return "\n".join(lines)


def render_report(report: dict[str, CountryEntry]) -> str:
    """Render an already-built report to document text."""
    if not report:
        return "{}\n"
    body = ",\n".join(_render_entry(code, entry) for code, entry in report.items())
    return "{\n" + body + "\n}\n"


def serialize(
    codes: Sequence[str],
    records: Sequence[Sequence[float]],
    labels: Sequence[str],
) -> str:
    """Build and render the report in one step."""
    return render_report(build_report(codes, records, labels))


# ---------------------------------------------------------------------------
# Output
# ---------------------------------------------------------------------------

def canonical_json(data: object) -> str:
    """JSON in canonical form: sort_keys=True, indent=2, trailing newline."""
    return json.dumps(data, indent=2, ensure_ascii=False, sort_keys=True) + "\n"


def write_files(files: Sequence[tuple[Path, str]]) -> None:
    """Write every (path, content) pair, or leave none of them behind.

    Protocol:
        1. Write every content to a temp name beside its target.
        2. Rename in reverse order, so files[0] (the report) lands last.
        3. On ANY failure, remove temp files and every target renamed
           by this call. OSError is re-raised as OutputError.
    """
    staged: list[tuple[Path, Path]] = []
    committed: list[Path] = []
    current: Path | None = None
    try:
        for filepath, content in files:
            current = Path(filepath)
            current.parent.mkdir(parents=True, exist_ok=True)
            temp_path = current.parent / f".tmp_{current.name}_{uuid.uuid4().hex[:8]}"
            staged.append((temp_path, current))
            with open(temp_path, "w", encoding="utf-8", newline="\n") as fh:
                fh.write(content)
        for temp_path, current in reversed(staged):
            os.replace(temp_path, current)
            committed.append(current)
    except BaseException as exc:
        for temp_path, _ in staged:
            temp_path.unlink(missing_ok=True)
        for target in committed:
            target.unlink(missing_ok=True)
        if isinstance(exc, OSError):
            raise OutputError(str(current), exc.strerror or str(exc)) from exc
        raise


def build_manifest(
    report_path: Path,
    report_text: str,
    labels: Sequence[str],
    country_count: int,
) -> dict[str, Any]:
    """Sidecar summary for a written report."""
    return {
        "file": Path(report_path).name,
        "sha256": sha256_text(report_text),
        "country_count": country_count,
        "class_labels": list(labels),
        "round_precision": ROUND_PRECISION,
    }


def manifest_path_for(report_path: Path) -> Path:
    report_path = Path(report_path)
    return report_path.with_name(report_path.name + ".manifest.json")
