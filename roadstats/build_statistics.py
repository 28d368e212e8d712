"""
roadstats.build_statistics — CLI for building the road statistics report.

Usage:
    python -m roadstats.build_statistics statistics.sqlite
    python -m roadstats.build_statistics statistics.sqlite -o out/road_data.json
    python -m roadstats.build_statistics statistics.sqlite --lenient --manifest
    python -m roadstats.build_statistics statistics.sqlite --max-speed-output maxspeed.json

Exit codes:
    0: Report written.
    1: Output error — report or a sidecar could not be written.
    2: Usage error — no input file specified.
    3: Connection error — database could not be opened.
    4: Query error — class-label or data query failed.
    5: Parse error — a class column held a non-numeric value (strict mode).

Protocol:
    1. Open the database read-only.
    2. Derive class labels from the table schema.
    3. Aggregate every country row and render the report in memory.
    4. Stage the report and optional sidecars under temp names, then
       rename them all; any failure removes every file of this build.
    5. Close the database on every path.
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from dataclasses import dataclass, field
from pathlib import Path

from roadstats.aggregate import aggregate, fetch_country_rows
from roadstats.config import Settings, configure_logging
from roadstats.constants import DEFAULT_OUTPUT, EXIT_OK
from roadstats.datastore import open_datastore
from roadstats.errors import ParseDegradation, RoadStatsError, UsageError
from roadstats.formatting import sha256_text
from roadstats.max_speed import fetch_max_speeds
from roadstats.report import (
    build_manifest,
    build_report,
    canonical_json,
    manifest_path_for,
    render_report,
    write_files,
)
from roadstats.schema import introspect_class_labels

logger = logging.getLogger("roadstats.build")


@dataclass
class BuildResult:
    """Outcome of one successful build."""

    output_path: Path
    class_labels: tuple[str, ...]
    country_count: int
    document: str
    degradations: list[ParseDegradation] = field(default_factory=list)
    manifest_path: Path | None = None
    max_speed_path: Path | None = None


def run(
    datastore_path: str | Path | None,
    output_path: str | Path = DEFAULT_OUTPUT,
    settings: Settings | None = None,
    manifest: bool = False,
    max_speed_output: str | Path | None = None,
) -> BuildResult:
    """Read, aggregate and serialize. Nothing is written unless every step succeeds."""
    settings = settings or Settings()
    output_path = Path(output_path)

    with open_datastore(datastore_path) as conn:
        labels = introspect_class_labels(conn, settings.table, settings.key_column)
        columns, rows = fetch_country_rows(conn, settings.table, settings.key_column)
        countries = aggregate(rows, strict=settings.strict, columns=columns)
        report = build_report(countries.codes, countries.records, labels)
        document = render_report(report)
        speeds = fetch_max_speeds(conn) if max_speed_output is not None else None

        result = BuildResult(
            output_path=output_path,
            class_labels=labels,
            country_count=len(report),
            document=document,
            degradations=countries.degradations,
        )

        # Report first: write_files renames it last.
        files: list[tuple[Path, str]] = [(output_path, document)]
        if manifest:
            result.manifest_path = manifest_path_for(output_path)
            files.append((
                result.manifest_path,
                canonical_json(build_manifest(output_path, document, labels, len(report))),
            ))
        if speeds is not None:
            result.max_speed_path = Path(max_speed_output)
            files.append((result.max_speed_path, canonical_json(speeds)))
        write_files(files)

    logger.info(json.dumps({
        "event": "build_complete",
        "output": str(output_path),
        "sha256": sha256_text(document),
        "countries": result.country_count,
        "classes": len(labels),
        "degraded_rows": len(result.degradations),
    }))
    return result


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="roadstats-build",
        description="Build a per-country road length report (JSON) from a statistics database.",
    )
    parser.add_argument(
        "datastore",
        nargs="?",
        default=None,
        help="Statistics SQLite database (e.g., statistics.sqlite).",
    )
    parser.add_argument(
        "-o", "--output",
        default=DEFAULT_OUTPUT,
        help=f"Report path (default: {DEFAULT_OUTPUT}).",
    )
    parser.add_argument(
        "--table",
        default=None,
        help="Source table (default: countrydata, env ROADSTATS_TABLE).",
    )
    parser.add_argument(
        "--key-column",
        default=None,
        help="Country-code column (default: isocode, env ROADSTATS_KEY_COLUMN).",
    )
    parser.add_argument(
        "--lenient",
        action="store_true",
        help="Tolerate malformed class values; affected records come out shorter.",
    )
    parser.add_argument(
        "--manifest",
        action="store_true",
        help="Also write <output>.manifest.json with the report digest.",
    )
    parser.add_argument(
        "--max-speed-output",
        default=None,
        help="Also write max speeds of the main road classes to this path.",
    )
    parser.add_argument(
        "--log-level",
        default=None,
        help="Logging level (default: INFO, env ROADSTATS_LOG_LEVEL).",
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    """Run the build. Returns exit code."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    settings = Settings.from_env().override(
        table=args.table,
        key_column=args.key_column,
        strict=False if args.lenient else None,
        log_level=args.log_level,
    )
    configure_logging(settings.log_level)

    try:
        run(
            args.datastore,
            args.output,
            settings=settings,
            manifest=args.manifest,
            max_speed_output=args.max_speed_output,
        )
    except RoadStatsError as exc:
        print(f"ERROR: {exc}", file=sys.stderr)
        if isinstance(exc, UsageError):
            parser.print_usage(sys.stderr)
        return exc.exit_code

    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
