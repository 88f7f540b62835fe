"""Command line interface for building apidoc site data.

Usage
-----
Build the navigation, search index and page files from documentation.js
output:

```
apidoc-data build docs/api.json --out site/_build/apidoc
```

Defaults come from ``APIDOC_*`` environment variables (see
:class:`apidoc_data.config.ApiDocSettings`).
"""

from __future__ import annotations

import argparse
import json
import sys
from dataclasses import replace
from pathlib import Path

from apidoc_common.errors import ApiDocError
from apidoc_common.logging import get_logger, setup_logging
from apidoc_common.problem_details import render_problem
from apidoc_data.artifacts import load_records, write_artifacts
from apidoc_data.config import ApiDocSettings, DuplicatePolicy, get_settings
from apidoc_data.content import JsonPageWriter
from apidoc_data.factory import create_data

__all__ = ["main"]

LOGGER = get_logger(__name__)


def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="apidoc-data",
        description="Build navigation, content pages and search index from extractor output.",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    build_parser = subparsers.add_parser("build", help="Build the site data artifacts")
    build_parser.add_argument("input", type=Path, help="JSON array of extractor records")
    build_parser.add_argument(
        "--out",
        type=Path,
        default=None,
        help="Output directory (default: APIDOC_OUTPUT_DIR or site/_build/apidoc)",
    )
    build_parser.add_argument(
        "--strict-duplicates",
        action="store_true",
        help="Fail when two containers derive the same id",
    )
    build_parser.add_argument(
        "--no-validate",
        action="store_true",
        help="Skip JSON Schema validation of the written documents",
    )
    build_parser.add_argument(
        "--log-level",
        type=str.upper,
        choices=("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"),
        default=None,
        help="Logging level (default: APIDOC_LOG_LEVEL or INFO)",
    )
    return parser.parse_args(argv)


def _cmd_build(args: argparse.Namespace, settings: ApiDocSettings) -> int:
    """Run the pipeline and write every artifact."""
    options = settings.build_options()
    if args.strict_duplicates:
        options = replace(options, duplicate_policy=DuplicatePolicy.ERROR)
    if args.no_validate:
        options = replace(options, validate_documents=False)

    out_dir: Path = args.out if args.out is not None else settings.output_dir
    writer = JsonPageWriter(
        out_dir / settings.pages_dir_name,
        validate=options.validate_documents,
    )

    records = load_records(args.input)
    result = create_data(records, writer=writer, options=options)
    paths = write_artifacts(result, out_dir, validate=options.validate_documents)

    summary = {
        "navigation": str(paths.navigation),
        "searchKeywords": str(paths.search_keywords),
        "pages": len(writer.written),
        "dropped": len(result.dropped),
    }
    sys.stdout.write(json.dumps(summary) + "\n")
    return 0


def _report(error: ApiDocError, command: str) -> int:
    LOGGER.log(
        error.log_level,
        "apidoc-data %s failed: %s",
        command,
        error.message,
        extra={"operation": command, "error_code": error.code.value},
    )
    problem = error.to_problem_details(instance=f"urn:apidoc:cli:{command}")
    sys.stderr.write(render_problem(problem) + "\n")
    return 1


def main(argv: list[str] | None = None) -> int:
    """Entry point for ``apidoc-data``.

    Returns
    -------
    int
        ``0`` on success, ``1`` when the build fails. Usage errors exit with
        ``2`` through :mod:`argparse`.
    """
    args = _parse_args(argv)
    try:
        settings = get_settings()
    except ApiDocError as exc:
        setup_logging(args.log_level or "INFO")
        return _report(exc, args.command)

    setup_logging(args.log_level or settings.log_level)

    if args.command == "build":
        try:
            return _cmd_build(args, settings)
        except ApiDocError as exc:
            return _report(exc, args.command)
    sys.stderr.write(f"Unknown command: {args.command}\n")
    return 1


if __name__ == "__main__":  # pragma: no cover - CLI entry point
    raise SystemExit(main())
