"""CLI entrypoint for linting a markdown vault."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from typing import Any, Dict, List, Sequence, Tuple

from .corpus import load_pages, location
from .engine.config import DEFAULT_CONFIG_NAME, EngineConfig, load_config, with_overrides
from .engine.errors import LintError
from .engine.index import lint_pages
from .engine.report import LintReport
from .engine.types import Finding, FindingKind, Page
from .settings import configure_logging

logger = logging.getLogger(__name__)

_SPANNED_KINDS = (FindingKind.BROKEN_WIKILINK, FindingKind.UNLINKED_TEXT)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="vaultlint",
        description="Find broken wikilinks, duplicate aliases, near-duplicate pages and unlinked mentions in a markdown vault.",
    )
    parser.add_argument(
        "-c",
        "--config",
        help=f"Path to a YAML config file (defaults to ./{DEFAULT_CONFIG_NAME} when present).",
    )
    parser.add_argument(
        "-d",
        "--directory",
        dest="directories",
        action="append",
        default=[],
        help="Directory to scan for notes. Repeat for several; replaces the configured list.",
    )
    parser.add_argument("-n", "--ngram-size", type=int, help="Longest word n-gram compared between titles.")
    parser.add_argument("-b", "--boundary-pattern", help="Regex that splits titles into independent segments.")
    parser.add_argument("-s", "--filename-spacing-pattern", help="Regex treated as a space inside filenames.")
    parser.add_argument(
        "-m",
        "--filename-match-threshold",
        type=int,
        help="Minimum similarity score (0-100) to report similar files and fuzzy mentions.",
    )
    parser.add_argument(
        "-e",
        "--exclude",
        action="append",
        default=[],
        help="Glob over finding identifiers to suppress, like 'duplicate_alias:*'. Repeatable.",
    )
    parser.add_argument("-j", "--workers", type=int, help="Number of worker threads.")
    parser.add_argument(
        "--format",
        choices=("text", "json"),
        default="text",
        help="Output format.",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        default=False,
        help="Increase log verbosity for troubleshooting.",
    )
    return parser


def resolve_config(args: argparse.Namespace) -> EngineConfig:
    """Load the config file and apply the command-line overrides on top."""

    if args.config:
        config = load_config(args.config, required=True)
    else:
        config = load_config(DEFAULT_CONFIG_NAME)

    config = with_overrides(
        config,
        {
            "ngram_size": args.ngram_size,
            "boundary_pattern": args.boundary_pattern,
            "filename_spacing_pattern": args.filename_spacing_pattern,
            "filename_match_threshold": args.filename_match_threshold,
            "exclude": list(args.exclude),
            "workers": args.workers,
        },
    )
    if args.directories:
        raw = dict(config.raw)
        raw["directories"] = list(args.directories)
        config = EngineConfig(raw)
    return config.validate()


def _position(finding: Finding, pages: Dict[str, Page]) -> Tuple[str, int, int]:
    page = pages.get(finding.page)
    if page is None:
        return finding.page, 1, 1
    if finding.kind in _SPANNED_KINDS:
        line, column = location(page, finding.offset)
        return page.path, line, column
    return page.path, 1, 1


def format_text(report: LintReport, pages: Sequence[Page]) -> List[str]:
    """Render one ``path:line:col: identifier: message`` line per finding plus a summary."""

    by_title = {page.title: page for page in pages}
    lines = []
    for finding in report.findings:
        path, line, column = _position(finding, by_title)
        lines.append(f"{path}:{line}:{column}: {finding.identifier}: {finding.message}")

    counts = report.counts()
    total = sum(counts.values())
    if total:
        details = ", ".join(f"{count} {kind}" for kind, count in counts.items() if count)
        lines.append(f"Found {total} problem(s) in {len(pages)} notes ({details}).")
    else:
        lines.append(f"No problems found in {len(pages)} notes.")
    return lines


def format_json(report: LintReport, pages: Sequence[Page]) -> str:
    by_title = {page.title: page for page in pages}
    document: Dict[str, Any] = report.to_dict()
    for entry, finding in zip(document["findings"], report.findings):
        path, line, column = _position(finding, by_title)
        entry["location"] = {"path": path, "line": line, "column": column}
    document["notes"] = len(pages)
    return json.dumps(document, indent=2, ensure_ascii=False)


def main(argv: list[str] | None = None) -> int:
    """CLI entrypoint for vaultlint."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    configure_logging(verbose=bool(args.verbose))

    try:
        config = resolve_config(args)
        pages = load_pages(config.directories, config)
        report = lint_pages(pages, config)
    except LintError as exc:
        logger.debug("Lint run aborted", exc_info=True)
        parser.exit(2, f"vaultlint: error: {exc}\n")

    if args.format == "json":
        print(format_json(report, pages))
    else:
        for line in format_text(report, pages):
            print(line)

    return 1 if report.has_errors else 0


if __name__ == "__main__":
    sys.exit(main())
