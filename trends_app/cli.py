"""Command-line front end printing trend reports as JSON."""

from __future__ import annotations

import argparse
import json
import logging
import sys

from trends_app.core.config import load_settings
from trends_app.core.errors import TrendsError
from trends_app.core.mappers import to_payload
from trends_app.core.service import ArtifactService, TestingTrendService

logger = logging.getLogger(__name__)


def setup_logging(level: str, verbose: bool = False) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def _emit(report) -> None:
    print(json.dumps(to_payload(report), indent=2, default=str))


def _parse_selectors(pairs: list[str]) -> dict[str, str]:
    selectors: dict[str, str] = {}
    for pair in pairs:
        name, sep, expression = pair.partition("=")
        if not sep or not name.strip() or not expression.strip():
            raise ValueError(f"Expected NAME=SELECTOR, got {pair!r}")
        selectors[name.strip()] = expression.strip()
    return selectors


def cmd_trends(args, settings) -> int:
    service = TestingTrendService(settings)
    presets = {
        "quick": service.quick_trends,
        "extended": service.extended_trends,
        "monthly": service.monthly_trends,
    }
    if args.preset:
        _emit(presets[args.preset]())
    else:
        _emit(service.get_testing_trends(args.days))
    return 0


def cmd_files(args, settings) -> int:
    _emit(ArtifactService(settings).get_xml_files_summary(args.directory))
    return 0


def cmd_extract(args, settings) -> int:
    _emit(ArtifactService(settings).extract_trend_data(args.directory, args.selector))
    return 0


def cmd_business(args, settings) -> int:
    _emit(ArtifactService(settings).extract_business_metrics_trends(args.directory))
    return 0


def cmd_custom(args, settings) -> int:
    selectors = _parse_selectors(args.selectors)
    _emit(ArtifactService(settings).extract_custom_elements(args.directory, selectors))
    return 0


def cmd_dashboard(args, settings) -> int:
    _emit(ArtifactService(settings).get_xml_analytics_dashboard(args.directory))
    return 0


def cmd_examples(args, settings) -> int:
    _emit(ArtifactService.selector_examples())
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="trends-app", description="XML test artifact trends")
    parser.add_argument("--verbose", "-v", action="store_true", help="Debug logging")
    sub = parser.add_subparsers(dest="command")

    p = sub.add_parser("trends", help="Combined testing trends across schema families")
    group = p.add_mutually_exclusive_group()
    group.add_argument("--days", type=int, default=None, help="Lookback window in days")
    group.add_argument("--preset", choices=["quick", "extended", "monthly"])

    p = sub.add_parser("files", help="List XML artifacts in a directory")
    p.add_argument("--directory", "-d", default=None)

    p = sub.add_parser("extract", help="Extract values with a selector and summarise them")
    p.add_argument("--directory", "-d", default=None)
    p.add_argument("--selector", "-s", required=True)

    p = sub.add_parser("business", help="Structural metrics per file plus aggregated trends")
    p.add_argument("--directory", "-d", default=None)

    p = sub.add_parser("custom", help="Run several named selectors per file")
    p.add_argument("--directory", "-d", default=None)
    p.add_argument("selectors", nargs="+", metavar="NAME=SELECTOR")

    p = sub.add_parser("dashboard", help="File summary and business metrics together")
    p.add_argument("--directory", "-d", default=None)

    sub.add_parser("examples", help="Show common selector expressions")
    return parser


COMMANDS = {
    "trends": cmd_trends,
    "files": cmd_files,
    "extract": cmd_extract,
    "business": cmd_business,
    "custom": cmd_custom,
    "dashboard": cmd_dashboard,
    "examples": cmd_examples,
}


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    if not args.command:
        parser.print_help()
        return 1

    settings = load_settings()
    setup_logging(settings.log_level, args.verbose)
    try:
        return COMMANDS[args.command](args, settings)
    except (TrendsError, ValueError) as exc:
        logger.error("%s failed: %s", args.command, exc)
        print(f"Error: {exc}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
