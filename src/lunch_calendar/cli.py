"""CLI entry point for the lunch calendar."""

from __future__ import annotations

import argparse
import logging
import sys
from datetime import date
from pathlib import Path

logger = logging.getLogger(__name__)


def parse_date_arg(value: str) -> date:
    try:
        return date.fromisoformat(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"expected YYYY-MM-DD, got '{value}'")


def load_settings(args: argparse.Namespace) -> dict:
    from lunch_calendar.config import apply_cli_overrides, load_config

    settings_path = Path(args.settings) if args.settings else None
    config = load_config(settings_path)
    return apply_cli_overrides(
        config,
        session=getattr(args, "session", None),
        theme=getattr(args, "theme", None),
        layout=getattr(args, "layout", None),
        allergens=getattr(args, "allergens", None),
        share_footer=getattr(args, "share_footer", None),
    )


def load_capture(args: argparse.Namespace):
    from lunch_calendar.har import load_har, load_json_sources

    if args.har:
        return load_har(Path(args.har))
    if args.menu:
        return load_json_sources(
            Path(args.menu),
            allergies_path=Path(args.allergies) if args.allergies else None,
            identifier_path=Path(args.identifier) if args.identifier else None,
        )
    raise ValueError("Provide either --har or --menu")


def resolve_month(args: argparse.Namespace) -> tuple[int, int]:
    reference = args.today or date.today()
    return args.year or reference.year, args.month or reference.month


def cmd_render(args: argparse.Namespace) -> None:
    from lunch_calendar.calendar_renderer import run_render

    config = load_settings(args)
    year, month = resolve_month(args)
    run_render(
        load_capture(args),
        config,
        year,
        month,
        today=args.today or date.today(),
        building_name=args.building,
        output=Path(args.output) if args.output else None,
    )


def cmd_analyze(args: argparse.Namespace) -> None:
    from lunch_calendar.analyzer import run_analyze

    config = load_settings(args)
    year, month = resolve_month(args)
    run_analyze(load_capture(args), config, year, month, building_name=args.building)


def cmd_themes(args: argparse.Namespace) -> None:
    from lunch_calendar.themes import run_themes

    config = load_settings(args)
    run_themes(month=args.month, hidden_names=config.get("hidden_theme_names") or ())


def cmd_day_labels(args: argparse.Namespace) -> None:
    from lunch_calendar.day_labels import run_day_labels

    run_day_labels(Path(args.calendar_file))


def add_source_args(p: argparse.ArgumentParser) -> None:
    p.add_argument("--har", type=str, help="HAR capture of the public menu page")
    p.add_argument("--menu", type=str, help="Saved FamilyMenu JSON response")
    p.add_argument("--allergies", type=str, help="Saved FamilyAllergy JSON response")
    p.add_argument("--identifier", type=str, help="Saved FamilyMenuIdentifier JSON response")
    p.add_argument("--year", type=int, default=None, help="Calendar year (default: current)")
    p.add_argument("--month", type=int, default=None, help="Calendar month 1-12 (default: current)")
    p.add_argument("--session", type=str, help="Serving session, e.g. Lunch or Breakfast")
    p.add_argument("--building", type=str, help="Building name shown in the title")
    p.add_argument(
        "--allergens", type=str, help="Comma-separated allergen ids to avoid"
    )
    p.add_argument(
        "--today",
        type=parse_date_arg,
        default=None,
        help="Reference date YYYY-MM-DD for past-day marking (default: today)",
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="lunch-calendar",
        description="Allergen-aware school lunch calendars from LINQ Connect menus",
    )
    parser.add_argument(
        "--settings",
        type=str,
        default=None,
        help="Path to settings YAML (default: ~/.config/lunch-calendar/settings.yaml)",
    )
    parser.add_argument(
        "--log-level",
        choices=["debug", "info", "warning", "error"],
        default="info",
        help="Logging verbosity (default: info)",
    )
    parser.add_argument(
        "--log-file",
        type=str,
        default=None,
        help="Also write logs to this file",
    )

    sub = parser.add_subparsers(dest="command", required=True)

    # render
    p_render = sub.add_parser("render", help="Generate a printable HTML calendar")
    add_source_args(p_render)
    p_render.add_argument("--theme", type=str, help="Theme name (default: suggested for month)")
    p_render.add_argument(
        "--layout", type=str, choices=["List", "IconsLeft", "IconsRight"], default=None
    )
    p_render.add_argument(
        "--share-footer",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="Include QR code share footer",
    )
    p_render.add_argument(
        "--output", type=str, help="Output file (default: {Month}-{Year}-{Session}.html)"
    )
    p_render.set_defaults(func=cmd_render)

    # analyze
    p_analyze = sub.add_parser("analyze", help="Print the classified month as JSON")
    add_source_args(p_analyze)
    p_analyze.set_defaults(func=cmd_analyze)

    # themes
    p_themes = sub.add_parser("themes", help="List calendar themes")
    p_themes.add_argument("--month", type=int, default=None, help="Show the suggestion for a month")
    p_themes.set_defaults(func=cmd_themes)

    # day-labels
    p_labels = sub.add_parser(
        "day-labels", help="Extract rotating day labels from a saved school calendar page"
    )
    p_labels.add_argument("calendar_file", type=str, help="Saved calendar HTML page")
    p_labels.set_defaults(func=cmd_day_labels)

    return parser


def main(argv: list[str] | None = None) -> None:
    from lunch_calendar.har import HarError
    from lunch_calendar.log import setup_logging

    parser = build_parser()
    args = parser.parse_args(argv)

    log_file = Path(args.log_file) if args.log_file else None
    setup_logging(level=args.log_level, log_file=log_file)

    try:
        args.func(args)
    except (HarError, ValueError, OSError) as e:
        logger.error("%s", e)
        sys.exit(1)


if __name__ == "__main__":
    main()
