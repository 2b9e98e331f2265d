"""Render a classified month as a self-contained, printable HTML calendar."""

from __future__ import annotations

import calendar
import logging
from collections.abc import Collection, Iterable
from dataclasses import dataclass, field
from datetime import date, timedelta
from pathlib import Path

import segno
from jinja2 import Environment, FileSystemLoader

from lunch_calendar.analyzer import analyze_capture, order_plan_names
from lunch_calendar.config import build_render_options, session_preferences, source_url_for
from lunch_calendar.day_labels import assign_day_labels
from lunch_calendar.feed import allergen_names_for
from lunch_calendar.har import HarCapture
from lunch_calendar.models import (
    CalendarRenderOptions,
    DayLabel,
    HolidayOverride,
    LabelCorner,
    LayoutMode,
    ProcessedDay,
    ProcessedLine,
    ProcessedMonth,
)
from lunch_calendar.themes import CalendarTheme, select_theme

logger = logging.getLogger(__name__)

TEMPLATE_DIR = Path(__file__).parent / "templates"
TEMPLATE_NAME = "calendar.html.j2"

WEEKDAY_NAMES = ["Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday"]

LINE_PALETTE = [
    "#0d6efd", "#6f42c1", "#d63384", "#fd7e14", "#20c997",
    "#0dcaf0", "#6610f2", "#e83e8c", "#198754", "#dc3545",
]

HOME_EMOJI = "\U0001F3E0"
SAFE_ICON = "✅"
UNSAFE_ICON = "⛔"

# First matching keyword group wins
HOLIDAY_EMOJI: list[tuple[tuple[str, ...], str]] = [
    (("winter break", "christmas"), "❄️"),
    (("thanksgiving",), "🦃"),
    (("president",), "🇺🇸"),
    (("mlk", "martin luther king"), "✊"),
    (("memorial",), "🇺🇸"),
    (("labor",), "🇺🇸"),
    (("spring break",), "🌸"),
    (("teacher",), "📚"),
]

PROJECT_URL = "https://github.com/astoltz/school-lunch-menu"
SHARE_CALL_TO_ACTION = "Want your own allergen-friendly lunch calendar? Scan to learn more!"
SOURCE_CALL_TO_ACTION = "Scan to view the full school menu online"

# corner -> (border-width, triangle position, text position, text rotation, colored border side)
CORNER_STYLES: dict[LabelCorner, tuple[str, str, str, str, str]] = {
    LabelCorner.TOP_RIGHT: (
        "0 32px 32px 0", "top:0;right:0;", "top:2px;right:1px;", "rotate(45deg)",
        "border-right-color",
    ),
    LabelCorner.TOP_LEFT: (
        "0 0 32px 32px", "top:0;left:0;", "top:2px;left:1px;", "rotate(-45deg)",
        "border-left-color",
    ),
    LabelCorner.BOTTOM_RIGHT: (
        "32px 0 0 32px", "bottom:0;right:0;", "bottom:2px;right:1px;", "rotate(-45deg)",
        "border-left-color",
    ),
    LabelCorner.BOTTOM_LEFT: (
        "32px 32px 0 0", "bottom:0;left:0;", "bottom:2px;left:1px;", "rotate(45deg)",
        "border-right-color",
    ),
}


@dataclass
class PlanStyle:
    css_class: str
    color: str
    label: str


@dataclass
class EntreeView:
    name: str
    kind: str  # "safe", "favorite" or "not-preferred"


@dataclass
class PlanSection:
    plan: PlanStyle
    forced_home: bool
    entrees: list[EntreeView]


@dataclass
class GridRow:
    plan: PlanStyle
    icon: str
    state_class: str
    tint: str
    entrees: list[EntreeView]
    message: str | None = None


@dataclass
class DayCell:
    kind: str  # "empty", "no-school" or "menu"
    day: int = 0
    classes: list[str] = field(default_factory=list)
    emoji: str | None = None
    note: str | None = None
    special_note: str | None = None
    label: DayLabel | None = None
    is_home_day: bool = False
    sections: list[PlanSection] = field(default_factory=list)
    rows: list[GridRow] = field(default_factory=list)

    @property
    def class_attr(self) -> str:
        return " ".join(self.classes)


def allergen_filter_label(allergen_names: Iterable[str]) -> str:
    """'No Allergen Filter', 'Dairy-Free' for milk alone, else 'Peanuts, Soy Free'."""
    names = list(allergen_names)
    if not names:
        return "No Allergen Filter"
    if len(names) == 1 and names[0].lower() == "milk":
        return "Dairy-Free"
    return ", ".join(names) + " Free"


def no_school_emoji(note: str) -> str:
    lower = note.lower()
    for keywords, emoji in HOLIDAY_EMOJI:
        if any(k in lower for k in keywords):
            return emoji
    return HOME_EMOJI


def no_school_display(
    note: str,
    overrides: dict[str, HolidayOverride] | None = None,
) -> tuple[str, str]:
    """Emoji and message for a no-school note. Configured keyword overrides win."""
    lower = note.lower()
    for keyword, override in (overrides or {}).items():
        if keyword and keyword.lower() in lower:
            emoji = override.emoji or no_school_emoji(note)
            return emoji, override.custom_message or note
    return no_school_emoji(note), note


def clean_no_school_note(note: str) -> str:
    """'Presidents Day - No School' -> 'Presidents Day'. The cell is already styled no-school."""
    lower = note.lower()
    idx = lower.find(" - no school")
    if idx > 0:
        return note[:idx].strip()
    idx = lower.find(" no school")
    if idx > 0 and note[:idx].rstrip().endswith("-"):
        return note[:idx].rstrip().rstrip("-").strip()
    return note


def qr_data_uri(data: str, scale: int = 4) -> str:
    """Encode data as a QR code and return it as a base64 PNG data URI."""
    return segno.make_qr(data, error="m").png_data_uri(scale=scale)


def normalize_weekdays(weekdays: Collection[str | int] | None) -> set[int]:
    """Weekday names ('Thursday') or indices (Monday=0) -> set of indices."""
    result: set[int] = set()
    lookup = {name.lower(): i for i, name in enumerate(WEEKDAY_NAMES)}
    for wd in weekdays or ():
        if isinstance(wd, int):
            result.add(wd % 7)
            continue
        idx = lookup.get(str(wd).strip().lower())
        if idx is None:
            logger.warning("Ignoring unknown weekday '%s'", wd)
            continue
        result.add(idx)
    return result


def build_plan_styles(
    month: ProcessedMonth,
    options: CalendarRenderOptions,
) -> dict[str, PlanStyle]:
    """Plan name -> badge style, in display order. Colors assigned alphabetically."""
    names = month.plan_names()
    styles = {
        name: PlanStyle(
            css_class=f"line-{i}",
            color=LINE_PALETTE[i % len(LINE_PALETTE)],
            label=options.plan_label_overrides.get(name) or name,
        )
        for i, name in enumerate(names)
    }
    return {name: styles[name] for name in order_plan_names(names, options.plan_display_order)}


def school_day_labels(month: ProcessedMonth, options: CalendarRenderOptions) -> dict[date, DayLabel]:
    by_date = {d.date: d for d in month.days}
    return assign_day_labels(
        by_date,
        options.day_label_cycle,
        start_date=options.day_label_start_date,
        is_school_day=lambda d: by_date[d].has_menu and not by_date[d].is_no_school,
    )


def _entree_views(line: ProcessedLine) -> list[EntreeView]:
    views = []
    for item in line.entrees:
        if item.contains_allergen:
            continue
        if item.is_not_preferred:
            views.append(EntreeView(item.name, "not-preferred"))
        elif item.is_favorite:
            views.append(EntreeView(item.name, "favorite"))
        else:
            views.append(EntreeView(item.name, "safe"))
    return views


def _is_past(d: date, options: CalendarRenderOptions) -> bool:
    return options.cross_out_past_days and options.today is not None and d < options.today


def _no_school_cell(
    day: ProcessedDay,
    options: CalendarRenderOptions,
) -> DayCell:
    cell = DayCell(kind="no-school", day=day.date.day, classes=["no-school"])
    if _is_past(day.date, options):
        cell.classes.append("past-day")
    if day.academic_note is not None:
        emoji, message = no_school_display(day.academic_note, options.holiday_overrides)
        cell.emoji = emoji
        cell.note = clean_no_school_note(message)
    return cell


def _menu_cell(
    day: ProcessedDay,
    forced_home_weekdays: set[int],
    plan_styles: dict[str, PlanStyle],
    options: CalendarRenderOptions,
    label: DayLabel | None,
) -> DayCell:
    is_forced_home = day.date.weekday() in forced_home_weekdays
    cell = DayCell(
        kind="menu",
        day=day.date.day,
        label=label,
        special_note=day.academic_note if day.has_special_note else None,
        is_home_day=is_forced_home or not day.any_line_safe,
    )
    if any(e.is_favorite and not e.contains_allergen for line in day.lines for e in line.entrees):
        cell.classes.append("favorite-day")
    if _is_past(day.date, options):
        cell.classes.append("past-day")

    for plan_name, style in plan_styles.items():
        line = day.line(plan_name)
        allergen_free = line is not None and line.has_allergen_free_entree

        if options.is_grid:
            if not allergen_free and not options.show_unsafe_lines:
                continue
            icon = options.plan_icon_overrides.get(plan_name, "").strip()
            if not icon:
                icon = SAFE_ICON if allergen_free else UNSAFE_ICON
            if not allergen_free:
                state = "btn-off"
            elif is_forced_home:
                state = "btn-forced-home"
            else:
                state = ""
            cell.rows.append(GridRow(
                plan=style,
                icon=icon,
                state_class=state,
                # ~10% opacity tint of the plan color
                tint=f"{style.color}1a",
                entrees=_entree_views(line) if allergen_free else [],
                message=None if allergen_free else options.unsafe_line_message,
            ))
        elif allergen_free:
            cell.sections.append(PlanSection(
                plan=style,
                forced_home=is_forced_home,
                entrees=_entree_views(line),
            ))

    return cell


def build_weeks(
    month: ProcessedMonth,
    forced_home_weekdays: set[int],
    plan_styles: dict[str, PlanStyle],
    options: CalendarRenderOptions,
) -> list[list[DayCell]]:
    """Monday-Friday rows covering the month; out-of-month cells are empty."""
    by_date = {d.date: d for d in month.days}
    labels = school_day_labels(month, options)

    first = date(month.year, month.month, 1)
    next_month = date(month.year + month.month // 12, month.month % 12 + 1, 1)
    current = first - timedelta(days=first.weekday())

    weeks: list[list[DayCell]] = []
    while current < next_month:
        row: list[DayCell] = []
        for offset in range(5):
            cell_date = current + timedelta(days=offset)
            if cell_date.month != month.month:
                row.append(DayCell(kind="empty"))
                continue

            day = by_date.get(cell_date)
            if day is None:
                # Weekday with no data: no school
                row.append(_no_school_cell(ProcessedDay(date=cell_date), options))
            elif day.is_no_school or not day.has_menu:
                row.append(_no_school_cell(day, options))
            else:
                row.append(_menu_cell(
                    day, forced_home_weekdays, plan_styles, options, labels.get(cell_date)
                ))
        weeks.append(row)
        current += timedelta(days=7)
    return weeks


def _environment() -> Environment:
    return Environment(
        loader=FileSystemLoader(TEMPLATE_DIR),
        autoescape=True,
        trim_blocks=True,
        lstrip_blocks=True,
        keep_trailing_newline=True,
    )


def generate_calendar_html(
    month: ProcessedMonth,
    selected_allergen_names: Iterable[str],
    forced_home_weekdays: Collection[str | int] | None,
    theme: CalendarTheme,
    options: CalendarRenderOptions | None = None,
) -> str:
    """Render the month as a complete HTML document.

    Output depends only on the arguments; ``options.today`` is the only
    notion of the current date.
    """
    logger.info("Generating HTML calendar for %s with theme %s", month.display_name, theme.name)

    options = options or CalendarRenderOptions()
    session_label = month.session_name or "Lunch"
    plan_styles = build_plan_styles(month, options)
    weeks = build_weeks(month, normalize_weekdays(forced_home_weekdays), plan_styles, options)

    share_codes: list[tuple[str, str, str]] = []
    if options.show_share_footer:
        if options.source_url:
            share_codes.append(
                (qr_data_uri(options.source_url), "Menu source QR code", SOURCE_CALL_TO_ACTION)
            )
        share_codes.append((qr_data_uri(PROJECT_URL), "Project QR code", SHARE_CALL_TO_ACTION))

    border, triangle_pos, text_pos, rotation, border_prop = CORNER_STYLES[options.day_label_corner]

    template = _environment().get_template(TEMPLATE_NAME)
    html = template.render(
        month=month,
        theme=theme,
        session_label=session_label,
        filter_label=allergen_filter_label(selected_allergen_names),
        plan_styles=list(plan_styles.values()),
        weekday_headers=WEEKDAY_NAMES[:5],
        weeks=weeks,
        grid=options.is_grid,
        buttons_left=options.layout_mode == LayoutMode.ICONS_LEFT,
        home_emoji=HOME_EMOJI,
        home_tint=f"{theme.home_badge_bg}1a",
        corner_border=border,
        corner_triangle_pos=triangle_pos,
        corner_text_pos=text_pos,
        corner_rotation=rotation,
        corner_border_prop=border_prop,
        show_share_footer=options.show_share_footer,
        share_codes=share_codes,
    )
    logger.info("Generated HTML calendar: %d characters", len(html))
    return html


def default_output_name(month: ProcessedMonth) -> str:
    """e.g. 'February-2026-Lunch.html'."""
    session = (month.session_name or "Lunch").replace(" ", "")
    return f"{calendar.month_name[month.month]}-{month.year}-{session}.html"


def run_render(
    capture: HarCapture,
    config: dict,
    year: int,
    month: int,
    today: date | None = None,
    building_name: str | None = None,
    output: Path | None = None,
) -> Path:
    """CLI entry point for render command. Returns the written file path."""
    processed = analyze_capture(capture, config, year, month, building_name)
    if not processed.days:
        logger.warning("No menu or calendar data for %s", processed.display_name)

    theme = select_theme(
        config.get("selected_theme_name"), month, config.get("hidden_theme_names") or ()
    )
    _, _, forced_home = session_preferences(config, config["selected_session_name"])
    identifier = capture.identifier.identifier or config.get("identifier")
    building_id = config.get("building_id")
    options = build_render_options(
        config, today=today, source_url=source_url_for(identifier, building_id)
    )

    html = generate_calendar_html(
        processed,
        allergen_names_for(config.get("selected_allergen_ids") or [], capture.allergies),
        forced_home,
        theme,
        options,
    )

    out_path = output or Path(default_output_name(processed))
    out_path.write_text(html, encoding="utf-8")
    logger.info("Calendar written to %s", out_path)
    return out_path
