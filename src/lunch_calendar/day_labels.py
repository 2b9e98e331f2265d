"""Rotating day labels: cycle assignment over school days and label sources."""

from __future__ import annotations

import calendar
import logging
import re
from collections.abc import Callable, Iterable, Sequence
from dataclasses import dataclass
from datetime import date
from pathlib import Path
from typing import Protocol

from bs4 import BeautifulSoup, Tag

from lunch_calendar.models import DayLabel

logger = logging.getLogger(__name__)

DEFAULT_LABEL_COLOR = "#6c757d"

LABEL_COLORS: dict[str, str] = {
    "red": "#dc3545",
    "white": "#adb5bd",
    "blue": "#0d6efd",
    "gold": "#ffc107",
    "green": "#198754",
    "silver": "#adb5bd",
    "black": "#212529",
    "orange": "#fd7e14",
    "purple": "#6f42c1",
}

# Finalsite CMS calendar markup
DATE_CLASS = "fsCalendarDate"
EVENT_TITLE_CLASS = "fsCalendarEventTitle"

LABEL_PATTERN = re.compile(
    r"^(?:(?:Red|White|Blue|Gold|Green|Silver|Black|Orange|Purple|[A-Z])\s*Day|Day\s*[A-Z])$",
    re.IGNORECASE,
)
_DAY_SUFFIX = re.compile(r"\s*Day$", re.IGNORECASE)


def assign_day_labels(
    days: Iterable[date],
    cycle: Sequence[DayLabel],
    start_date: date | None = None,
    is_school_day: Callable[[date], bool] | None = None,
) -> dict[date, DayLabel]:
    """Assign cycle labels to successive school days.

    Only dates passing ``is_school_day`` advance the cycle. Dates before
    ``start_date`` (default: the first school day) get no label. The cycle
    restarts on every call; carrying a position across months is up to the
    caller.
    """
    if not cycle:
        return {}

    school_days = sorted({d for d in days if is_school_day is None or is_school_day(d)})
    if start_date is not None:
        school_days = [d for d in school_days if d >= start_date]

    return {d: cycle[i % len(cycle)] for i, d in enumerate(school_days)}


@dataclass(frozen=True)
class DayLabelEntry:
    """A dated label as published by a school calendar, e.g. (2026-02-05, "Red Day")."""
    date: date
    label: str


class DayLabelSource(Protocol):
    def entries(self) -> list[DayLabelEntry]: ...


def is_day_label(title: str) -> bool:
    return bool(LABEL_PATTERN.match(title.strip()))


def _block_date(block: Tag) -> date | None:
    """Date of an fsCalendarDate element; data-month is 0-indexed."""
    try:
        year = int(block.get("data-year"))
        month = int(block.get("data-month")) + 1
        day = int(block.get("data-day"))
    except (TypeError, ValueError):
        logger.debug("Skipping calendar block without numeric date attributes: %s", block.attrs)
        return None

    if year < 1 or not 1 <= month <= 12 or day < 1 or day > calendar.monthrange(year, month)[1]:
        logger.debug("Skipping calendar block with impossible date %s/%s/%s", month, day, year)
        return None
    return date(year, month, day)


def parse_calendar_day_labels(html: str) -> list[DayLabelEntry]:
    """Extract day-label events from Finalsite calendar page markup.

    Each ``fsCalendarDate`` element carries data-day/data-year/data-month
    (months are 0-indexed). Event titles (``fsCalendarEventTitle``) that
    follow it in document order, up to the next date element, belong to
    that day whether they are nested inside it or sit in a sibling info
    box. Titles matching the label grammar become entries; impossible
    dates and other event titles are ignored.
    """
    soup = BeautifulSoup(html, "html.parser")
    results: list[DayLabelEntry] = []
    current: date | None = None

    for element in soup.find_all(class_=[DATE_CLASS, EVENT_TITLE_CLASS]):
        classes = element.get("class") or []
        if DATE_CLASS in classes:
            current = _block_date(element)
            continue
        if current is None:
            continue

        title = " ".join((element.get("title") or element.get_text()).split())
        if is_day_label(title):
            results.append(DayLabelEntry(date=current, label=title))

    results.sort(key=lambda e: e.date)
    return results


class StaticDayLabelSource:
    """Day labels supplied directly, e.g. from saved settings."""

    def __init__(self, entries: Iterable[DayLabelEntry]):
        self._entries = sorted(entries, key=lambda e: e.date)

    def entries(self) -> list[DayLabelEntry]:
        return list(self._entries)


class HtmlCalendarDayLabelSource:
    """Day labels scraped from an already-downloaded calendar page."""

    def __init__(self, html: str):
        self._html = html

    def entries(self) -> list[DayLabelEntry]:
        found = parse_calendar_day_labels(self._html)
        logger.info(
            "Found %d day label entries with %d distinct labels",
            len(found),
            len({e.label.lower() for e in found}),
        )
        return found


def compact_label(label: str) -> str:
    """'Red Day' -> 'Red'. 'Day A' is left alone."""
    stripped = _DAY_SUFFIX.sub("", label).strip()
    return stripped or label


def cycle_from_entries(entries: Sequence[DayLabelEntry]) -> tuple[list[DayLabel], date | None]:
    """Build a label cycle and anchor date from dated label entries.

    Distinct labels in first-seen order (case-insensitive), colored from
    LABEL_COLORS. The anchor is the first entry's date.
    """
    ordered = sorted(entries, key=lambda e: e.date)
    seen: set[str] = set()
    cycle: list[DayLabel] = []
    for entry in ordered:
        label = compact_label(entry.label)
        key = label.lower()
        if key in seen:
            continue
        seen.add(key)
        cycle.append(DayLabel(label=label, color=LABEL_COLORS.get(key, DEFAULT_LABEL_COLOR)))

    start = ordered[0].date if ordered else None
    return cycle, start


def load_cycle(source: DayLabelSource) -> tuple[list[DayLabel], date | None]:
    return cycle_from_entries(source.entries())


def run_day_labels(html_path: Path) -> None:
    """CLI entry point: show labels found in a saved calendar page and the derived cycle."""
    html = html_path.read_text(encoding="utf-8")
    source = HtmlCalendarDayLabelSource(html)
    entries = source.entries()
    if not entries:
        logger.warning("No day labels found in %s", html_path)
        return

    for entry in entries:
        print(f"{entry.date.isoformat()}  {entry.label}")

    cycle, start = cycle_from_entries(entries)
    print()
    print("Cycle: " + " -> ".join(f"{d.label} ({d.color})" for d in cycle))
    print(f"Start: {start.isoformat()}")
