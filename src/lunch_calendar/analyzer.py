"""Menu analysis: classify every plan-line of a serving session for one month."""

from __future__ import annotations

import json
import logging
from collections import defaultdict
from collections.abc import Collection, Iterable
from datetime import date

from lunch_calendar.classifier import classify_recipe, is_companion
from lunch_calendar.config import session_preferences
from lunch_calendar.feed import parse_feed_date
from lunch_calendar.har import HarCapture
from lunch_calendar.models import (
    FamilyMenu,
    MenuDay,
    ProcessedDay,
    ProcessedLine,
    ProcessedMonth,
    RecipeItem,
)

logger = logging.getLogger(__name__)


def order_plan_names(plan_names: Iterable[str], display_order: Iterable[str] = ()) -> list[str]:
    """Order plan names: names from display_order first (in that order), the rest alphabetically."""
    remaining = set(plan_names)
    ordered: list[str] = []
    for name in display_order:
        if name in remaining:
            ordered.append(name)
            remaining.discard(name)
    ordered.extend(sorted(remaining))
    return ordered


def build_academic_notes(feed: FamilyMenu) -> dict[date, str]:
    """Flatten all academic calendars into date -> note. Last note seen for a date wins."""
    notes: dict[date, str] = {}
    for calendar in feed.academic_calendars:
        for day in calendar.days:
            if not day.note:
                continue
            parsed = parse_feed_date(day.date)
            if parsed is None:
                logger.warning("Skipping academic calendar entry with bad date '%s'", day.date)
                continue
            if parsed in notes and notes[parsed] != day.note:
                logger.debug(
                    "Academic note for %s replaced: '%s' -> '%s'", parsed, notes[parsed], day.note
                )
            notes[parsed] = day.note
    return notes


def extract_entrees(
    menu_day: MenuDay,
    selected_allergen_ids: Collection[str],
    not_preferred_names: Collection[str],
    favorite_names: Collection[str],
) -> list[RecipeItem]:
    """Classify every recipe in the day's entree categories, in feed order."""
    entrees: list[RecipeItem] = []
    for meal in menu_day.meals:
        for category in meal.categories:
            if not category.is_entree:
                continue

            # "with ..." companions inherit the preceding entree's allergen status
            parent_contains_allergen = False
            for recipe in category.recipes:
                companion = is_companion(recipe.name)
                item = classify_recipe(
                    recipe,
                    selected_allergen_ids,
                    not_preferred_names,
                    favorite_names,
                    inherited_allergen=companion and parent_contains_allergen,
                )
                if not companion:
                    parent_contains_allergen = item.contains_allergen

                logger.debug(
                    "Recipe '%s' allergens=%s contains_selected=%s",
                    recipe.name,
                    ",".join(recipe.allergens),
                    item.contains_allergen,
                )
                entrees.append(item)
    return entrees


def analyze_menu(
    feed: FamilyMenu,
    selected_allergen_ids: Collection[str] | None,
    not_preferred_names: Collection[str] | None,
    favorite_names: Collection[str] | None,
    year: int,
    month: int,
    session_name: str,
    building_name: str | None = None,
    plan_display_order: Iterable[str] = (),
) -> ProcessedMonth:
    """Classify one serving session's menu for a calendar month.

    Returns one ProcessedDay per date that has plan entries or an academic
    note in the month, date-ascending with no duplicates. An unknown session
    yields a month with no days.
    """
    if not 1 <= month <= 12:
        raise ValueError(f"Month must be 1-12, got {month}")

    allergen_ids = set(selected_allergen_ids or ())
    not_preferred = set(not_preferred_names or ())
    favorites = set(favorite_names or ())

    logger.info(
        "Analyzing menu for %d/%d session=%s with %d selected allergens",
        month,
        year,
        session_name,
        len(allergen_ids),
    )

    session = feed.session(session_name)
    if session is None:
        logger.warning(
            "No '%s' session found in menu data (available: %s)",
            session_name,
            ", ".join(feed.session_names()) or "none",
        )
        return ProcessedMonth(
            year=year,
            month=month,
            days=(),
            building_name=building_name,
            session_name=session_name,
        )

    academic_notes = build_academic_notes(feed)

    # date -> plan name -> entrees
    by_date: dict[date, dict[str, list[RecipeItem]]] = defaultdict(dict)
    for plan in session.plans:
        day_count = 0
        for menu_day in plan.days:
            parsed = parse_feed_date(menu_day.date)
            if parsed is None:
                logger.warning(
                    "Skipping day with bad date '%s' in plan '%s'", menu_day.date, plan.name
                )
                continue
            if parsed.year != year or parsed.month != month:
                continue

            entrees = extract_entrees(menu_day, allergen_ids, not_preferred, favorites)
            # A plan listing the same date twice contributes one merged line
            by_date[parsed].setdefault(plan.name, []).extend(entrees)
            day_count += 1
        logger.info("Found plan: %s with %d days in month", plan.name, day_count)

    for note_date in academic_notes:
        if note_date.year == year and note_date.month == month:
            by_date.setdefault(note_date, {})

    display_order = list(plan_display_order)
    days: list[ProcessedDay] = []
    for day_date in sorted(by_date):
        plans = by_date[day_date]
        lines = []
        for plan_name in order_plan_names(plans, display_order):
            entrees = plans[plan_name]
            lines.append(ProcessedLine(
                plan_name=plan_name,
                is_safe=any(e.is_safe for e in entrees),
                entrees=tuple(entrees),
            ))

        day = ProcessedDay(
            date=day_date,
            lines=tuple(lines),
            academic_note=academic_notes.get(day_date),
        )
        logger.debug(
            "Day %s: %d/%d lines safe, note=%s",
            day_date.isoformat(),
            sum(1 for line in lines if line.is_safe),
            len(lines),
            day.academic_note,
        )
        days.append(day)

    return ProcessedMonth(
        year=year,
        month=month,
        days=tuple(days),
        building_name=building_name,
        session_name=session_name,
    )


def analyze_capture(
    capture: HarCapture,
    config: dict,
    year: int,
    month: int,
    building_name: str | None = None,
) -> ProcessedMonth:
    """Run analyze_menu with the session preferences stored in settings."""
    session_name = config["selected_session_name"]
    not_preferred, favorites, _ = session_preferences(config, session_name)

    if building_name is None:
        building = capture.identifier.building(config.get("building_id"))
        building_name = building.name if building else None

    return analyze_menu(
        capture.menu,
        config.get("selected_allergen_ids") or [],
        not_preferred,
        favorites,
        year,
        month,
        session_name,
        building_name=building_name,
        plan_display_order=config.get("plan_display_order") or (),
    )


def month_to_dict(month: ProcessedMonth) -> dict:
    return {
        "year": month.year,
        "month": month.month,
        "building": month.building_name,
        "session": month.session_name,
        "days": [
            {
                "date": day.date.isoformat(),
                "academic_note": day.academic_note,
                "no_school": day.is_no_school,
                "lines": [
                    {
                        "plan": line.plan_name,
                        "safe": line.is_safe,
                        "entrees": [
                            {
                                "name": e.name,
                                "contains_allergen": e.contains_allergen,
                                "not_preferred": e.is_not_preferred,
                                "favorite": e.is_favorite,
                            }
                            for e in line.entrees
                        ],
                    }
                    for line in day.lines
                ],
            }
            for day in month.days
        ],
    }


def format_month_json(month: ProcessedMonth) -> str:
    return json.dumps(month_to_dict(month), indent=2, ensure_ascii=False)


def run_analyze(
    capture: HarCapture,
    config: dict,
    year: int,
    month: int,
    building_name: str | None = None,
) -> None:
    processed = analyze_capture(capture, config, year, month, building_name)
    print(format_month_json(processed))
