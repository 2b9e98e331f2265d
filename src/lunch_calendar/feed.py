"""Feed decoding: turn LINQ Connect JSON payloads into model objects."""

from __future__ import annotations

import logging
import re
from datetime import date

from lunch_calendar.models import (
    AcademicCalendar,
    AcademicCalendarDay,
    AllergyItem,
    Building,
    FamilyMenu,
    MenuDay,
    MenuIdentifier,
    MenuMeal,
    MenuPlan,
    MenuSession,
    Nutrient,
    Recipe,
    RecipeCategory,
)

logger = logging.getLogger(__name__)

_US_DATE = re.compile(r"^(\d{1,2})/(\d{1,2})/(\d{4})(?:\s.*)?$")
_ISO_DATE = re.compile(r"^(\d{4})-(\d{2})-(\d{2})(?:[T\s].*)?$")


def parse_feed_date(raw: str | None) -> date | None:
    """Parse a feed date string into a date.

    Handles: "2/2/2026", "02/02/2026", "2/2/2026 12:00:00 AM",
    "2026-02-02", "2026-02-02T00:00:00". Anything else -> None.
    """
    if not raw:
        return None

    s = str(raw).strip()

    m = _US_DATE.match(s)
    if m:
        month, day, year = int(m.group(1)), int(m.group(2)), int(m.group(3))
    else:
        m = _ISO_DATE.match(s)
        if not m:
            return None
        year, month, day = int(m.group(1)), int(m.group(2)), int(m.group(3))

    try:
        return date(year, month, day)
    except ValueError:
        return None


def _str_list(raw: object) -> tuple[str, ...]:
    if not isinstance(raw, list):
        return ()
    return tuple(str(v) for v in raw if v is not None)


def _parse_nutrient(data: dict) -> Nutrient:
    return Nutrient(
        name=data.get("Name") or "",
        value=float(data.get("Value") or 0.0),
        unit=data.get("Unit") or "",
        abbreviation=data.get("Abbreviation") or "",
        has_missing_nutrients=bool(data.get("HasMissingNutrients", False)),
    )


def parse_recipe(data: dict) -> Recipe:
    return Recipe(
        name=data.get("RecipeName") or "",
        allergens=_str_list(data.get("Allergens")),
        dietary_restrictions=_str_list(data.get("DietaryRestrictions")),
        religious_restrictions=_str_list(data.get("ReligiousRestrictions")),
        nutrients=tuple(_parse_nutrient(n) for n in data.get("Nutrients") or []),
        item_id=data.get("ItemId") or "",
        serving_size=data.get("ServingSize") or "",
    )


def _parse_category(data: dict) -> RecipeCategory:
    is_entree = data.get("IsEntree")
    return RecipeCategory(
        name=data.get("CategoryName") or "",
        is_entree=True if is_entree is None else bool(is_entree),
        color=data.get("Color") or "",
        recipes=[parse_recipe(r) for r in data.get("Recipes") or []],
    )


def _parse_meal(data: dict) -> MenuMeal:
    return MenuMeal(
        name=data.get("MenuMealName") or "",
        plan_name=data.get("MenuPlanName") or "",
        categories=[_parse_category(c) for c in data.get("RecipeCategories") or []],
    )


def _parse_plan(data: dict) -> MenuPlan:
    return MenuPlan(
        name=data.get("MenuPlanName") or "",
        plan_id=data.get("MenuPlanId") or "",
        days=[
            MenuDay(
                date=d.get("Date") or "",
                meals=[_parse_meal(m) for m in d.get("MenuMeals") or []],
            )
            for d in data.get("Days") or []
        ],
    )


def parse_family_menu(data: dict) -> FamilyMenu:
    """Build a FamilyMenu from the decoded FamilyMenu JSON response."""
    sessions = [
        MenuSession(
            name=s.get("ServingSession") or "",
            session_id=s.get("ServingSessionId") or "",
            plans=[_parse_plan(p) for p in s.get("MenuPlans") or []],
        )
        for s in data.get("FamilyMenuSessions") or []
    ]
    calendars = [
        AcademicCalendar(
            calendar_id=c.get("AcademicCalendarId") or "",
            days=[
                AcademicCalendarDay(date=d.get("Date") or "", note=d.get("Note") or "")
                for d in c.get("Days") or []
            ],
        )
        for c in data.get("AcademicCalendars") or []
    ]
    logger.debug(
        "Decoded menu feed: %d sessions, %d academic calendars",
        len(sessions),
        len(calendars),
    )
    return FamilyMenu(sessions=sessions, academic_calendars=calendars)


def parse_allergies(data: list) -> list[AllergyItem]:
    """Build the allergen list from the FamilyAllergy JSON response, sorted for display."""
    items = [
        AllergyItem(
            allergy_id=a.get("AllergyId") or "",
            name=a.get("Name") or "",
            sort_order=int(a.get("SortOrder") or 0),
        )
        for a in data or []
    ]
    items.sort(key=lambda a: (a.sort_order, a.name))
    return items


def parse_menu_identifier(data: dict) -> MenuIdentifier:
    return MenuIdentifier(
        district_id=data.get("DistrictId") or "",
        district_name=data.get("DistrictName") or "",
        identifier=data.get("Identifier") or "",
        buildings=[
            Building(building_id=b.get("BuildingId") or "", name=b.get("Name") or "")
            for b in data.get("Buildings") or []
        ],
        menu_notification=data.get("MenuNotification"),
    )


def allergen_names_for(
    selected_ids: set[str] | list[str],
    allergies: list[AllergyItem],
) -> list[str]:
    """Map selected allergen ids to display names, in the feed's sort order."""
    selected = set(selected_ids)
    names = [a.name for a in allergies if a.allergy_id in selected]
    unknown = selected - {a.allergy_id for a in allergies}
    if unknown:
        logger.warning("Selected allergen ids not in allergy list: %s", ", ".join(sorted(unknown)))
    return names
