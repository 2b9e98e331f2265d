"""Shared data models for the lunch calendar."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from enum import Enum


class LayoutMode(Enum):
    LIST = "List"
    ICONS_LEFT = "IconsLeft"
    ICONS_RIGHT = "IconsRight"


class LabelCorner(Enum):
    TOP_RIGHT = "TopRight"
    TOP_LEFT = "TopLeft"
    BOTTOM_RIGHT = "BottomRight"
    BOTTOM_LEFT = "BottomLeft"


# Feed tree (LINQ Connect FamilyMenu shape)


@dataclass(frozen=True)
class Nutrient:
    name: str
    value: float = 0.0
    unit: str = ""
    abbreviation: str = ""
    has_missing_nutrients: bool = False


@dataclass(frozen=True)
class Recipe:
    name: str
    allergens: tuple[str, ...] = ()
    # Passed through from the feed, not used for classification
    dietary_restrictions: tuple[str, ...] = ()
    religious_restrictions: tuple[str, ...] = ()
    nutrients: tuple[Nutrient, ...] = ()
    item_id: str = ""
    serving_size: str = ""


@dataclass
class RecipeCategory:
    name: str = ""
    is_entree: bool = True
    color: str = ""
    recipes: list[Recipe] = field(default_factory=list)


@dataclass
class MenuMeal:
    name: str = ""
    plan_name: str = ""
    categories: list[RecipeCategory] = field(default_factory=list)


@dataclass
class MenuDay:
    date: str  # raw feed string, e.g. "2/2/2026"
    meals: list[MenuMeal] = field(default_factory=list)


@dataclass
class MenuPlan:
    name: str
    plan_id: str = ""
    days: list[MenuDay] = field(default_factory=list)


@dataclass
class MenuSession:
    name: str
    session_id: str = ""
    plans: list[MenuPlan] = field(default_factory=list)


@dataclass
class AcademicCalendarDay:
    date: str
    note: str = ""


@dataclass
class AcademicCalendar:
    calendar_id: str = ""
    days: list[AcademicCalendarDay] = field(default_factory=list)


@dataclass
class FamilyMenu:
    sessions: list[MenuSession] = field(default_factory=list)
    academic_calendars: list[AcademicCalendar] = field(default_factory=list)

    def session(self, name: str) -> MenuSession | None:
        for s in self.sessions:
            if s.name == name:
                return s
        return None

    def session_names(self) -> list[str]:
        return [s.name for s in self.sessions]


@dataclass(frozen=True)
class AllergyItem:
    allergy_id: str
    name: str
    sort_order: int = 0


@dataclass(frozen=True)
class Building:
    building_id: str
    name: str


@dataclass
class MenuIdentifier:
    district_id: str = ""
    district_name: str = ""
    identifier: str = ""
    buildings: list[Building] = field(default_factory=list)
    menu_notification: str | None = None

    def building(self, building_id: str | None) -> Building | None:
        for b in self.buildings:
            if b.building_id == building_id:
                return b
        return None


# Classified output


@dataclass(frozen=True)
class RecipeItem:
    name: str
    contains_allergen: bool = False
    # Only ever set when contains_allergen is False
    is_not_preferred: bool = False
    is_favorite: bool = False

    @property
    def is_safe(self) -> bool:
        return not self.contains_allergen and not self.is_not_preferred


@dataclass(frozen=True)
class ProcessedLine:
    plan_name: str
    is_safe: bool
    entrees: tuple[RecipeItem, ...] = ()

    @property
    def has_allergen_free_entree(self) -> bool:
        return any(not e.contains_allergen for e in self.entrees)


@dataclass(frozen=True)
class ProcessedDay:
    date: date
    lines: tuple[ProcessedLine, ...] = ()
    academic_note: str | None = None

    @property
    def is_no_school(self) -> bool:
        return self.academic_note is not None and "no school" in self.academic_note.lower()

    @property
    def has_special_note(self) -> bool:
        return self.academic_note is not None and not self.is_no_school

    @property
    def any_line_safe(self) -> bool:
        return any(line.is_safe for line in self.lines)

    @property
    def has_menu(self) -> bool:
        return any(line.entrees for line in self.lines)

    def line(self, plan_name: str) -> ProcessedLine | None:
        for line in self.lines:
            if line.plan_name == plan_name:
                return line
        return None


@dataclass(frozen=True)
class ProcessedMonth:
    year: int
    month: int
    days: tuple[ProcessedDay, ...] = ()
    building_name: str | None = None
    session_name: str | None = None

    @property
    def display_name(self) -> str:
        return date(self.year, self.month, 1).strftime("%B %Y")

    def plan_names(self) -> list[str]:
        """Distinct plan names across all days, alphabetically."""
        return sorted({line.plan_name for day in self.days for line in day.lines})


# Rendering configuration


@dataclass(frozen=True)
class DayLabel:
    label: str
    color: str = "#6c757d"


@dataclass(frozen=True)
class HolidayOverride:
    emoji: str = ""
    custom_message: str | None = None


@dataclass
class CalendarRenderOptions:
    layout_mode: LayoutMode = LayoutMode.LIST
    plan_label_overrides: dict[str, str] = field(default_factory=dict)
    plan_icon_overrides: dict[str, str] = field(default_factory=dict)
    plan_display_order: list[str] = field(default_factory=list)
    show_unsafe_lines: bool = False
    unsafe_line_message: str = "No safe options"
    holiday_overrides: dict[str, HolidayOverride] = field(default_factory=dict)
    cross_out_past_days: bool = False
    today: date | None = None
    day_label_cycle: list[DayLabel] = field(default_factory=list)
    day_label_start_date: date | None = None
    day_label_corner: LabelCorner = LabelCorner.TOP_RIGHT
    show_share_footer: bool = False
    source_url: str | None = None

    @property
    def is_grid(self) -> bool:
        return self.layout_mode in (LayoutMode.ICONS_LEFT, LayoutMode.ICONS_RIGHT)
