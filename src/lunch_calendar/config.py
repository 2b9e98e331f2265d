"""Settings loading with defaults, legacy migration, and render-option building."""

from __future__ import annotations

import copy
import logging
from datetime import date
from pathlib import Path

import yaml

from lunch_calendar.feed import parse_feed_date
from lunch_calendar.models import (
    CalendarRenderOptions,
    DayLabel,
    HolidayOverride,
    LabelCorner,
    LayoutMode,
)

logger = logging.getLogger(__name__)

DEFAULT_SETTINGS_FILE = Path.home() / ".config" / "lunch-calendar" / "settings.yaml"

PUBLIC_MENU_URL = "https://linqconnect.com/public/menu/{identifier}?buildingId={building_id}"

DEFAULTS = {
    "selected_allergen_ids": [],
    "forced_home_days_by_session": {},
    "not_preferred_by_session": {},
    "favorites_by_session": {},
    "identifier": None,
    "district_id": None,
    "building_id": None,
    "selected_session_name": "Lunch",
    "selected_theme_name": None,
    "hidden_theme_names": [],
    "layout_mode": "IconsLeft",
    "plan_label_overrides": {},
    "plan_icon_overrides": {},
    "plan_display_order": [],
    "show_unsafe_lines": True,
    "unsafe_line_message": "No safe options",
    "holiday_overrides": {},
    "cross_out_past_days": True,
    "day_label_cycle": [
        {"label": "Red", "color": "#dc3545"},
        {"label": "White", "color": "#adb5bd"},
    ],
    "day_label_start_date": None,
    "day_label_corner": "TopRight",
    "show_share_footer": False,
}


def deep_merge(base: dict, override: dict) -> dict:
    """Recursively merge override into base, returning a new dict."""
    result = base.copy()
    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = deep_merge(result[key], value)
        else:
            result[key] = value
    return result


def migrate_settings(settings: dict) -> dict:
    """Translate legacy keys in place, once, at load time.

    show_meal_buttons (bool) predates layout_mode: when layout_mode is
    missing, empty or "List" and the old flag is on, the layout becomes
    "IconsRight".
    """
    if "show_meal_buttons" in settings:
        legacy = bool(settings.pop("show_meal_buttons"))
        if legacy and settings.get("layout_mode") in (None, "", LayoutMode.LIST.value):
            logger.info("Migrating show_meal_buttons=true to layout_mode=IconsRight")
            settings["layout_mode"] = LayoutMode.ICONS_RIGHT.value
    return settings


def load_config(settings_path: Path | None = None) -> dict:
    """Load settings from a YAML file, falling back to defaults."""
    path = settings_path or DEFAULT_SETTINGS_FILE

    if path.exists():
        with open(path) as f:
            user_settings = yaml.safe_load(f) or {}
        if not isinstance(user_settings, dict):
            raise ValueError(f"Settings file {path} must contain a mapping")
        # Migration looks at the user's own keys, before defaults fill layout_mode
        user_settings = migrate_settings(user_settings)
        logger.info("Settings loaded from %s", path)
        return deep_merge(DEFAULTS, user_settings)

    logger.info("No settings file found at %s, using defaults", path)
    return copy.deepcopy(DEFAULTS)


def save_config(settings: dict, settings_path: Path | None = None) -> Path:
    path = settings_path or DEFAULT_SETTINGS_FILE
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w") as f:
        yaml.safe_dump(settings, f, sort_keys=False, allow_unicode=True)
    logger.info("Settings saved to %s", path)
    return path


def apply_cli_overrides(config: dict, **overrides: object) -> dict:
    """Apply CLI argument overrides to config.

    Supports flat keys:
      session -> selected_session_name
      theme -> selected_theme_name
      layout -> layout_mode
      allergens -> selected_allergen_ids (comma-separated)
      share_footer -> show_share_footer
    """
    if overrides.get("session") is not None:
        config["selected_session_name"] = overrides["session"]
    if overrides.get("theme") is not None:
        config["selected_theme_name"] = overrides["theme"]
    if overrides.get("layout") is not None:
        config["layout_mode"] = overrides["layout"]
    if overrides.get("allergens") is not None:
        ids_str = str(overrides["allergens"])
        config["selected_allergen_ids"] = [a.strip() for a in ids_str.split(",") if a.strip()]
    if overrides.get("share_footer") is not None:
        config["show_share_footer"] = bool(overrides["share_footer"])

    return config


def _enum_value(enum_cls, raw: object, default):
    try:
        return enum_cls(raw)
    except ValueError:
        valid = ", ".join(m.value for m in enum_cls)
        logger.warning("Unknown %s '%s' (valid: %s); using %s", enum_cls.__name__, raw, valid, default.value)
        return default


def _parse_setting_date(raw: object) -> date | None:
    if raw is None or raw == "":
        return None
    if isinstance(raw, date):
        return raw
    parsed = parse_feed_date(str(raw))
    if parsed is None:
        logger.warning("Ignoring unparseable date setting '%s'", raw)
    return parsed


def parse_day_label_cycle(raw: list | None) -> list[DayLabel]:
    cycle = []
    for entry in raw or []:
        if isinstance(entry, str):
            cycle.append(DayLabel(label=entry))
        elif isinstance(entry, dict) and entry.get("label"):
            cycle.append(DayLabel(label=str(entry["label"]), color=entry.get("color") or "#6c757d"))
        else:
            logger.warning("Ignoring malformed day label entry: %r", entry)
    return cycle


def parse_holiday_overrides(raw: dict | None) -> dict[str, HolidayOverride]:
    overrides = {}
    for keyword, value in (raw or {}).items():
        if isinstance(value, str):
            overrides[keyword] = HolidayOverride(emoji=value)
        elif isinstance(value, dict):
            overrides[keyword] = HolidayOverride(
                emoji=value.get("emoji") or "",
                custom_message=value.get("custom_message"),
            )
    return overrides


def source_url_for(identifier: str | None, building_id: str | None) -> str | None:
    """Public LINQ Connect menu page for a district identifier and building."""
    if not identifier or not identifier.strip() or not building_id:
        return None
    return PUBLIC_MENU_URL.format(identifier=identifier.strip(), building_id=building_id)


def session_preferences(config: dict, session_name: str) -> tuple[set[str], set[str], set[str]]:
    """(not-preferred names, favorite names, forced-home weekday names) for one session."""
    not_preferred = set(config.get("not_preferred_by_session", {}).get(session_name) or [])
    favorites = set(config.get("favorites_by_session", {}).get(session_name) or [])
    forced_home = set(config.get("forced_home_days_by_session", {}).get(session_name) or [])
    return not_preferred, favorites, forced_home


def build_render_options(
    config: dict,
    today: date | None = None,
    source_url: str | None = None,
) -> CalendarRenderOptions:
    """Translate loaded settings into CalendarRenderOptions."""
    return CalendarRenderOptions(
        layout_mode=_enum_value(LayoutMode, config.get("layout_mode"), LayoutMode.LIST),
        plan_label_overrides=dict(config.get("plan_label_overrides") or {}),
        plan_icon_overrides=dict(config.get("plan_icon_overrides") or {}),
        plan_display_order=list(config.get("plan_display_order") or []),
        show_unsafe_lines=bool(config.get("show_unsafe_lines")),
        unsafe_line_message=config.get("unsafe_line_message") or "No safe options",
        holiday_overrides=parse_holiday_overrides(config.get("holiday_overrides")),
        cross_out_past_days=bool(config.get("cross_out_past_days")),
        today=today,
        day_label_cycle=parse_day_label_cycle(config.get("day_label_cycle")),
        day_label_start_date=_parse_setting_date(config.get("day_label_start_date")),
        day_label_corner=_enum_value(
            LabelCorner, config.get("day_label_corner"), LabelCorner.TOP_RIGHT
        ),
        show_share_footer=bool(config.get("show_share_footer")),
        source_url=source_url,
    )
