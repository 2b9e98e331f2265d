"""Calendar theme catalog and month-based theme suggestion."""

from __future__ import annotations

import calendar
import logging
from collections.abc import Iterable, Sequence
from dataclasses import dataclass

logger = logging.getLogger(__name__)

CATEGORIES = ("Seasonal", "Fun", "Basic")


@dataclass(frozen=True)
class CalendarTheme:
    name: str
    emoji: str
    category: str
    header_bg: str
    header_fg: str
    title_color: str
    safe_color: str
    favorite_star: str
    favorite_border: str
    favorite_bg: str
    home_badge_bg: str
    accent_border: str
    body_bg: str
    cell_pattern: str | None = None
    suggested_month: int | None = None
    suggested_month2: int | None = None

    def suggests(self, month: int) -> bool:
        return month in (self.suggested_month, self.suggested_month2)


# Ranked: suggestion picks the first match, so specific holidays come before
# broad seasons that share a month.
THEMES: tuple[CalendarTheme, ...] = (
    # Seasonal
    CalendarTheme(
        name="New Year", emoji="🎆", category="Seasonal",
        header_bg="#212121", header_fg="#ffd700", title_color="#212121",
        safe_color="#1b5e20", favorite_star="#ffd700", favorite_border="#ffd700",
        favorite_bg="#fffde7", home_badge_bg="#c62828", accent_border="#bdbdbd",
        body_bg="#fafafa",
        cell_pattern="radial-gradient(circle, #fffde7 1px, transparent 1px)",
        suggested_month=1,
    ),
    CalendarTheme(
        name="Valentines", emoji="💕", category="Seasonal",
        header_bg="#c2185b", header_fg="#ffffff", title_color="#ad1457",
        safe_color="#880e4f", favorite_star="#e91e63", favorite_border="#f06292",
        favorite_bg="#fce4ec", home_badge_bg="#d32f2f", accent_border="#f8bbd0",
        body_bg="#fff0f3",
        cell_pattern="radial-gradient(circle, #fce4ec 1px, transparent 1px)",
        suggested_month=2,
    ),
    CalendarTheme(
        name="St. Patrick's", emoji="☘️", category="Seasonal",
        header_bg="#2e7d32", header_fg="#ffffff", title_color="#1b5e20",
        safe_color="#1b5e20", favorite_star="#ffd700", favorite_border="#66bb6a",
        favorite_bg="#e8f5e9", home_badge_bg="#c62828", accent_border="#a5d6a7",
        body_bg="#f1f8e9",
        cell_pattern="radial-gradient(circle, #e8f5e9 1px, transparent 1px)",
        suggested_month=3,
    ),
    CalendarTheme(
        name="Easter", emoji="🐣", category="Seasonal",
        header_bg="#ec407a", header_fg="#ffffff", title_color="#ad1457",
        safe_color="#1b5e20", favorite_star="#ff8f00", favorite_border="#f48fb1",
        favorite_bg="#fce4ec", home_badge_bg="#7b1fa2", accent_border="#f8bbd0",
        body_bg="#fff8e1",
        cell_pattern="radial-gradient(circle, #e1f5fe 1px, transparent 1px)",
        suggested_month=4,
    ),
    CalendarTheme(
        name="Spring", emoji="🌸", category="Seasonal",
        header_bg="#2e7d32", header_fg="#ffffff", title_color="#1b5e20",
        safe_color="#1b5e20", favorite_star="#ff6d00", favorite_border="#81c784",
        favorite_bg="#e8f5e9", home_badge_bg="#c62828", accent_border="#c8e6c9",
        body_bg="#f1f8e9",
        suggested_month=5, suggested_month2=2,
    ),
    CalendarTheme(
        name="Summer", emoji="☀️", category="Seasonal",
        header_bg="#0277bd", header_fg="#ffffff", title_color="#01579b",
        safe_color="#1b5e20", favorite_star="#ff8f00", favorite_border="#4fc3f7",
        favorite_bg="#e1f5fe", home_badge_bg="#d84315", accent_border="#b3e5fc",
        body_bg="#fffde7",
        cell_pattern="radial-gradient(circle, #fff9c4 1px, transparent 1px)",
        suggested_month=6,
    ),
    CalendarTheme(
        name="Fourth of July", emoji="🎆", category="Seasonal",
        header_bg="#1565c0", header_fg="#ffffff", title_color="#b71c1c",
        safe_color="#1b5e20", favorite_star="#ff8f00", favorite_border="#ef5350",
        favorite_bg="#ffebee", home_badge_bg="#b71c1c", accent_border="#bbdefb",
        body_bg="#f5f5f5",
        cell_pattern="radial-gradient(circle, #e3f2fd 1px, transparent 1px)",
        suggested_month=7,
    ),
    CalendarTheme(
        name="Back to School", emoji="🎒", category="Seasonal",
        header_bg="#1a237e", header_fg="#ffeb3b", title_color="#1a237e",
        safe_color="#1b5e20", favorite_star="#ff8f00", favorite_border="#5c6bc0",
        favorite_bg="#e8eaf6", home_badge_bg="#c62828", accent_border="#9fa8da",
        body_bg="#fffde7",
        suggested_month=8,
    ),
    CalendarTheme(
        name="Fall", emoji="🍂", category="Seasonal",
        header_bg="#4e342e", header_fg="#ffcc80", title_color="#3e2723",
        safe_color="#1b5e20", favorite_star="#ff8f00", favorite_border="#a1887f",
        favorite_bg="#efebe9", home_badge_bg="#bf360c", accent_border="#bcaaa4",
        body_bg="#fff3e0",
        cell_pattern="radial-gradient(circle, #efebe9 1px, transparent 1px)",
        suggested_month=9,
    ),
    CalendarTheme(
        name="Spooky", emoji="🎃", category="Seasonal",
        header_bg="#212121", header_fg="#ff6d00", title_color="#e65100",
        safe_color="#1b5e20", favorite_star="#ff6d00", favorite_border="#ff9800",
        favorite_bg="#fff3e0", home_badge_bg="#6a1b9a", accent_border="#424242",
        body_bg="#1a1a2e",
        cell_pattern="radial-gradient(circle, #2d2d44 1px, transparent 1px)",
        suggested_month=10,
    ),
    CalendarTheme(
        name="Thanksgiving", emoji="🦃", category="Seasonal",
        header_bg="#4e342e", header_fg="#ffe0b2", title_color="#3e2723",
        safe_color="#1b5e20", favorite_star="#ff8f00", favorite_border="#a1887f",
        favorite_bg="#efebe9", home_badge_bg="#bf360c", accent_border="#d7ccc8",
        body_bg="#fff8e1",
        cell_pattern="radial-gradient(circle, #fff3e0 1px, transparent 1px)",
        suggested_month=11,
    ),
    CalendarTheme(
        name="Winter", emoji="❄️", category="Seasonal",
        header_bg="#1565c0", header_fg="#e3f2fd", title_color="#0d47a1",
        safe_color="#1a237e", favorite_star="#ffd600", favorite_border="#90caf9",
        favorite_bg="#e3f2fd", home_badge_bg="#c62828", accent_border="#bbdefb",
        body_bg="#f5f9ff",
        cell_pattern="radial-gradient(circle, #e3f2fd 2px, transparent 2px)",
        suggested_month=12,
    ),
    # Fun
    CalendarTheme(
        name="Cardinal", emoji="🐦", category="Fun",
        header_bg="#b71c1c", header_fg="#ffffff", title_color="#b71c1c",
        safe_color="#1b5e20", favorite_star="#ff8f00", favorite_border="#ef5350",
        favorite_bg="#ffebee", home_badge_bg="#c62828", accent_border="#ef9a9a",
        body_bg="#fff8f0",
        cell_pattern="radial-gradient(circle, #ffebee 1px, transparent 1px)",
    ),
    CalendarTheme(
        name="Blue Jay", emoji="🐦‍⬛", category="Fun",
        header_bg="#1565c0", header_fg="#ffffff", title_color="#0d47a1",
        safe_color="#1b5e20", favorite_star="#ff8f00", favorite_border="#42a5f5",
        favorite_bg="#e3f2fd", home_badge_bg="#c62828", accent_border="#90caf9",
        body_bg="#f0f9ff",
        cell_pattern="radial-gradient(circle, #e3f2fd 1px, transparent 1px)",
    ),
    CalendarTheme(
        name="Cats", emoji="🐱", category="Fun",
        header_bg="#e65100", header_fg="#ffffff", title_color="#bf360c",
        safe_color="#33691e", favorite_star="#ff8f00", favorite_border="#ffb74d",
        favorite_bg="#fff3e0", home_badge_bg="#c62828", accent_border="#ffcc80",
        body_bg="#fff8f0",
    ),
    CalendarTheme(
        name="Dinosaurs", emoji="🦕", category="Fun",
        header_bg="#33691e", header_fg="#ffffff", title_color="#33691e",
        safe_color="#1b5e20", favorite_star="#ff6d00", favorite_border="#8bc34a",
        favorite_bg="#f1f8e9", home_badge_bg="#bf360c", accent_border="#a5d6a7",
        body_bg="#f9fbe7",
    ),
    CalendarTheme(
        name="Princess", emoji="👑", category="Fun",
        header_bg="#7b1fa2", header_fg="#ffffff", title_color="#6a1b9a",
        safe_color="#4a148c", favorite_star="#ff6ff2", favorite_border="#ce93d8",
        favorite_bg="#f3e5f5", home_badge_bg="#ab47bc", accent_border="#e1bee7",
        body_bg="#fdf2ff",
        cell_pattern="radial-gradient(circle, #f3e5f5 1px, transparent 1px)",
    ),
    CalendarTheme(
        name="Robots", emoji="🤖", category="Fun",
        header_bg="#455a64", header_fg="#00e5ff", title_color="#37474f",
        safe_color="#004d40", favorite_star="#ff6d00", favorite_border="#00bcd4",
        favorite_bg="#e0f7fa", home_badge_bg="#bf360c", accent_border="#90a4ae",
        body_bg="#eceff1",
        cell_pattern=(
            "linear-gradient(90deg, #eceff1 1px, transparent 1px), "
            "linear-gradient(#eceff1 1px, transparent 1px)"
        ),
    ),
    CalendarTheme(
        name="Unicorn", emoji="🦄", category="Fun",
        header_bg="#7b1fa2", header_fg="#ffffff", title_color="#6a1b9a",
        safe_color="#1b5e20", favorite_star="#ff6ff2", favorite_border="#ce93d8",
        favorite_bg="#f3e5f5", home_badge_bg="#e91e63", accent_border="#e1bee7",
        body_bg="#fce4ec",
        cell_pattern=(
            "linear-gradient(135deg, #f3e5f5 0%, #e1f5fe 25%, #fff9c4 50%, "
            "#fce4ec 75%, #e8f5e9 100%)"
        ),
    ),
    # Basic
    CalendarTheme(
        name="Default", emoji="📅", category="Basic",
        header_bg="#343a40", header_fg="#ffffff", title_color="#212529",
        safe_color="#155724", favorite_star="#ff8c00", favorite_border="#ff8c00",
        favorite_bg="#fff8f0", home_badge_bg="#dc3545", accent_border="#dee2e6",
        body_bg="#ffffff",
    ),
)

DEFAULT_THEME_NAME = "Default"


def get_theme(name: str | None, catalog: Sequence[CalendarTheme] = THEMES) -> CalendarTheme | None:
    """Find a theme by name (case-insensitive)."""
    if not name:
        return None
    wanted = name.strip().lower()
    for theme in catalog:
        if theme.name.lower() == wanted:
            return theme
    return None


def default_theme(catalog: Sequence[CalendarTheme] = THEMES) -> CalendarTheme:
    """The catalog's Default theme, else its last entry.

    An empty catalog gives the built-in Default.
    """
    theme = get_theme(DEFAULT_THEME_NAME, catalog)
    if theme is not None:
        return theme
    if not catalog:
        return default_theme(THEMES)
    return catalog[-1]


def suggest_theme(month: int, catalog: Sequence[CalendarTheme] = THEMES) -> CalendarTheme:
    """Pick the first theme in catalog order suggesting this month, else the Default theme."""
    for theme in catalog:
        if theme.suggests(month):
            return theme
    return default_theme(catalog)


def visible_themes(
    hidden_names: Iterable[str] = (),
    catalog: Sequence[CalendarTheme] = THEMES,
) -> list[CalendarTheme]:
    """Catalog minus hidden themes, order preserved. The Default theme is never hidden."""
    hidden = {n.strip().lower() for n in hidden_names}
    return [
        t for t in catalog
        if t.name.lower() not in hidden or t.name == DEFAULT_THEME_NAME
    ]


def select_theme(
    name: str | None,
    month: int,
    hidden_names: Iterable[str] = (),
    catalog: Sequence[CalendarTheme] = THEMES,
) -> CalendarTheme:
    """The named theme if it exists, else the suggestion for month among visible themes."""
    if name:
        theme = get_theme(name, catalog)
        if theme is not None:
            return theme
        logger.warning("Unknown theme '%s'; suggesting one for month %d", name, month)
    return suggest_theme(month, visible_themes(hidden_names, catalog))


def format_theme_table(catalog: Sequence[CalendarTheme] = THEMES) -> str:
    lines = []
    header = f"{'Category':<10} {'Months':<12} {'Theme'}"
    lines.append(header)
    lines.append("-" * len(header))

    for category in CATEGORIES:
        for theme in catalog:
            if theme.category != category:
                continue
            months = ", ".join(
                calendar.month_abbr[m]
                for m in (theme.suggested_month, theme.suggested_month2)
                if m
            )
            lines.append(f"{theme.category:<10} {months or '-':<12} {theme.emoji} {theme.name}")

    return "\n".join(lines)


def run_themes(month: int | None = None, hidden_names: Iterable[str] = ()) -> None:
    """CLI entry point for themes command."""
    if month is not None:
        if not 1 <= month <= 12:
            raise ValueError(f"Month must be 1-12, got {month}")
        theme = suggest_theme(month, visible_themes(hidden_names))
        print(f"{calendar.month_name[month]}: {theme.emoji} {theme.name}")
        return
    print(format_theme_table(visible_themes(hidden_names)))
