import pytest

from lunch_calendar.themes import (
    CATEGORIES,
    DEFAULT_THEME_NAME,
    THEMES,
    default_theme,
    format_theme_table,
    get_theme,
    run_themes,
    select_theme,
    suggest_theme,
    visible_themes,
)


class TestCatalog:
    def test_twenty_themes(self):
        assert len(THEMES) == 20
        assert sum(t.category == "Seasonal" for t in THEMES) == 12
        assert sum(t.category == "Fun" for t in THEMES) == 7
        assert sum(t.category == "Basic" for t in THEMES) == 1

    def test_categories_known(self):
        assert {t.category for t in THEMES} <= set(CATEGORIES)

    def test_unique_names(self):
        names = [t.name.lower() for t in THEMES]
        assert len(names) == len(set(names))


class TestSuggestTheme:
    def test_february_prefers_valentines(self):
        spring = get_theme("Spring")
        assert spring.suggests(2)
        assert suggest_theme(2).name == "Valentines"

    def test_every_month_has_a_suggestion(self):
        for month in range(1, 13):
            theme = suggest_theme(month)
            assert theme.suggests(month), month

    def test_may_is_spring(self):
        assert suggest_theme(5).name == "Spring"

    def test_no_match_falls_back_to_default(self):
        fun = [t for t in THEMES if t.category != "Seasonal"]
        assert suggest_theme(2, fun).name == DEFAULT_THEME_NAME

    def test_catalog_order_is_tiebreak(self):
        valentines, spring = get_theme("Valentines"), get_theme("Spring")
        assert suggest_theme(2, [spring, valentines]).name == "Spring"

    def test_empty_catalog_uses_builtin_default(self):
        assert suggest_theme(2, []).name == "Default"
        assert default_theme([]) is default_theme()


class TestLookup:
    def test_case_insensitive(self):
        assert get_theme("valentines").name == "Valentines"

    def test_unknown(self):
        assert get_theme("Nope") is None
        assert get_theme(None) is None

    def test_default_theme(self):
        assert default_theme().name == DEFAULT_THEME_NAME

    def test_visible_themes_never_hide_default(self):
        visible = visible_themes(["Valentines", "default"])
        names = [t.name for t in visible]
        assert "Valentines" not in names
        assert DEFAULT_THEME_NAME in names

    def test_select_named(self):
        assert select_theme("Robots", 2).name == "Robots"

    def test_select_unknown_suggests(self):
        assert select_theme("Nope", 2).name == "Valentines"

    def test_select_skips_hidden(self):
        assert select_theme(None, 2, hidden_names=["Valentines"]).name == "Spring"


class TestRunThemes:
    def test_table_lists_all(self):
        table = format_theme_table()
        for theme in THEMES:
            assert theme.name in table

    def test_month_suggestion(self, capsys):
        run_themes(month=2)
        assert "February: " in capsys.readouterr().out

    def test_bad_month(self):
        with pytest.raises(ValueError):
            run_themes(month=0)
