import json
from datetime import date

import pytest

from lunch_calendar.cli import build_parser, main


@pytest.fixture
def sources(tmp_path, feed_json, allergies_json, identifier_json):
    paths = {}
    for name, data in (("menu", feed_json), ("allergies", allergies_json), ("identifier", identifier_json)):
        path = tmp_path / f"{name}.json"
        path.write_text(json.dumps(data), encoding="utf-8")
        paths[name] = str(path)
    return paths


@pytest.fixture
def settings(tmp_path):
    path = tmp_path / "settings.yaml"
    path.write_text("building_id: bldg-1\nselected_allergen_ids: [milk-id]\n", encoding="utf-8")
    return str(path)


class TestParser:
    def test_render_args(self):
        args = build_parser().parse_args([
            "render", "--menu", "m.json", "--year", "2026", "--month", "2", "--today", "2026-02-10",
        ])
        assert args.command == "render"
        assert args.today == date(2026, 2, 10)
        assert args.share_footer is None

    def test_bad_today(self):
        with pytest.raises(SystemExit):
            build_parser().parse_args(["render", "--today", "02/10/2026"])

    def test_command_required(self):
        with pytest.raises(SystemExit):
            build_parser().parse_args([])


class TestMain:
    def test_render(self, sources, settings, tmp_path):
        out = tmp_path / "out.html"
        main([
            "--settings", settings, "render",
            "--menu", sources["menu"], "--allergies", sources["allergies"],
            "--identifier", sources["identifier"],
            "--year", "2026", "--month", "2", "--today", "2026-02-01",
            "--layout", "List", "--output", str(out),
        ])
        html = out.read_text(encoding="utf-8")
        assert "Central Middle School" in html
        assert "Dairy-Free" in html

    def test_analyze(self, sources, settings, capsys):
        main(["--settings", settings, "analyze", "--menu", sources["menu"], "--year", "2026", "--month", "2"])
        data = json.loads(capsys.readouterr().out)
        assert data["building"] is None
        assert len(data["days"]) == 5

    def test_missing_source_exits(self, settings):
        with pytest.raises(SystemExit) as exc:
            main(["--settings", settings, "analyze", "--year", "2026", "--month", "2"])
        assert exc.value.code == 1

    def test_missing_file_exits(self, settings, tmp_path):
        with pytest.raises(SystemExit) as exc:
            main(["--settings", settings, "render", "--har", str(tmp_path / "nope.har")])
        assert exc.value.code == 1

    def test_themes(self, settings, capsys):
        main(["--settings", settings, "themes", "--month", "2"])
        assert "Valentines" in capsys.readouterr().out

    def test_day_labels(self, settings, tmp_path, capsys):
        page = tmp_path / "calendar.html"
        page.write_text(
            '<div class="fsCalendarDate" data-day="2" data-year="2026" data-month="1">'
            '<a class="fsCalendarEventTitle" title="Red Day">Red Day</a></div>'
            '<div class="fsCalendarDate" data-day="3" data-year="2026" data-month="1">'
            '<a class="fsCalendarEventTitle" title="White Day">White Day</a></div>',
            encoding="utf-8",
        )
        main(["--settings", settings, "day-labels", str(page)])
        out = capsys.readouterr().out
        assert "2026-02-02  Red Day" in out
        assert "Cycle: Red (#dc3545) -> White (#adb5bd)" in out
