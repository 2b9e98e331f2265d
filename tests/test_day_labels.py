from datetime import date, timedelta

from lunch_calendar.day_labels import (
    DEFAULT_LABEL_COLOR,
    DayLabelEntry,
    HtmlCalendarDayLabelSource,
    StaticDayLabelSource,
    assign_day_labels,
    compact_label,
    cycle_from_entries,
    is_day_label,
    load_cycle,
    parse_calendar_day_labels,
)
from lunch_calendar.models import DayLabel

RED = DayLabel("Red", "#dc3545")
WHITE = DayLabel("White", "#adb5bd")


def weekdays(start: date, count: int) -> list[date]:
    days = []
    d = start
    while len(days) < count:
        if d.weekday() < 5:
            days.append(d)
        d += timedelta(days=1)
    return days


def calendar_html(*events: tuple[int, int, int, str]) -> str:
    """Finalsite-style markup; months are 0-indexed like the real pages."""
    blocks = []
    for year, month0, day, title in events:
        blocks.append(
            f'<div class="fsCalendarDate" data-day="{day}" data-year="{year}" data-month="{month0}">'
            f'<a class="fsCalendarEventTitle fsCalendarEventLink" title="{title}" href="#">{title}</a>'
            "</div>"
        )
    return "<html><body>" + "\n".join(blocks) + "</body></html>"


class TestAssignDayLabels:
    def test_alternates_over_ten_school_days(self):
        days = weekdays(date(2026, 2, 2), 10)
        labels = assign_day_labels(days, [RED, WHITE])
        assert [labels[d].label for d in days] == ["Red", "White"] * 5

    def test_non_school_days_consume_no_position(self):
        days = weekdays(date(2026, 2, 9), 6)
        holiday = date(2026, 2, 11)
        labels = assign_day_labels(days, [RED, WHITE], is_school_day=lambda d: d != holiday)
        assert holiday not in labels
        school = [d for d in days if d != holiday]
        assert [labels[d].label for d in school] == ["Red", "White", "Red", "White", "Red"]

    def test_start_date(self):
        days = weekdays(date(2026, 2, 2), 5)
        labels = assign_day_labels(days, [RED, WHITE], start_date=date(2026, 2, 4))
        assert date(2026, 2, 2) not in labels
        assert date(2026, 2, 3) not in labels
        assert labels[date(2026, 2, 4)] == RED
        assert labels[date(2026, 2, 5)] == WHITE

    def test_empty_cycle(self):
        assert assign_day_labels(weekdays(date(2026, 2, 2), 5), []) == {}

    def test_unsorted_input(self):
        days = weekdays(date(2026, 2, 2), 4)
        labels = assign_day_labels(list(reversed(days)), [RED, WHITE])
        assert labels[days[0]] == RED
        assert labels[days[3]] == WHITE

    def test_single_label_cycle(self):
        days = weekdays(date(2026, 2, 2), 5)
        labels = assign_day_labels(days, [RED])
        assert [labels[d].label for d in days] == ["Red"] * 5

    def test_three_label_cycle(self):
        blue = DayLabel("Blue", "#0d6efd")
        days = weekdays(date(2026, 2, 2), 4)
        labels = assign_day_labels(days, [RED, WHITE, blue])
        assert [labels[d].label for d in days] == ["Red", "White", "Blue", "Red"]


class TestLabelGrammar:
    def test_accepts(self):
        for title in ("Red Day", "White Day", "A Day", "Day A", "Day B", "gold day"):
            assert is_day_label(title), title

    def test_rejects(self):
        for title in ("Staff Development Day", "Early Release", "Red", "Day"):
            assert not is_day_label(title), title

    def test_compact_label(self):
        assert compact_label("Red Day") == "Red"
        assert compact_label("A Day") == "A"
        assert compact_label("Day A") == "Day A"


class TestParseCalendarPage:
    def test_zero_indexed_months(self):
        html = calendar_html((2026, 1, 2, "Red Day"), (2026, 1, 3, "White Day"))
        entries = parse_calendar_day_labels(html)
        assert entries == [
            DayLabelEntry(date(2026, 2, 2), "Red Day"),
            DayLabelEntry(date(2026, 2, 3), "White Day"),
        ]

    def test_ignores_other_events_and_bad_dates(self):
        html = calendar_html(
            (2026, 1, 4, "Staff Development Day"),
            (2026, 1, 30, "Red Day"),  # February 30th
            (2026, 1, 5, "Red Day"),
        )
        entries = parse_calendar_day_labels(html)
        assert entries == [DayLabelEntry(date(2026, 2, 5), "Red Day")]

    def test_sorted_by_date(self):
        html = calendar_html((2026, 1, 10, "White Day"), (2026, 1, 9, "Red Day"))
        assert [e.date.day for e in parse_calendar_day_labels(html)] == [9, 10]

    def test_attribute_order_does_not_matter(self):
        html = (
            '<div data-year="2026" data-month="1" data-day="2" class="fsCalendarDate">'
            '<a href="#" title="Red Day" class="fsCalendarEventTitle">Red Day</a></div>'
        )
        assert parse_calendar_day_labels(html) == [DayLabelEntry(date(2026, 2, 2), "Red Day")]

    def test_entity_encoded_title(self):
        html = calendar_html((2026, 1, 2, "Red&#32;Day"), (2026, 1, 3, "White&nbsp;Day"))
        entries = parse_calendar_day_labels(html)
        assert [e.label for e in entries] == ["Red Day", "White Day"]

    def test_events_in_sibling_info_box(self):
        html = (
            '<div class="fsCalendarDaybox">'
            '<div class="fsCalendarDate" data-day="2" data-year="2026" data-month="1">Mon 2</div>'
            '<div class="fsCalendarInfo"><a class="fsCalendarEventTitle" title="Red Day">Red Day</a></div>'
            "</div>"
            '<div class="fsCalendarDaybox">'
            '<div class="fsCalendarDate" data-day="3" data-year="2026" data-month="1">Tue 3</div>'
            '<div class="fsCalendarInfo"><a class="fsCalendarEventTitle" title="White Day">White Day</a></div>'
            "</div>"
        )
        assert parse_calendar_day_labels(html) == [
            DayLabelEntry(date(2026, 2, 2), "Red Day"),
            DayLabelEntry(date(2026, 2, 3), "White Day"),
        ]

    def test_missing_date_attribute(self):
        html = (
            '<div class="fsCalendarDate" data-year="2026" data-month="1">'
            '<a class="fsCalendarEventTitle" title="Red Day">Red Day</a></div>'
        )
        assert parse_calendar_day_labels(html) == []

    def test_title_falls_back_to_link_text(self):
        html = (
            '<div class="fsCalendarDate" data-day="2" data-year="2026" data-month="1">'
            '<a class="fsCalendarEventTitle"> Red Day </a></div>'
        )
        assert parse_calendar_day_labels(html) == [DayLabelEntry(date(2026, 2, 2), "Red Day")]

    def test_no_markup(self):
        assert parse_calendar_day_labels("<html></html>") == []


class TestCycleFromEntries:
    def test_distinct_in_first_seen_order(self):
        entries = [
            DayLabelEntry(date(2026, 2, 3), "White Day"),
            DayLabelEntry(date(2026, 2, 2), "Red Day"),
            DayLabelEntry(date(2026, 2, 4), "red day"),
        ]
        cycle, start = cycle_from_entries(entries)
        assert [d.label for d in cycle] == ["Red", "White"]
        assert cycle[0].color == "#dc3545"
        assert start == date(2026, 2, 2)

    def test_unknown_label_gets_default_color(self):
        cycle, _ = cycle_from_entries([DayLabelEntry(date(2026, 2, 2), "A Day")])
        assert cycle == [DayLabel("A", DEFAULT_LABEL_COLOR)]

    def test_empty(self):
        assert cycle_from_entries([]) == ([], None)


class TestSources:
    def test_static_and_html_sources_agree(self):
        html = calendar_html((2026, 1, 2, "Red Day"), (2026, 1, 3, "White Day"))
        from_html = load_cycle(HtmlCalendarDayLabelSource(html))
        static = load_cycle(StaticDayLabelSource([
            DayLabelEntry(date(2026, 2, 3), "White Day"),
            DayLabelEntry(date(2026, 2, 2), "Red Day"),
        ]))
        assert from_html == static
