from datetime import datetime

import pytest

from application.dates import format_due_date, format_duration, format_elapsed, parse_duration, parse_natural_date

# Wednesday
NOW = datetime(2024, 3, 13, 10, 0, 0)


@pytest.mark.parametrize(
    "text, expected",
    [
        ("today", datetime(2024, 3, 13, 23, 59, 59)),
        ("tomorrow", datetime(2024, 3, 14, 23, 59, 59)),
        ("tom", datetime(2024, 3, 14, 23, 59, 59)),
        ("friday", datetime(2024, 3, 15, 23, 59, 59)),
        ("mon", datetime(2024, 3, 18, 23, 59, 59)),
        ("wednesday", datetime(2024, 3, 20, 23, 59, 59)),
        ("nextweek", datetime(2024, 3, 20, 23, 59, 59)),
        ("next week", datetime(2024, 3, 20, 23, 59, 59)),
        ("2024-04-01", datetime(2024, 4, 1, 23, 59, 59)),
        ("04/02/2024", datetime(2024, 4, 2, 23, 59, 59)),
        ("04-03-2024", datetime(2024, 4, 3, 23, 59, 59)),
        ("Jan 2", datetime(2024, 1, 2, 23, 59, 59)),
        ("Jan 2, 2026", datetime(2026, 1, 2, 23, 59, 59)),
    ],
)
def test_parse_natural_date(text, expected):
    assert parse_natural_date(text, NOW) == expected


def test_parse_natural_date_rejects_garbage():
    assert parse_natural_date("someday", NOW) is None
    assert parse_natural_date("", NOW) is None


@pytest.mark.parametrize("text, minutes", [("30m", 30), ("1h", 60), ("1h30m", 90), ("45", 45)])
def test_parse_duration(text, minutes):
    assert parse_duration(text) == minutes


@pytest.mark.parametrize("text", ["", "0", "abc", "h", "0m"])
def test_parse_duration_invalid(text):
    assert parse_duration(text) is None


def test_formatting_helpers():
    assert format_duration(90) == "1h30m"
    assert format_duration(60) == "1h"
    assert format_duration(5) == "5m"
    assert format_elapsed(3725) == "01:02:05"
    assert format_due_date(datetime(2024, 3, 13, 23, 59, 59), NOW) == "today"
    assert format_due_date(datetime(2024, 3, 14, 23, 59, 59), NOW) == "tomorrow"
