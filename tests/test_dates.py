# tests/test_dates.py
from datetime import date, datetime

import pytest

from services.submitter.dates import format_date, parse_date, render


def test_iso_utc_value_keeps_its_calendar_day():
    assert format_date("2024-03-05T00:00:00Z", "YYYY-MM-DD") == "2024-03-05"


def test_unpadded_tokens():
    assert format_date("2024-03-05T09:07:00Z", "M/D/YYYY H:m") == "3/5/2024 9:7"
    assert format_date("2024-03-05T09:07:04Z", "s") == "4"


@pytest.mark.parametrize(
    "pattern,expected",
    [
        ("YYYY-MM-DD", "2024-03-05"),
        ("YY/MM/DD HH:mm:ss", "24/03/05 21:07:04"),
        ("h:mm A", "9:07 PM"),
        ("hh:mm a", "09:07 pm"),
        ("MMMM Do, YYYY", "March 5th, 2024"),
        ("ddd, D MMM", "Tue, 5 Mar"),
        ("dddd", "Tuesday"),
        ("[Today is] D", "Today is 5"),
        ("100% YYYY", "100% 2024"),
    ],
)
def test_render(pattern, expected):
    assert render(datetime(2024, 3, 5, 21, 7, 4), pattern) == expected


@pytest.mark.parametrize("day,expected", [(1, "1st"), (2, "2nd"), (3, "3rd"), (11, "11th"), (12, "12th"), (22, "22nd")])
def test_ordinal_days(day, expected):
    assert render(datetime(2024, 1, day), "Do") == expected


def test_midnight_is_twelve_on_the_twelve_hour_clock():
    assert render(datetime(2024, 1, 1, 0, 5), "h:mm A") == "12:05 AM"


def test_other_layouts():
    assert format_date("2024/03/05 14:30", "YYYY-MM-DD HH:mm") == "2024-03-05 14:30"
    assert format_date(date(2024, 3, 5), "DD/MM/YYYY") == "05/03/2024"
    assert format_date(datetime(2024, 3, 5, 9, 5, 7), "HH:mm:ss") == "09:05:07"


def test_unparsable_date_raises_value_error():
    with pytest.raises(ValueError):
        parse_date("next tuesday")
