from __future__ import annotations

import pytest

from prayer_stats.analytics.formatting import (
    abbreviated_hijri_month,
    format_date_with_ordinal,
    format_hijri_date_with_ordinal,
    hhmm_to_minutes,
    minutes_to_hhmm,
    ordinal,
    round_half_away,
    strip_year,
    time_to_minutes,
)


def test_minutes_to_hhmm_pads_and_floors():
    assert minutes_to_hhmm(870) == "14:30"
    assert minutes_to_hhmm(5) == "00:05"
    assert minutes_to_hhmm(59.9) == "00:59"


@pytest.mark.parametrize("value", ["00:00", "09:05", "12:30", "23:59"])
def test_hhmm_round_trip(value):
    assert minutes_to_hhmm(hhmm_to_minutes(value)) == value


def test_time_to_minutes_ignores_zone_suffix():
    assert time_to_minutes("05:47 (EEST)") == 347


def test_round_half_away_from_zero():
    assert round_half_away(2.5) == 3
    assert round_half_away(3.5) == 4
    assert round_half_away(-2.5) == -3
    assert round_half_away(2.4) == 2


@pytest.mark.parametrize(
    "number, expected",
    [(1, "1st"), (2, "2nd"), (3, "3rd"), (4, "4th"), (11, "11th"), (12, "12th"), (13, "13th"), (21, "21st"), (22, "22nd")],
)
def test_ordinal(number, expected):
    assert ordinal(number) == expected


def test_format_date_with_ordinal_accepts_provider_formats():
    assert format_date_with_ordinal("01-01-2024") == "Jan 1st"
    assert format_date_with_ordinal("25 Dec 2024") == "Dec 25th"
    assert format_date_with_ordinal("3 Mar 2024") == "Mar 3rd"
    assert format_date_with_ordinal("22 September 2024") == "Sep 22nd"


def test_format_date_with_ordinal_invalid():
    assert format_date_with_ordinal("2024/01/01") == "Invalid Date"
    assert format_date_with_ordinal("") == "Invalid Date"


def test_hijri_abbreviations():
    assert abbreviated_hijri_month("Ramaḍān", 9) == "Ram"
    assert abbreviated_hijri_month("Shawwal", None) == "Shw"
    assert abbreviated_hijri_month("Dhul Hijjah") == "Duh"
    assert abbreviated_hijri_month("Unknown month") == "Unknown month"
    assert format_hijri_date_with_ordinal("1", "Ramadan", "9") == "Ram 1st"
    assert format_hijri_date_with_ordinal(None, "Ramadan", 9) == ""


def test_strip_year():
    assert strip_year("01 Jan 2024") == "01 Jan"
    assert strip_year("01-01-2024") == "01-01-2024"
