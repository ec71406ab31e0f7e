from __future__ import annotations

import logging
from datetime import timezone

import pytest

from prayer_stats.analytics import normalization
from prayer_stats.analytics.models import DayRecord
from prayer_stats.analytics.normalization import (
    normalize_time,
    normalize_timing,
    parse_time_string,
    resolve_zone,
    timing_minutes,
)


@pytest.fixture()
def utc_host(monkeypatch):
    monkeypatch.setattr(normalization.dateutil_tz, "tzlocal", lambda: timezone.utc)


def test_parse_time_string_strips_parenthesised_zone():
    assert parse_time_string("05:47 (EEST)") == ("05:47", "EEST")
    assert parse_time_string("06:58 (+07)") == ("06:58", "+07")
    assert parse_time_string("05:47") == ("05:47", None)
    assert parse_time_string(None) == (None, None)


def test_resolve_zone_strategy_order():
    assert resolve_zone("+07", "Asia/Krasnoyarsk").strategy == "meta"
    assert resolve_zone("+07", None).strategy == "offset"
    assert resolve_zone("Europe/London", None).strategy == "hint"
    assert resolve_zone("+03", "Not/A_Zone").strategy == "offset"


def test_resolve_zone_falls_back_to_host_for_abbreviations(utc_host):
    resolution = resolve_zone("EEST", None)
    assert resolution.ok
    assert resolution.strategy == "local"

    assert resolve_zone(None, None).strategy == "local"


def test_fixed_offset_reads_wall_clock():
    assert normalize_time("05:47", "+07", "15-03-2024") == pytest.approx(5 + 47 / 60)
    assert normalize_time("18:05", "-02", "01-11-2024") == pytest.approx(18 + 5 / 60)


def test_meta_timezone_smooths_daylight_saving_shift():
    winter = normalize_time("05:00", "EET", "15-01-2024", "Europe/Helsinki")
    summer = normalize_time("05:00", "EEST", "15-07-2024", "Europe/Helsinki")

    assert winter == pytest.approx(5.0)
    # elapsed time since 1 January in the zone's standard frame
    assert summer == pytest.approx(4.0)


def test_unknown_abbreviation_uses_host_zone(utc_host):
    assert normalize_time("05:30", "EEST", "15-07-2024") == pytest.approx(5.5)


def test_parse_failure_falls_back_to_naive_reading(caplog):
    with caplog.at_level(logging.WARNING, logger="prayer_stats.analytics.normalization"):
        value = normalize_time("05:30", "+03", "not-a-date")

    assert value == pytest.approx(5.5)
    assert "Using simple calculation" in caplog.text


def test_invalid_calendar_date_falls_back():
    assert normalize_time("21:15", "+03", "31-02-2024") == pytest.approx(21.25)


@pytest.mark.parametrize("tz_hint", ["+14", "-12", "+00", "+05"])
@pytest.mark.parametrize("time_str", ["00:00", "00:01", "12:30", "23:59"])
def test_normalized_value_is_within_one_day(time_str, tz_hint):
    value = normalize_time(time_str, tz_hint, "30-12-2024")
    assert 0 <= value < 24


def test_normalize_is_idempotent():
    args = ("04:12", None, "21-06-2024", "Asia/Krasnoyarsk")
    assert normalize_time(*args) == normalize_time(*args)


def test_record_helpers_use_record_zone_and_skip_missing():
    record = DayRecord(
        gregorian_date="10-02-2024",
        timings={"Fajr": "05:47 (+03)", "Maghrib": "17:45 (+03)"},
        meta_timezone="Europe/Istanbul",
    )
    assert normalize_timing(record, "Fajr") == pytest.approx(5 + 47 / 60)
    assert timing_minutes(record, "Fajr") == 347
    assert timing_minutes(record, "Maghrib") == 17 * 60 + 45
    assert timing_minutes(record, "Isha") is None


@pytest.mark.parametrize("hint", ["US", "America", "Asia"])
def test_zone_directory_names_fall_through_to_host(utc_host, hint):
    resolution = resolve_zone(hint, None)
    assert resolution.strategy == "local"
    assert normalize_time("05:00", hint, "01-01-2024") == pytest.approx(5.0)
