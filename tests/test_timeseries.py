from __future__ import annotations

import pytest

from prayer_stats.analytics.models import DayRecord, HijriDate
from prayer_stats.analytics.timeseries import build_series, series_to_frame
from prayer_stats.analytics.visuals import build_prayer_times_chart


def _record(date: str, fajr: str, *, hijri_day: int | None = None, hijri_month: int | None = None) -> DayRecord:
    hijri = None
    if hijri_day is not None:
        hijri = HijriDate(day=hijri_day, month_number=hijri_month, month_name="Shaʿbān", year=1445)
    return DayRecord(
        gregorian_date=date,
        timings={"Fajr": f"{fajr} (+03)", "Maghrib": "18:00 (+03)"},
        hijri=hijri,
        meta_timezone="Etc/GMT-3",
    )


def _out_of_order_records() -> list[DayRecord]:
    return [
        _record("01-03-2024", "05:00"),
        _record("02-03-2024", "04:58"),
        _record("28-02-2024", "05:10", hijri_day=18, hijri_month=8),
        _record("29-02-2024", "05:08"),
    ]


def test_build_series_is_chronological_with_one_boundary():
    series = build_series(_out_of_order_records())

    assert [label[0] for label in series.labels] == ["Feb 28th", "Feb 29th", "Mar 1st", "Mar 2nd"]
    assert series.month_boundaries == [2]


def test_build_series_labels_include_abbreviated_hijri_day():
    series = build_series(_out_of_order_records())
    assert series.labels[0] == ("Feb 28th", "Shb 18th")
    assert series.labels[1] == ("Feb 29th", "")


def test_build_series_datasets_hold_decimal_hours():
    series = build_series(_out_of_order_records())
    fajr = next(dataset for dataset in series.datasets if dataset.label == "Fajr")

    assert len(series.datasets) == 6
    assert fajr.data[0] == pytest.approx(5 + 10 / 60)
    assert fajr.formatted_times[0] == "05:10 (+03)"

    isha = next(dataset for dataset in series.datasets if dataset.label == "Isha")
    assert isha.data == [None, None, None, None]


def test_single_month_has_no_boundaries():
    series = build_series([_record("01-03-2024", "05:00"), _record("02-03-2024", "04:58")])
    assert series.month_boundaries == []


def test_series_to_frame_and_chart():
    series = build_series(_out_of_order_records())
    frame = series_to_frame(series)

    assert {"day_index", "gregorian", "prayer", "hours", "time"}.issubset(frame.columns)
    assert len(frame) == 4 * 6

    fig = build_prayer_times_chart(series)
    assert len(fig.data) == 6
