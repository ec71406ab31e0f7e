from __future__ import annotations

import json

import pytest

from prayer_stats.analytics.models import DayRecord, HijriDate, StatsMetadata
from prayer_stats.analytics.summaries import compute_statistics
from prayer_stats.analytics.timeseries import build_series
from prayer_stats.reporting.exporters import (
    build_pdf_report,
    export_excel_report,
    export_filename,
    export_json_report,
    format_stats_for_export,
)


def _metadata() -> StatsMetadata:
    return StatsMetadata(
        latitude=21.4225,
        longitude=39.8262,
        calculation_method="Umm al-Qura University, Makkah",
        year=2024,
    )


def _records(include_ramadan: bool = True) -> list[DayRecord]:
    def day(date: str, readable: str, fajr: str, maghrib: str, month: int) -> DayRecord:
        return DayRecord(
            gregorian_date=date,
            readable_date=readable,
            timings={
                "Fajr": f"{fajr} (+03)",
                "Sunrise": "06:30 (+03)",
                "Dhuhr": "12:20 (+03)",
                "Asr": "15:40 (+03)",
                "Maghrib": f"{maghrib} (+03)",
                "Isha": "19:45 (+03)",
            },
            hijri=HijriDate(day=1, month_number=month, month_name="Ramadan" if month == 9 else "Shawwal", year=1445),
            meta_timezone="Asia/Riyadh",
        )

    records = [
        day("10-04-2024", "10 Apr 2024", "04:20", "18:30", 10),
        day("11-04-2024", "11 Apr 2024", "04:19", "18:31", 10),
    ]
    if include_ramadan:
        records.append(day("15-03-2024", "15 Mar 2024", "04:50", "18:20", 9))
    return records


def test_format_stats_for_export_is_valid_json():
    stats = compute_statistics(_records(), _metadata())
    document = json.loads(json.dumps(format_stats_for_export(stats)))

    assert len(document["prayer_time_extremes"]) == 6
    assert len(document["intervals"]) == 6
    assert document["location"] == {
        "latitude": 21.4225,
        "longitude": 39.8262,
        "calculation_method": "Umm al-Qura University, Makkah",
        "year": 2024,
    }

    fajr = document["prayer_time_extremes"][0]
    assert fajr["prayer"] == "Fajr"
    assert fajr["earliest"] == {"time": "04:19", "date": "11 Apr 2024"}
    assert fajr["latest"] == {"time": "04:50", "date": "15 Mar 2024"}

    first_interval = document["intervals"][0]
    assert first_interval["interval"] == "Isha to Fajr"
    assert set(first_interval["shortest"]) == {"duration", "date", "from_time", "to_time"}


def test_fasting_export_sections():
    stats = compute_statistics(_records(), _metadata())
    fasting = format_stats_for_export(stats)["fasting"]

    assert fasting["all_year"]["longest"]["duration"] == "14:12"
    assert fasting["all_year"]["longest"]["gregorian_date"] == "11 Apr"
    assert fasting["all_year"]["shortest"]["duration"] == "13:30"
    assert fasting["ramadan"]["longest"]["fajr"] == "04:50 (+03)"
    assert fasting["ramadan"]["stdev"] == "00:00"

    no_ramadan = compute_statistics(_records(include_ramadan=False), _metadata())
    assert format_stats_for_export(no_ramadan)["fasting"]["ramadan"] is None


def test_missing_prayer_keeps_its_slot():
    records = [
        DayRecord(gregorian_date="01-01-2024", timings={"Fajr": "05:00 (+03)"}, meta_timezone="Asia/Riyadh"),
    ]
    document = format_stats_for_export(compute_statistics(records, _metadata()))

    isha = document["prayer_time_extremes"][-1]
    assert isha == {"prayer": "Isha", "earliest": None, "latest": None, "average": None}
    assert all(entry["shortest"] is None for entry in document["intervals"])


def test_export_filename_and_json_file(tmp_path):
    metadata = StatsMetadata(latitude=21.4225, longitude=39.8262, calculation_method="Muslim World League", year=2024)
    assert export_filename(metadata) == "PS-stats-Muslim_World_League-Lat_21.42_Long_39.83_Gregorian_2024.json"

    stats = compute_statistics(_records(), metadata)
    target = export_json_report(stats, path=tmp_path / "stats.json")
    assert json.loads(target.read_text(encoding="utf-8"))["location"]["year"] == 2024
    assert isinstance(export_json_report(stats), str)


def test_export_excel_report_returns_workbook_bytes():
    records = _records()
    stats = compute_statistics(records, _metadata())
    payload = export_excel_report(stats, build_series(records))
    assert payload[:2] == b"PK"


def test_build_pdf_report():
    pytest.importorskip("reportlab")
    records = _records()
    stats = compute_statistics(records, _metadata())

    tables_only = build_pdf_report(stats)
    with_chart = build_pdf_report(stats, build_series(records))

    assert tables_only.startswith(b"%PDF")
    assert with_chart.startswith(b"%PDF")
    assert b"/Subtype /Image" in with_chart
    assert b"/Subtype /Image" not in tables_only
