"""Aggregate statistics and display tables for a yearly prayer-time dataset."""

from __future__ import annotations

from typing import Dict, List, Optional, Sequence

import pandas as pd

from .extremes import compute_extremes
from .fasting import compute_fasting
from .formatting import format_date_with_ordinal, is_ramadan, minutes_to_hhmm
from .intervals import compute_intervals
from .models import (
    DayRecord,
    EmptyDatasetError,
    FastingStatSummary,
    IntervalStatSummary,
    PrayerStatistics,
    PrayerStatSummary,
    StatsMetadata,
)

NO_DATA = "No data available"
PERIOD_LABELS = {"all_year": "All Year", "ramadan": "Ramadan"}

_PRAYER_COLUMNS = ["Prayer", "Earliest", "Range", "Latest", "Average", "StDev"]
_INTERVAL_COLUMNS = ["Interval", "Shortest", "Range", "Longest", "Average", "StDev"]
_FASTING_COLUMNS = ["Period", "Shortest", "Range", "Longest", "Average", "StDev"]


def compute_statistics(
    records: Sequence[DayRecord],
    metadata: StatsMetadata | None = None,
) -> PrayerStatistics:
    """Run every calculator over ``records``; an empty dataset is an error."""
    if not records:
        raise EmptyDatasetError("The prayer-time dataset contains no usable days.")

    return PrayerStatistics(
        prayer_stats=compute_extremes(records),
        interval_stats=compute_intervals(records),
        fasting_stats=compute_fasting(records),
        metadata=metadata or StatsMetadata(),
    )


def _at(minutes: int, date: str) -> str:
    return f"{minutes_to_hhmm(minutes)} on {format_date_with_ordinal(date)}"


def _clock_pair(pair: Sequence[str]) -> str:
    if len(pair) != 2:
        return ""
    return f"{pair[0].split(' ')[0]} → {pair[1].split(' ')[0]}"


def _no_data_row(columns: List[str], label: str) -> Dict[str, str]:
    row = {column: "" for column in columns}
    row[columns[0]] = label
    row[columns[1]] = NO_DATA
    return row


def prayer_stats_to_frame(prayer_stats: Dict[str, Optional[PrayerStatSummary]]) -> pd.DataFrame:
    rows: List[Dict[str, str]] = []
    for prayer, summary in prayer_stats.items():
        if summary is None:
            rows.append(_no_data_row(_PRAYER_COLUMNS, prayer))
            continue
        rows.append(
            {
                "Prayer": prayer,
                "Earliest": _at(summary.min, summary.min_date),
                "Range": minutes_to_hhmm(summary.range),
                "Latest": _at(summary.max, summary.max_date),
                "Average": minutes_to_hhmm(summary.mean),
                "StDev": minutes_to_hhmm(summary.stdev),
            }
        )
    return pd.DataFrame(rows, columns=_PRAYER_COLUMNS)


def interval_stats_to_frame(interval_stats: Dict[str, Optional[IntervalStatSummary]]) -> pd.DataFrame:
    rows: List[Dict[str, str]] = []
    for name, summary in interval_stats.items():
        if summary is None:
            rows.append(_no_data_row(_INTERVAL_COLUMNS, name.replace("_to_", " to ")))
            continue
        rows.append(
            {
                "Interval": summary.label,
                "Shortest": f"{_at(summary.min, summary.min_date)} ({_clock_pair(summary.min_times)})",
                "Range": minutes_to_hhmm(summary.range),
                "Longest": f"{_at(summary.max, summary.max_date)} ({_clock_pair(summary.max_times)})",
                "Average": minutes_to_hhmm(summary.avg),
                "StDev": minutes_to_hhmm(summary.stdev),
            }
        )
    return pd.DataFrame(rows, columns=_INTERVAL_COLUMNS)


def fasting_stats_to_frame(fasting_stats: Dict[str, Optional[FastingStatSummary]]) -> pd.DataFrame:
    rows: List[Dict[str, str]] = []
    for key, label in PERIOD_LABELS.items():
        summary = fasting_stats.get(key)
        if summary is None:
            rows.append(_no_data_row(_FASTING_COLUMNS, label))
            continue
        shortest = summary.min_entry
        longest = summary.max_entry
        rows.append(
            {
                "Period": label,
                "Shortest": (
                    f"{_at(shortest.duration, shortest.gregorian_date)} "
                    f"({_clock_pair((shortest.fajr, shortest.maghrib))})"
                ),
                "Range": minutes_to_hhmm(summary.range),
                "Longest": (
                    f"{_at(longest.duration, longest.gregorian_date)} "
                    f"({_clock_pair((longest.fajr, longest.maghrib))})"
                ),
                "Average": minutes_to_hhmm(summary.avg),
                "StDev": minutes_to_hhmm(summary.stdev),
            }
        )
    return pd.DataFrame(rows, columns=_FASTING_COLUMNS)


def fasting_durations_frame(fasting_stats: Dict[str, Optional[FastingStatSummary]]) -> pd.DataFrame:
    """One row per fasting day with the duration in minutes and a Ramadan flag."""
    summary = fasting_stats.get("all_year")
    if summary is None:
        return pd.DataFrame(columns=["gregorian_date", "hijri_date", "duration", "ramadan", "fajr", "maghrib"])

    return pd.DataFrame(
        [
            {
                "gregorian_date": entry.gregorian_date,
                "hijri_date": entry.hijri_date,
                "duration": entry.duration,
                "ramadan": is_ramadan(entry.hijri_month),
                "fajr": entry.fajr,
                "maghrib": entry.maghrib,
            }
            for entry in summary.times
        ]
    )
