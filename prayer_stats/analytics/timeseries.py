"""Chronological chart series of normalized prayer times."""

from __future__ import annotations

from typing import Iterable, List, Sequence, Tuple

import pandas as pd

from .extremes import chronological
from .formatting import format_date_with_ordinal, format_hijri_date_with_ordinal
from .models import PRAYERS, ChartSeries, DayRecord, PrayerSeries
from .normalization import normalize_timing

PRAYER_COLORS = ("#FF6384", "#36A2EB", "#FFCE56", "#4BC0C0", "#9966FF", "#FF9F40")


def _day_label(record: DayRecord) -> Tuple[str, str]:
    gregorian = format_date_with_ordinal(record.gregorian_date)
    hijri = ""
    if record.hijri is not None:
        hijri = format_hijri_date_with_ordinal(
            record.hijri.day,
            record.hijri.month_name,
            record.hijri.month_number,
        )
    return gregorian, hijri


def month_boundaries(records: Sequence[DayRecord]) -> List[int]:
    """Indices where a new ``(year, month)`` group starts, excluding the first group."""
    boundaries: List[int] = []
    seen: set[str] = set()
    for index, record in enumerate(records):
        key = record.year_month
        if key in seen:
            continue
        seen.add(key)
        if index > 0:
            boundaries.append(index)
    return boundaries


def build_series(records: Iterable[DayRecord], prayers: Sequence[str] = PRAYERS) -> ChartSeries:
    """Return labels, one dataset per prayer (decimal hours) and month boundaries."""
    ordered = chronological(records)

    datasets = [
        PrayerSeries(
            label=prayer,
            data=[normalize_timing(record, prayer) for record in ordered],
            formatted_times=[record.timings.get(prayer) for record in ordered],
            color=PRAYER_COLORS[index % len(PRAYER_COLORS)],
        )
        for index, prayer in enumerate(prayers)
    ]

    return ChartSeries(
        labels=[_day_label(record) for record in ordered],
        datasets=datasets,
        month_boundaries=month_boundaries(ordered),
    )


def series_to_frame(series: ChartSeries) -> pd.DataFrame:
    """Long-format frame (one row per day and prayer) for plotting and export."""
    rows = []
    for dataset in series.datasets:
        for index, (value, raw) in enumerate(zip(dataset.data, dataset.formatted_times)):
            gregorian, hijri = series.labels[index]
            rows.append(
                {
                    "day_index": index,
                    "gregorian": gregorian,
                    "hijri": hijri,
                    "prayer": dataset.label,
                    "hours": value,
                    "time": raw,
                }
            )

    if not rows:
        return pd.DataFrame(columns=["day_index", "gregorian", "hijri", "prayer", "hours", "time"])
    return pd.DataFrame(rows)
