"""Fajr to Maghrib fasting durations for the whole year and for Ramadan."""

from __future__ import annotations

import math
from typing import Dict, Iterable, List, Optional

from .extremes import chronological
from .formatting import is_ramadan, round_half_away
from .intervals import wrapped_duration
from .models import DayRecord, FastingEntry, FastingStatSummary
from .normalization import timing_minutes

PERIODS = ("all_year", "ramadan")


def fasting_entry(record: DayRecord) -> FastingEntry | None:
    fajr = timing_minutes(record, "Fajr")
    maghrib = timing_minutes(record, "Maghrib")
    if fajr is None or maghrib is None:
        return None

    hijri = record.hijri
    return FastingEntry(
        duration=wrapped_duration(fajr, maghrib),
        hijri_date=hijri.display() if hijri is not None else "Unknown",
        gregorian_date=record.display_date,
        fajr=record.timings["Fajr"],
        maghrib=record.timings["Maghrib"],
        hijri_month=hijri.month_number if hijri is not None else None,
    )


def summarise_fasting(entries: List[FastingEntry]) -> FastingStatSummary | None:
    """
    Aggregate fasting durations.

    ``avg`` truncates (floor of the sum over the count) and the deviation is
    measured around that truncated average; a single entry has ``stdev == 0``.
    """

    if not entries:
        return None

    durations = [entry.duration for entry in entries]
    low = min(durations)
    high = max(durations)
    avg = sum(durations) // len(durations)

    stdev = 0
    if len(durations) > 1:
        variance = sum((value - avg) ** 2 for value in durations) / len(durations)
        stdev = round_half_away(math.sqrt(variance))

    return FastingStatSummary(
        times=entries,
        min=low,
        max=high,
        avg=avg,
        range=high - low,
        stdev=stdev,
        min_entry=next(entry for entry in entries if entry.duration == low),
        max_entry=next(entry for entry in entries if entry.duration == high),
    )


def compute_fasting(records: Iterable[DayRecord]) -> Dict[str, Optional[FastingStatSummary]]:
    all_year: List[FastingEntry] = []
    ramadan: List[FastingEntry] = []

    for record in chronological(records):
        entry = fasting_entry(record)
        if entry is None:
            continue
        all_year.append(entry)
        if is_ramadan(entry.hijri_month):
            ramadan.append(entry)

    return {
        "all_year": summarise_fasting(all_year),
        "ramadan": summarise_fasting(ramadan),
    }
