"""Earliest/latest statistics per prayer."""

from __future__ import annotations

from typing import Dict, Iterable, List, Optional, Sequence

import numpy as np

from .formatting import round_half_away
from .models import PRAYERS, DayRecord, PrayerStatSummary
from .normalization import timing_minutes


def chronological(records: Iterable[DayRecord]) -> List[DayRecord]:
    """Return ``records`` sorted by Gregorian date (stable for equal dates)."""
    return sorted(records, key=lambda record: record.sort_key)


def summarise_minutes(values: Sequence[int]) -> tuple[int, int, int, int, int]:
    """Return ``(min, max, mean, range, stdev)`` with population stdev."""
    array = np.asarray(values, dtype=float)
    low = int(min(values))
    high = int(max(values))
    mean = round_half_away(float(array.mean()))
    stdev = round_half_away(float(array.std(ddof=0)))
    return low, high, mean, high - low, stdev


def compute_extremes(
    records: Iterable[DayRecord],
    prayers: Sequence[str] = PRAYERS,
) -> Dict[str, Optional[PrayerStatSummary]]:
    """
    Collect normalized minutes per prayer and summarise them.

    Records are processed chronologically so the first date reaching an
    extreme is the one reported. A prayer without any timing maps to ``None``.
    """

    collected: Dict[str, tuple[List[int], List[str]]] = {prayer: ([], []) for prayer in prayers}

    for record in chronological(records):
        for prayer in prayers:
            minutes = timing_minutes(record, prayer)
            if minutes is None:
                continue
            times, dates = collected[prayer]
            times.append(minutes)
            dates.append(record.display_date)

    result: Dict[str, Optional[PrayerStatSummary]] = {}
    for prayer, (times, dates) in collected.items():
        if not times:
            result[prayer] = None
            continue

        low, high, mean, spread, stdev = summarise_minutes(times)
        result[prayer] = PrayerStatSummary(
            prayer=prayer,
            times=times,
            dates=dates,
            min=low,
            max=high,
            mean=mean,
            range=spread,
            stdev=stdev,
            min_date=dates[times.index(low)],
            max_date=dates[times.index(high)],
        )
    return result
