"""Durations between consecutive prayers."""

from __future__ import annotations

from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from .extremes import chronological, summarise_minutes
from .models import INTERVAL_SEQUENCE, DayRecord, IntervalStatSummary
from .normalization import timing_minutes

MINUTES_PER_DAY = 1440


def interval_names(sequence: Sequence[str] = INTERVAL_SEQUENCE) -> List[str]:
    return [f"{start}_to_{end}" for start, end in zip(sequence, sequence[1:])]


def wrapped_duration(start_minutes: int, end_minutes: int) -> int:
    """Minutes from ``start`` to ``end`` across midnight, always in ``[0, 1440)``."""
    return (end_minutes - start_minutes + MINUTES_PER_DAY) % MINUTES_PER_DAY


def compute_intervals(
    records: Iterable[DayRecord],
    sequence: Sequence[str] = INTERVAL_SEQUENCE,
) -> Dict[str, Optional[IntervalStatSummary]]:
    """
    Summarise each ``A_to_B`` interval of the cyclic prayer sequence.

    Both ends are read from the same day's timings. A missing timing skips
    every pair touching it.
    """

    names = interval_names(sequence)
    values: Dict[str, List[int]] = {name: [] for name in names}
    dates: Dict[str, List[str]] = {name: [] for name in names}
    times: Dict[str, List[Tuple[str, str]]] = {name: [] for name in names}

    for record in chronological(records):
        previous: tuple[str, int, str] | None = None
        for prayer in sequence:
            current = timing_minutes(record, prayer)
            if current is None:
                continue

            raw = record.timings[prayer]
            if previous is not None:
                prev_prayer, prev_minutes, prev_raw = previous
                name = f"{prev_prayer}_to_{prayer}"
                if name in values:
                    values[name].append(wrapped_duration(prev_minutes, current))
                    dates[name].append(record.display_date)
                    times[name].append((prev_raw, raw))
            previous = (prayer, current, raw)

    result: Dict[str, Optional[IntervalStatSummary]] = {}
    for name in names:
        durations = values[name]
        if not durations:
            result[name] = None
            continue

        low, high, avg, spread, stdev = summarise_minutes(durations)
        min_index = durations.index(low)
        max_index = durations.index(high)
        from_prayer, to_prayer = name.split("_to_")
        result[name] = IntervalStatSummary(
            interval=name,
            from_prayer=from_prayer,
            to_prayer=to_prayer,
            values=durations,
            dates=dates[name],
            times=times[name],
            min=low,
            max=high,
            avg=avg,
            range=spread,
            stdev=stdev,
            min_date=dates[name][min_index],
            max_date=dates[name][max_index],
            min_times=times[name][min_index],
            max_times=times[name][max_index],
        )
    return result
