"""Data containers shared by the prayer-time analytics."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Mapping, Optional, Tuple

PRAYERS: Tuple[str, ...] = ("Fajr", "Sunrise", "Dhuhr", "Asr", "Maghrib", "Isha")
INTERVAL_SEQUENCE: Tuple[str, ...] = ("Isha", "Fajr", "Sunrise", "Dhuhr", "Asr", "Maghrib", "Isha")
RAMADAN_MONTH = 9


@dataclass(frozen=True, slots=True)
class HijriDate:
    day: int
    month_number: int | None
    month_name: str = ""
    year: int | None = None
    readable: str | None = None

    def display(self) -> str:
        if self.readable:
            return self.readable
        month = self.month_name or "Unknown"
        year = self.year if self.year is not None else "Unknown"
        return f"{self.day} {month} {year} AH"


@dataclass(frozen=True, slots=True)
class DayRecord:
    """One calendar day as delivered by the prayer-time provider."""

    gregorian_date: str
    timings: Mapping[str, str]
    readable_date: str | None = None
    hijri: HijriDate | None = None
    meta_timezone: str | None = None

    @property
    def display_date(self) -> str:
        return self.readable_date or self.gregorian_date

    @property
    def sort_key(self) -> str:
        parts = self.gregorian_date.split("-")
        if len(parts) != 3:
            return self.gregorian_date
        day, month, year = parts
        return f"{year}-{month}-{day}"

    @property
    def year_month(self) -> str:
        return self.sort_key[:7]


@dataclass(slots=True)
class PrayerStatSummary:
    """Earliest/latest/mean statistics for one prayer, in minutes since midnight."""

    prayer: str
    times: List[int]
    dates: List[str]
    min: int
    max: int
    mean: int
    range: int
    stdev: int
    min_date: str
    max_date: str


@dataclass(slots=True)
class IntervalStatSummary:
    """Duration statistics between two consecutive prayers, in minutes."""

    interval: str
    from_prayer: str
    to_prayer: str
    values: List[int]
    dates: List[str]
    times: List[Tuple[str, str]]
    min: int
    max: int
    avg: int
    range: int
    stdev: int
    min_date: str
    max_date: str
    min_times: Tuple[str, str]
    max_times: Tuple[str, str]

    @property
    def label(self) -> str:
        return f"{self.from_prayer} to {self.to_prayer}"


@dataclass(frozen=True, slots=True)
class FastingEntry:
    duration: int
    hijri_date: str
    gregorian_date: str
    fajr: str
    maghrib: str
    hijri_month: int | None = None


@dataclass(slots=True)
class FastingStatSummary:
    times: List[FastingEntry]
    min: int
    max: int
    avg: int
    range: int
    stdev: int
    min_entry: FastingEntry
    max_entry: FastingEntry


@dataclass(slots=True)
class PrayerSeries:
    label: str
    data: List[Optional[float]]
    formatted_times: List[Optional[str]]
    color: str


@dataclass(slots=True)
class ChartSeries:
    labels: List[Tuple[str, str]]
    datasets: List[PrayerSeries]
    month_boundaries: List[int]


@dataclass(slots=True)
class StatsMetadata:
    latitude: float | None = None
    longitude: float | None = None
    calculation_method: str | None = None
    year: int | str | None = None
    year_type: str = "Gregorian"
    timezone: str | None = None


@dataclass(slots=True)
class PrayerStatistics:
    """Everything derived from one yearly dataset."""

    prayer_stats: Dict[str, Optional[PrayerStatSummary]]
    interval_stats: Dict[str, Optional[IntervalStatSummary]]
    fasting_stats: Dict[str, Optional[FastingStatSummary]]
    metadata: StatsMetadata = field(default_factory=StatsMetadata)


class EmptyDatasetError(ValueError):
    """Raised when a dataset contains no usable day records."""
