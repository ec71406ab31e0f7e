"""Prayer-time statistics package."""

from .data_loader import extract_metadata, load_calendar, parse_calendar_payload
from .analytics.models import DayRecord, EmptyDatasetError, PrayerStatistics, StatsMetadata
from .analytics.summaries import compute_statistics
from .analytics.timeseries import build_series

__all__ = [
    "extract_metadata",
    "load_calendar",
    "parse_calendar_payload",
    "DayRecord",
    "EmptyDatasetError",
    "PrayerStatistics",
    "StatsMetadata",
    "compute_statistics",
    "build_series",
]
