"""Analytics helpers for yearly prayer-time datasets."""

from .normalization import normalize_time, normalize_timing, parse_time_string, resolve_zone, timing_minutes
from .extremes import compute_extremes
from .intervals import compute_intervals
from .fasting import compute_fasting
from .timeseries import build_series, series_to_frame
from .summaries import (
    compute_statistics,
    prayer_stats_to_frame,
    interval_stats_to_frame,
    fasting_stats_to_frame,
    fasting_durations_frame,
)
from .formatting import minutes_to_hhmm, hhmm_to_minutes, format_date_with_ordinal
from .visuals import (
    build_prayer_times_chart,
    build_fasting_duration_chart,
    create_fasting_distribution_plot,
    create_prayer_times_plot,
)

__all__ = [
    "normalize_time",
    "normalize_timing",
    "parse_time_string",
    "resolve_zone",
    "timing_minutes",
    "compute_extremes",
    "compute_intervals",
    "compute_fasting",
    "build_series",
    "series_to_frame",
    "compute_statistics",
    "prayer_stats_to_frame",
    "interval_stats_to_frame",
    "fasting_stats_to_frame",
    "fasting_durations_frame",
    "minutes_to_hhmm",
    "hhmm_to_minutes",
    "format_date_with_ordinal",
    "build_prayer_times_chart",
    "build_fasting_duration_chart",
    "create_fasting_distribution_plot",
    "create_prayer_times_plot",
]
