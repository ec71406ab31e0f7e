"""Timezone-aware normalization of provider prayer-time strings.

Every calculator and the chart builder reads prayer times through
:func:`timing_minutes` / :func:`normalize_timing`, so the tables and the chart
always agree on the value of a given timing.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone, tzinfo
from typing import Callable, Optional, Sequence, Tuple
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from dateutil import tz as dateutil_tz

from .formatting import round_half_away
from .models import DayRecord

logger = logging.getLogger(__name__)

_OFFSET_PATTERN = re.compile(r"^[+-]\d{2}$")
_SECONDS_PER_HOUR = 3600.0


@dataclass(frozen=True, slots=True)
class ZoneResolution:
    """Result of one resolution strategy: either a zone or the reason it failed."""

    zone: tzinfo | None
    strategy: str
    reason: str | None = None

    @property
    def ok(self) -> bool:
        return self.zone is not None


ZoneStrategy = Callable[[Optional[str], Optional[str]], ZoneResolution]


def _iana_zone(name: str, strategy: str) -> ZoneResolution:
    try:
        return ZoneResolution(ZoneInfo(name), strategy)
    except (ZoneInfoNotFoundError, ValueError, OSError) as exc:
        return ZoneResolution(None, strategy, f"unknown zone {name!r}: {exc}")


def _from_meta_timezone(tz_hint: str | None, meta_timezone: str | None) -> ZoneResolution:
    if not meta_timezone:
        return ZoneResolution(None, "meta", "no metadata timezone")
    return _iana_zone(meta_timezone, "meta")


def _from_fixed_offset(tz_hint: str | None, meta_timezone: str | None) -> ZoneResolution:
    if not tz_hint or not _OFFSET_PATTERN.match(tz_hint):
        return ZoneResolution(None, "offset", "hint is not a fixed offset")
    hours = int(tz_hint)
    if abs(hours) >= 24:
        return ZoneResolution(None, "offset", f"offset {tz_hint} out of range")
    return ZoneResolution(timezone(timedelta(hours=hours), name=f"UTC{tz_hint}:00"), "offset")


def _from_zone_hint(tz_hint: str | None, meta_timezone: str | None) -> ZoneResolution:
    if not tz_hint:
        return ZoneResolution(None, "hint", "no timezone hint")
    return _iana_zone(tz_hint, "hint")


def _host_local(tz_hint: str | None, meta_timezone: str | None) -> ZoneResolution:
    if tz_hint:
        logger.debug("Could not resolve timezone %s, using local timezone", tz_hint)
    return ZoneResolution(dateutil_tz.tzlocal(), "local")


ZONE_STRATEGIES: Tuple[ZoneStrategy, ...] = (
    _from_meta_timezone,
    _from_fixed_offset,
    _from_zone_hint,
    _host_local,
)


def resolve_zone(
    tz_hint: str | None,
    meta_timezone: str | None,
    strategies: Sequence[ZoneStrategy] = ZONE_STRATEGIES,
) -> ZoneResolution:
    """Return the first successful resolution, or the last failure."""
    resolution = ZoneResolution(None, "none", "no strategies configured")
    for strategy in strategies:
        resolution = strategy(tz_hint, meta_timezone)
        if resolution.ok:
            return resolution
    return resolution


def parse_time_string(raw: str | None) -> tuple[str | None, str | None]:
    """Split ``"05:47 (EEST)"`` into ``("05:47", "EEST")``."""
    if not raw:
        return None, None

    parts = raw.strip().split(" ")
    time_part = parts[0]
    tz_hint = None
    if len(parts) > 1:
        tz_hint = parts[1]
        if tz_hint.startswith("(") and tz_hint.endswith(")"):
            tz_hint = tz_hint[1:-1]
        tz_hint = tz_hint or None
    return time_part, tz_hint


def _naive_hours(time_str: str) -> float:
    hours, minutes = time_str.split(":")
    return int(hours) + int(minutes) / 60


def normalize_time(
    time_str: str,
    tz_hint: str | None,
    date_str: str,
    meta_timezone: str | None = None,
) -> float:
    """
    Return the decimal hour of ``time_str`` on ``date_str`` in ``[0, 24)``.

    The wall-clock time is localised in the resolved zone and measured as
    elapsed time since 1 January 00:00 of the same year in that zone, modulo
    24 hours. A mid-year offset change (DST, or the provider switching its
    abbreviation) therefore shows up as a continuous series instead of a jump.

    Any parse or resolution failure falls back to ``hours + minutes / 60``.
    """

    try:
        day, month, year = (int(part) for part in date_str.split("-"))
        hours, minutes = (int(part) for part in time_str.split(":"))

        resolution = resolve_zone(tz_hint, meta_timezone)
        if not resolution.ok:
            raise ValueError(resolution.reason)

        reference = datetime(year, 1, 1, 0, 0, tzinfo=resolution.zone)
        actual = datetime(year, month, day, hours, minutes, tzinfo=resolution.zone)
        elapsed = actual.astimezone(timezone.utc) - reference.astimezone(timezone.utc)

        diff_hours = (elapsed.total_seconds() / _SECONDS_PER_HOUR) % 24
        normalized = (diff_hours + 24) % 24
        return 0.0 if normalized >= 24 else normalized
    except (ValueError, TypeError, OverflowError) as exc:
        logger.warning(
            "Error normalizing time %s with timezone %s for date %s: %s. Using simple calculation.",
            time_str,
            tz_hint,
            date_str,
            exc,
        )
        return _naive_hours(time_str)


def normalize_timing(record: DayRecord, prayer: str) -> float | None:
    """Normalized decimal hour of ``prayer`` for ``record``; ``None`` when the timing is missing."""
    raw = record.timings.get(prayer)
    if not raw:
        return None
    time_str, tz_hint = parse_time_string(raw)
    return normalize_time(time_str, tz_hint, record.gregorian_date, record.meta_timezone)


def timing_minutes(record: DayRecord, prayer: str) -> int | None:
    hours = normalize_timing(record, prayer)
    if hours is None:
        return None
    return round_half_away(hours * 60)
