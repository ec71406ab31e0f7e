"""Utilities for loading and validating yearly prayer-time calendars."""

from __future__ import annotations

import json
import logging
import re
from pathlib import Path
from typing import Any, Iterable, List, Mapping

from .analytics.extremes import chronological
from .analytics.models import PRAYERS, DayRecord, HijriDate, StatsMetadata

logger = logging.getLogger(__name__)

_TIMING_PATTERN = re.compile(r"^\d{1,2}:\d{2}(\s+\(?[^\s()]+\)?)?$")


def load_calendar(path: str | Path) -> Any:
    """
    Read a saved provider response (the JSON body of a calendar request).

    Raises
    ------
    FileNotFoundError
        If the dataset path does not exist.
    json.JSONDecodeError
        If the file is not valid JSON.
    """

    target = Path(path)
    if not target.exists():
        raise FileNotFoundError(f"Calendar dataset not found: {target}")
    with target.open(encoding="utf-8") as handle:
        return json.load(handle)


def _iter_days(payload: Any) -> Iterable[Any]:
    """Flatten the provider envelope / month mapping / flat list into day entries."""
    if isinstance(payload, Mapping) and "data" in payload:
        payload = payload["data"]

    if isinstance(payload, Mapping):
        for month in payload.values():
            if isinstance(month, list):
                yield from month
            elif isinstance(month, Mapping):
                yield month
    elif isinstance(payload, list):
        yield from payload


def _parse_hijri(raw: Any) -> HijriDate | None:
    if not isinstance(raw, Mapping):
        return None
    month = raw.get("month") if isinstance(raw.get("month"), Mapping) else {}
    try:
        day = int(raw.get("day"))
    except (TypeError, ValueError):
        return None

    month_number = month.get("number")
    try:
        month_number = int(month_number) if month_number not in (None, "") else None
    except (TypeError, ValueError):
        month_number = None

    year = raw.get("year")
    try:
        year = int(year) if year not in (None, "") else None
    except (TypeError, ValueError):
        year = None

    return HijriDate(
        day=day,
        month_number=month_number,
        month_name=str(month.get("en") or month.get("name") or ""),
        year=year,
        readable=raw.get("readable") or None,
    )


def _clean_timings(raw: Any) -> dict[str, str]:
    if not isinstance(raw, Mapping):
        return {}
    timings: dict[str, str] = {}
    for prayer in PRAYERS:
        value = raw.get(prayer)
        if not isinstance(value, str) or not value.strip():
            continue
        value = value.strip()
        if not _TIMING_PATTERN.match(value):
            logger.debug("Dropping malformed %s timing %r", prayer, value)
            continue
        timings[prayer] = value
    return timings


def parse_day(entry: Any) -> DayRecord | None:
    """Validate one provider day entry; ``None`` when it cannot be used."""
    if not isinstance(entry, Mapping):
        return None

    date_block = entry.get("date") if isinstance(entry.get("date"), Mapping) else {}
    gregorian = date_block.get("gregorian") if isinstance(date_block.get("gregorian"), Mapping) else {}
    gregorian_date = gregorian.get("date")
    if not gregorian_date:
        logger.debug("Skipping day without a Gregorian date: %r", entry)
        return None

    timings = _clean_timings(entry.get("timings"))
    if not timings:
        logger.debug("Skipping %s: no usable timings", gregorian_date)
        return None

    meta = entry.get("meta") if isinstance(entry.get("meta"), Mapping) else {}
    return DayRecord(
        gregorian_date=str(gregorian_date),
        timings=timings,
        readable_date=gregorian.get("readable") or None,
        hijri=_parse_hijri(date_block.get("hijri")),
        meta_timezone=meta.get("timezone") or None,
    )


def parse_calendar_payload(payload: Any) -> List[DayRecord]:
    """Flatten, validate and chronologically sort the provider's month→days structure."""
    records: List[DayRecord] = []
    skipped = 0
    for entry in _iter_days(payload):
        record = parse_day(entry)
        if record is None:
            skipped += 1
            continue
        records.append(record)

    if skipped:
        logger.warning("Skipped %d day entries without a date or usable timings", skipped)
    return chronological(records)


def _first_meta(payload: Any) -> Mapping[str, Any]:
    for entry in _iter_days(payload):
        if isinstance(entry, Mapping) and isinstance(entry.get("meta"), Mapping):
            return entry["meta"]
    return {}


def extract_metadata(
    payload: Any,
    *,
    year: int | str | None = None,
    year_type: str = "Gregorian",
    calculation_method: str | None = None,
) -> StatsMetadata:
    """Build export metadata from the first day's ``meta`` block."""
    meta = _first_meta(payload)

    method = calculation_method
    if method is None and isinstance(meta.get("method"), Mapping):
        method = meta["method"].get("name")

    if year is None:
        records = parse_calendar_payload(payload)
        if records:
            year = records[0].sort_key[:4]

    return StatsMetadata(
        latitude=_as_float(meta.get("latitude")),
        longitude=_as_float(meta.get("longitude")),
        calculation_method=method,
        year=year,
        year_type=year_type,
        timezone=meta.get("timezone"),
    )


def _as_float(value: Any) -> float | None:
    try:
        return float(value)
    except (TypeError, ValueError):
        return None
