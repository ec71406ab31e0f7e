"""Formatting helpers for minute values and calendar labels."""

from __future__ import annotations

import math
from datetime import datetime

from .models import RAMADAN_MONTH

INVALID_DATE = "Invalid Date"

_DATE_FORMATS = ("%d-%m-%Y", "%d %b %Y", "%d %B %Y")

_HIJRI_ABBREVIATIONS = {
    1: "Muh",
    2: "Saf",
    3: "Ra١",
    4: "Ra٢",
    5: "Ju١",
    6: "Ju٢",
    7: "Raj",
    8: "Shb",
    9: "Ram",
    10: "Shw",
    11: "Duq",
    12: "Duh",
}

# name fragments as spelled by the common providers, checked in order
_HIJRI_NAME_PATTERNS: tuple[tuple[tuple[str, ...], str], ...] = (
    (("muharram",), "Muh"),
    (("safar",), "Saf"),
    (("rabi al-awwal", "rabi' al-awwal", "rabie al awwal", "rabi ul awwal"), "Ra١"),
    (("rabi al-thani", "rabi' al-thani", "rabie al-thani", "rabi ul thani"), "Ra٢"),
    (("jumada al-ula", "jumada al-awwal", "jumada ul-ula"), "Ju١"),
    (("jumada al-akhirah", "jumada al-thani", "jumada ath-thaniyah"), "Ju٢"),
    (("rajab",), "Raj"),
    (("sha'ban", "shaban", "shaaban"), "Shb"),
    (("ramadan",), "Ram"),
    (("shawwal",), "Shw"),
    (("dhu al-qa'dah", "dhul qadah", "dhu'l-qa'dah", "dhul-qadah"), "Duq"),
    (("dhu al-hijjah", "dhul hijjah", "dhu'l-hijjah", "dhul-hijjah"), "Duh"),
)


def round_half_away(value: float) -> int:
    """Round to the nearest integer, halves away from zero (2.5 -> 3, -2.5 -> -3)."""
    return int(math.copysign(math.floor(abs(value) + 0.5), value))


def minutes_to_hhmm(minutes: int | float) -> str:
    """Render a minute count as ``HH:MM`` using floor division."""
    hours, mins = divmod(int(math.floor(minutes)), 60)
    return f"{hours:02d}:{mins:02d}"


def hhmm_to_minutes(value: str) -> int:
    hours, minutes = value.split(":")
    return int(hours) * 60 + int(minutes)


def time_to_minutes(raw: str) -> int:
    """Minutes since midnight for a raw provider string such as ``05:47 (EEST)``."""
    return hhmm_to_minutes(raw.split(" ")[0])


def ordinal(number: int) -> str:
    if (number % 100) // 10 == 1:
        suffix = "th"
    else:
        suffix = {1: "st", 2: "nd", 3: "rd"}.get(number % 10, "th")
    return f"{number}{suffix}"


def parse_display_date(value: str) -> datetime | None:
    for fmt in _DATE_FORMATS:
        try:
            return datetime.strptime(value.strip(), fmt)
        except ValueError:
            continue
    return None


def format_date_with_ordinal(value: str | None) -> str:
    """Return labels such as ``Jan 1st`` or ``Invalid Date`` for unknown formats."""
    if not value:
        return INVALID_DATE
    parsed = parse_display_date(value)
    if parsed is None:
        return INVALID_DATE
    return f"{parsed.strftime('%b')} {ordinal(parsed.day)}"


def abbreviated_hijri_month(month_name: str | None, month_number: int | str | None = None) -> str:
    if month_number not in (None, ""):
        try:
            return _HIJRI_ABBREVIATIONS.get(int(month_number), "")
        except (TypeError, ValueError):
            pass

    if month_name:
        lowered = month_name.lower()
        for fragments, abbreviation in _HIJRI_NAME_PATTERNS:
            if any(fragment in lowered for fragment in fragments):
                return abbreviation

    return month_name or ""


def format_hijri_date_with_ordinal(
    day: int | str | None,
    month_name: str | None,
    month_number: int | str | None = None,
) -> str:
    if day in (None, ""):
        return ""
    try:
        day_number = int(day)
    except (TypeError, ValueError):
        return ""
    return f"{abbreviated_hijri_month(month_name, month_number)} {ordinal(day_number)}"


def strip_year(readable_date: str) -> str:
    """``01 Jan 2024`` -> ``01 Jan``."""
    head, _, tail = readable_date.rpartition(" ")
    if head and len(tail) == 4 and tail.isdigit():
        return head
    return readable_date


def is_ramadan(hijri_month: int | None) -> bool:
    return hijri_month == RAMADAN_MONTH
