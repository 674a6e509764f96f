"""CSV value normalization — BOM, accents in headers, hour ranges, coordinates."""

from __future__ import annotations

import re
import unicodedata
from dataclasses import dataclass

_INTERVAL_RE = re.compile(r"(\d{1,2}[:h]\d{2})\s*[–—-]\s*(\d{1,2}[:h]\d{2})")
_CLOSED_WORDS = {"fermé", "ferme", "closed", "-"}


@dataclass(frozen=True)
class DayHours:
    """One weekday cell of an office CSV, as "HH:MM" strings."""

    is_active: bool
    from_time: str | None = None
    to_time: str | None = None
    has_break: bool = False
    break_from_time: str | None = None
    break_to_time: str | None = None


def normalize_column_name(name: str) -> str:
    """Normalize a CSV column name.

    - Removes BOM characters (\\ufeff)
    - Strips accents ("Téléphone" → "telephone")
    - Replaces runs of spaces / non-breaking spaces with a single underscore
    - Lowercases and drops anything that is not alphanumeric or underscore
    """
    name = name.replace("\ufeff", "").strip()
    name = unicodedata.normalize("NFKD", name)
    name = "".join(ch for ch in name if not unicodedata.combining(ch))
    name = re.sub(r"[\s\u00a0]+", "_", name)
    name = name.lower()
    return re.sub(r"[^\w]", "", name)


def clean_string(value: str | None) -> str | None:
    """Strip whitespace and return None for empty strings."""
    if value is None:
        return None
    value = value.strip()
    return value if value else None


def parse_float(value: str | None) -> float | None:
    """Parse a float that may use a decimal comma."""
    value = clean_string(value)
    if value is None:
        return None
    try:
        return float(value.replace(",", "."))
    except ValueError:
        return None


def parse_coordinates(raw: str | None) -> tuple[float | None, float | None]:
    """Split a "lat,long[,zoom]" cell."""
    raw = clean_string(raw)
    if raw is None:
        return None, None
    parts = [p.strip() for p in raw.split(",")]
    if len(parts) < 2:
        return None, None
    return parse_float(parts[0]), parse_float(parts[1])


def _hhmm(token: str) -> str:
    hours, minutes = re.split(r"[:h]", token)
    return f"{int(hours):02d}:{minutes}"


def parse_day_hours(raw: str | None) -> DayHours:
    """Parse a weekday cell such as "09:00–19:30" or "09:00-13:00, 15:00-19:00".

    Two intervals become one working window with a break between them.
    Empty or "Fermé" cells are inactive days.
    """
    raw = clean_string(raw)
    if raw is None or raw.lower() in _CLOSED_WORDS:
        return DayHours(is_active=False)

    intervals = _INTERVAL_RE.findall(raw)
    if not intervals:
        return DayHours(is_active=False)

    first_start, first_end = (_hhmm(t) for t in intervals[0])
    if len(intervals) == 1:
        return DayHours(is_active=True, from_time=first_start, to_time=first_end)

    last_start, last_end = (_hhmm(t) for t in intervals[-1])
    return DayHours(
        is_active=True,
        from_time=first_start,
        to_time=last_end,
        has_break=True,
        break_from_time=first_end,
        break_to_time=last_start,
    )


def slugify(value: str) -> str:
    """URL slug from an office name."""
    value = unicodedata.normalize("NFKD", value)
    value = "".join(ch for ch in value if not unicodedata.combining(ch))
    value = re.sub(r"[^\w\s-]", "", value.lower())
    return re.sub(r"[\s_-]+", "-", value).strip("-")
