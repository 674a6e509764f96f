"""CSV loader — reads exchange office listings."""

from __future__ import annotations

import csv
import logging
from pathlib import Path

from app.adapters.csv_loader.normalizer import (
    DayHours,
    clean_string,
    normalize_column_name,
    parse_coordinates,
    parse_day_hours,
    parse_float,
)
from app.domain.value_objects.enums import DayOfWeek

logger = logging.getLogger(__name__)

# Weekday columns as they appear in the French listings
DAY_COLUMNS: dict[DayOfWeek, tuple[str, ...]] = {
    DayOfWeek.MONDAY: ("lundi", "monday"),
    DayOfWeek.TUESDAY: ("mardi", "tuesday"),
    DayOfWeek.WEDNESDAY: ("mercredi", "wednesday"),
    DayOfWeek.THURSDAY: ("jeudi", "thursday"),
    DayOfWeek.FRIDAY: ("vendredi", "friday"),
    DayOfWeek.SATURDAY: ("samedi", "saturday"),
    DayOfWeek.SUNDAY: ("dimanche", "sunday"),
}


def _sniff_dialect(sample: str) -> type[csv.Dialect]:
    """Pick the delimiter (comma/semicolon/tab) that splits the header row most."""
    if not sample:
        return csv.excel

    first_line = sample.splitlines()[0]
    counts = {d: first_line.count(d) for d in (";", ",", "\t")}
    best_delim = max(counts, key=counts.get)
    if counts[best_delim] == 0:
        return csv.excel

    class DynamicDialect(csv.excel):
        delimiter = best_delim

    return DynamicDialect


def _read_csv(file_path: Path, encoding: str = "utf-8-sig") -> list[dict[str, str | None]]:
    """Read a CSV file with BOM handling and column normalization.

    Args:
        file_path: path to the CSV file.
        encoding: file encoding (utf-8-sig strips BOM automatically).

    Returns:
        List of dicts keyed by normalized column names.
    """
    with open(file_path, encoding=encoding, newline="") as f:
        sample = f.read(4096)
        f.seek(0)
        reader = csv.DictReader(f, dialect=_sniff_dialect(sample))
        if reader.fieldnames is None:
            raise ValueError(f"CSV file {file_path} has no header row")

        col_map = {col: normalize_column_name(col) for col in reader.fieldnames}
        rows = [
            {col_map[k]: clean_string(v) for k, v in raw_row.items() if k is not None}
            for raw_row in reader
        ]

    logger.info("Loaded %d rows from %s (columns: %s)", len(rows), file_path.name, list(col_map.values()))
    return rows


def _first(row: dict, *keys: str) -> str | None:
    for key in keys:
        value = row.get(key)
        if value:
            return value
    return None


def _day_hours(row: dict) -> dict[DayOfWeek, DayHours]:
    return {day: parse_day_hours(_first(row, *columns)) for day, columns in DAY_COLUMNS.items()}


def load_offices(file_path: Path) -> list[dict]:
    """Load and normalize an exchange office listing.

    Expected columns (after normalization):
        ville/city, bureau_de_change/nom/name, adresse/address, telephone/phone,
        whatsapp, phone2, email, latitude + longitude or coordinates,
        lundi .. dimanche
    Rows without a name are skipped.
    """
    offices = []
    for row in _read_csv(file_path):
        name = _first(row, "bureau_de_change", "nom", "name")
        if not name:
            logger.debug("Skipping office row without a name: %s", row)
            continue

        latitude = parse_float(row.get("latitude"))
        longitude = parse_float(row.get("longitude"))
        if latitude is None or longitude is None:
            latitude, longitude = parse_coordinates(row.get("coordinates"))

        offices.append({
            "name": name,
            "address": _first(row, "adresse", "address") or "",
            "city": _first(row, "ville", "city"),
            "primary_phone_number": _first(row, "telephone", "phone"),
            "secondary_phone_number": row.get("phone2"),
            "whatsapp_number": row.get("whatsapp"),
            "email": _first(row, "email", "site_webemail"),
            "latitude": latitude,
            "longitude": longitude,
            "working_hours": _day_hours(row),
        })

    logger.info("Parsed %d offices", len(offices))
    return offices
