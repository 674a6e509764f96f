"""RankingPolicy — sort nearby offices and pick the best one for the client."""

from __future__ import annotations

from datetime import datetime

from app.domain.entities.search import RankedOffice
from app.domain.value_objects.enums import RateDirection, SortPreference

_EPOCH = datetime.min


def resolve_sort_preference(
    nearest: bool = False,
    popular: bool = False,
    most_searched: bool = False,
) -> SortPreference:
    """Nearest wins over popular, popular over most-searched."""
    if nearest:
        return SortPreference.NEAREST
    if popular:
        return SortPreference.POPULAR
    if most_searched:
        return SortPreference.MOST_SEARCHED
    return SortPreference.DEFAULT


def rank_offices(
    candidates: list[RankedOffice],
    preference: SortPreference,
) -> list[RankedOffice]:
    """Return a new list ordered by the preference. The sort is stable."""
    if preference in (SortPreference.POPULAR, SortPreference.MOST_SEARCHED):
        # Popular puts the oldest (most established) offices first,
        # most-searched the newest (trending) ones.
        ordered = sorted(
            candidates,
            key=lambda c: c.office.created_at or _EPOCH,
            reverse=preference == SortPreference.MOST_SEARCHED,
        )
        ordered.sort(key=lambda c: (not c.office.is_featured, not c.office.is_verified))
        return ordered
    return sorted(candidates, key=lambda c: c.distance_km)


def select_best_office(
    candidates: list[RankedOffice],
    direction: RateDirection | None,
) -> RankedOffice | None:
    """Pick the office most favourable to the client.

    BUY: highest equivalent value (client receives the most reference units).
    SELL: lowest equivalent value (client pays the fewest reference units).
    Offices without an equivalent value never qualify; ties keep the first
    candidate in the current order.
    """
    if direction is None:
        return None

    best: RankedOffice | None = None
    for candidate in candidates:
        if candidate.equivalent_value is None:
            continue
        if best is None:
            best = candidate
        elif direction == RateDirection.BUY and candidate.equivalent_value > best.equivalent_value:
            best = candidate
        elif direction == RateDirection.SELL and candidate.equivalent_value < best.equivalent_value:
            best = candidate
    return best
