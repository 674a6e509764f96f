"""CurrencyDirectionPolicy — decide which side of a two-way rate applies.

Rates are stored as (reference → foreign). A client converting reference
currency into foreign currency is served by the office's SELL side; a client
converting foreign currency into the reference currency is served by the BUY
side, and the pair must be swapped to match the stored orientation.
"""

from __future__ import annotations

from app.domain.entities.search import ResolvedCurrencyPair
from app.domain.errors import UnsupportedCrossCurrencyPairError
from app.domain.value_objects.enums import RateDirection


def resolve_direction(
    base_id: int | None,
    target_id: int | None,
    reference_id: int,
) -> ResolvedCurrencyPair:
    """Resolve already-looked-up currency ids into rate-table orientation.

    Args:
        base_id: id of the currency the client hands over (None if absent).
        target_id: id of the currency the client wants (None if absent).
        reference_id: id of the reference currency.

    Returns:
        ResolvedCurrencyPair with the direction set, or an unconstrained pair
        anchored on the reference currency when no currency was requested.

    Raises:
        UnsupportedCrossCurrencyPairError: if neither side is the reference.
    """
    if base_id is None and target_id is None:
        return ResolvedCurrencyPair(base_id=reference_id, target_id=None, direction=None)

    if base_id == reference_id:
        return ResolvedCurrencyPair(
            base_id=base_id, target_id=target_id, direction=RateDirection.SELL
        )

    if target_id == reference_id:
        return ResolvedCurrencyPair(
            base_id=target_id, target_id=base_id, direction=RateDirection.BUY
        )

    raise UnsupportedCrossCurrencyPairError(
        "At least one currency must be the reference currency for exchange operations"
    )
