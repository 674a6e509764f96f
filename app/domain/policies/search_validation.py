"""SearchValidationPolicy — range checks for a nearby search."""

from __future__ import annotations

from app.domain.entities.search import SearchFilter
from app.domain.errors import InvalidSearchParametersError

MAX_RADIUS_KM = 1000.0
MAX_PAGE_SIZE = 100
# Equivalent values must fit a JSON float
MAX_AMOUNT_EXPONENT = 100


def validate_search_filter(search: SearchFilter) -> None:
    """Raise InvalidSearchParametersError naming the first offending field."""
    if not -90.0 <= search.center.latitude <= 90.0:
        raise InvalidSearchParametersError(
            "latitudeMustBeBetweenMinus90And90", field="latitude"
        )

    if not -180.0 <= search.center.longitude <= 180.0:
        raise InvalidSearchParametersError(
            "longitudeMustBeBetweenMinus180And180", field="longitude"
        )

    if not 0 < search.radius_km <= MAX_RADIUS_KM:
        raise InvalidSearchParametersError(
            "radiusMustBeBetween0And1000Km", field="radiusInKm"
        )

    if not 1 <= search.limit <= MAX_PAGE_SIZE:
        raise InvalidSearchParametersError("limitMustBeBetween1And100", field="limit")

    if search.page < 1:
        raise InvalidSearchParametersError("pageMustBeGreaterThan0", field="page")

    if search.amount is not None:
        if not search.amount.is_finite() or search.amount <= 0:
            raise InvalidSearchParametersError(
                "targetCurrencyRateMustBePositive", field="targetCurrencyRate"
            )
        if search.amount.adjusted() >= MAX_AMOUNT_EXPONENT:
            raise InvalidSearchParametersError(
                "targetCurrencyRateTooLarge", field="targetCurrencyRate"
            )
