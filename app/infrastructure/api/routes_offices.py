"""Office endpoints — nearby search with currency-aware ranking."""

from __future__ import annotations

import logging
from decimal import Decimal

from fastapi import APIRouter, Depends, HTTPException, Query

from app.application.use_cases.find_nearby_offices import FindNearbyOfficesUseCase
from app.config import settings
from app.domain.entities.currency import Currency
from app.domain.entities.search import NearbySearchResult, RankedOffice, SearchFilter
from app.domain.entities.working_hour import WorkingHour
from app.domain.errors import (
    CurrencyNotFoundError,
    DomainError,
    InvalidSearchParametersError,
    ReferenceCurrencyUnconfiguredError,
    SearchTimeoutError,
    StoreUnavailableError,
    UnsupportedCrossCurrencyPairError,
)
from app.domain.policies.ranking import resolve_sort_preference
from app.domain.value_objects.geo_point import GeoPoint
from app.infrastructure.api.dependencies import get_find_nearby_offices_uc

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/offices", tags=["offices"])

_ERROR_STATUS: dict[type[DomainError], int] = {
    InvalidSearchParametersError: 400,
    CurrencyNotFoundError: 400,
    UnsupportedCrossCurrencyPairError: 400,
    ReferenceCurrencyUnconfiguredError: 500,
    StoreUnavailableError: 503,
    SearchTimeoutError: 504,
}


def parse_currency_list(raw: str | None) -> tuple[str, ...]:
    """Split a comma-separated currency list, dropping blanks."""
    if not raw:
        return ()
    return tuple(part.strip().upper() for part in raw.split(",") if part.strip())


@router.get("/nearby")
async def find_nearby_offices(
    latitude: float = Query(...),
    longitude: float = Query(...),
    radius_in_km: float = Query(..., alias="radiusInKm"),
    base_currency: str | None = Query(None, alias="baseCurrency"),
    target_currency: str | None = Query(None, alias="targetCurrency"),
    target_currency_rate: Decimal | None = Query(None, alias="targetCurrencyRate"),
    available_currencies: str | None = Query(None, alias="availableCurrencies"),
    is_active: bool | None = Query(None, alias="isActive"),
    is_verified: bool | None = Query(None, alias="isVerified"),
    is_featured: bool | None = Query(None, alias="isFeatured"),
    is_open: bool | None = Query(None, alias="isOpen"),
    show_only_open_now: bool = Query(False, alias="showOnlyOpenNow"),
    nearest: bool = Query(False),
    is_popular: bool = Query(False, alias="isPopular"),
    most_searched: bool = Query(False, alias="mostSearched"),
    page: int = Query(1),
    limit: int | None = Query(None),
    uc: FindNearbyOfficesUseCase = Depends(get_find_nearby_offices_uc),
):
    """Paginated nearby offices with equivalent values and a best-office flag."""
    search = SearchFilter(
        center=GeoPoint(latitude=latitude, longitude=longitude),
        radius_km=radius_in_km,
        base_currency=base_currency,
        target_currency=target_currency,
        amount=target_currency_rate,
        available_currencies=parse_currency_list(available_currencies),
        is_active=is_active,
        is_verified=is_verified,
        is_featured=is_featured,
        only_open_now=show_only_open_now or bool(is_open),
        sort=resolve_sort_preference(nearest, is_popular, most_searched),
        page=page,
        limit=limit if limit is not None else settings.default_page_size,
    )

    try:
        result = await uc.execute(search)
    except DomainError as e:
        status = _ERROR_STATUS.get(type(e), 500)
        if status >= 500:
            logger.error("Nearby search failed: %s", e.message)
        raise HTTPException(
            status_code=status,
            detail={"status": status, "errors": {e.field: e.message}},
        )

    return serialize_search_result(result)


def serialize_search_result(result: NearbySearchResult) -> dict:
    return {
        "offices": [_serialize_office(o) for o in result.offices],
        "officesInPage": result.offices_in_page,
        "totalOfficesInArea": result.total_offices_in_area,
        "currentPage": result.current_page,
        "totalPages": result.total_pages,
        "hasMore": result.has_more,
    }


def _format_time(t) -> str | None:
    return t.strftime("%H:%M") if t else None


def _serialize_working_hour(wh: WorkingHour | None) -> dict | None:
    if wh is None:
        return None
    return {
        "id": wh.id,
        "dayOfWeek": wh.day_of_week.value,
        "isActive": wh.is_active,
        "fromTime": _format_time(wh.from_time),
        "toTime": _format_time(wh.to_time),
        "hasBreak": wh.has_break,
        "breakFromTime": _format_time(wh.break_from_time),
        "breakToTime": _format_time(wh.break_to_time),
    }


def _serialize_currency(c: Currency | None) -> dict | None:
    if c is None:
        return None
    return {"id": c.id, "code": c.code, "name": c.name, "symbol": c.symbol}


def _serialize_office(r: RankedOffice) -> dict:
    """Convert a RankedOffice to an API response dict."""
    o = r.office
    return {
        "id": o.id,
        "officeName": o.name,
        "address": o.address,
        "location": (
            {"type": "Point", "coordinates": [o.location.longitude, o.location.latitude]}
            if o.location
            else None
        ),
        "city": o.city,
        "country": o.country,
        "state": o.state,
        "slug": o.slug,
        "email": o.email,
        "primaryPhoneNumber": o.primary_phone_number,
        "secondaryPhoneNumber": o.secondary_phone_number,
        "thirdPhoneNumber": o.third_phone_number,
        "whatsappNumber": o.whatsapp_number,
        "isActive": o.is_active,
        "isVerified": o.is_verified,
        "isFeatured": o.is_featured,
        "createdAt": o.created_at.isoformat() if o.created_at else None,
        "rates": [
            {
                "id": rate.id,
                "baseCurrency": _serialize_currency(rate.base_currency),
                "targetCurrency": _serialize_currency(rate.target_currency),
                "buyRate": float(rate.buy_rate),
                "sellRate": float(rate.sell_rate),
                "isActive": rate.is_active,
            }
            for rate in o.rates
        ],
        "workingHours": [_serialize_working_hour(wh) for wh in o.working_hours],
        "distanceInKm": r.distance_km,
        "equivalentValue": float(r.equivalent_value) if r.equivalent_value is not None else None,
        "bestOffice": r.best_office,
        "isCurrentlyOpen": r.is_currently_open,
        "todayWorkingHours": _serialize_working_hour(r.today_working_hours),
        "targetCurrency": _serialize_currency(r.target_currency),
    }
