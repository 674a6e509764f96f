"""Tests for FindNearbyOfficesUseCase with in-memory fakes."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from decimal import Decimal

import pytest

from app.application.ports.office_store import OfficeStore
from app.application.use_cases.find_nearby_offices import FindNearbyOfficesUseCase
from app.domain.entities.search import SearchFilter
from app.domain.errors import (
    CurrencyNotFoundError,
    InvalidSearchParametersError,
    ReferenceCurrencyUnconfiguredError,
    SearchTimeoutError,
    StoreUnavailableError,
    UnsupportedCrossCurrencyPairError,
)
from app.domain.value_objects.enums import SortPreference
from app.domain.value_objects.geo_point import GeoPoint
from conftest import (
    CASABLANCA,
    EUR,
    MAD,
    MONDAY_MORNING,
    USD,
    FakeCurrencyLookup,
    FakeOfficeStore,
    make_office,
    make_rate,
)


class BrokenOfficeStore(OfficeStore):
    async def query_nearby(self, center, radius_km, filters, page, limit):
        raise StoreUnavailableError("failedToFindNearbyOffices")


def _use_case(currency_lookup, office_store, **kwargs):
    kwargs.setdefault("clock", lambda: MONDAY_MORNING)
    return FindNearbyOfficesUseCase(
        currency_lookup=currency_lookup, office_store=office_store, **kwargs
    )


def _search(**kwargs) -> SearchFilter:
    kwargs.setdefault("radius_km", 5.0)
    return SearchFilter(center=CASABLANCA, **kwargs)


def _ids(result):
    return [r.office.id for r in result.offices]


# ─── Spatial search and pagination ───────────────────────────────────


@pytest.mark.asyncio
async def test_returns_offices_within_radius_nearest_first(currency_lookup, office_store):
    uc = _use_case(currency_lookup, office_store)

    result = await uc.execute(_search())

    assert _ids(result) == [3, 1, 2]
    assert result.total_offices_in_area == 3
    assert all(r.distance_km <= 5.0 for r in result.offices)
    assert result.current_page == 1
    assert result.total_pages == 1
    assert result.has_more is False
    assert result.offices_in_page == 3


@pytest.mark.asyncio
async def test_total_does_not_depend_on_page(currency_lookup, office_store):
    uc = _use_case(currency_lookup, office_store)

    first = await uc.execute(_search(page=1, limit=2))
    second = await uc.execute(_search(page=2, limit=2))
    beyond = await uc.execute(_search(page=5, limit=2))

    assert _ids(first) == [3, 1]
    assert first.has_more is True
    assert _ids(second) == [2]
    assert second.has_more is False
    assert beyond.offices == []
    assert first.total_offices_in_area == second.total_offices_in_area == beyond.total_offices_in_area == 3
    assert first.total_pages == 2


@pytest.mark.asyncio
async def test_nothing_in_radius(currency_lookup):
    uc = _use_case(currency_lookup, FakeOfficeStore([make_office(1, 1.0)]))

    result = await uc.execute(_search(radius_km=1.0))

    assert result.offices == []
    assert result.total_offices_in_area == 0
    assert result.total_pages == 0
    assert result.has_more is False


@pytest.mark.asyncio
async def test_status_filters_are_pushed_down(currency_lookup):
    store = FakeOfficeStore([
        make_office(1, 0.01, is_verified=True),
        make_office(2, 0.02, is_verified=False),
    ])
    uc = _use_case(currency_lookup, store)

    result = await uc.execute(_search(is_verified=True))

    assert _ids(result) == [1]
    assert store.calls[0][2].is_verified is True
    assert store.calls[0][2].is_featured is None


@pytest.mark.asyncio
async def test_available_currencies_filter(currency_lookup):
    store = FakeOfficeStore([
        make_office(1, 0.01, rates=[make_rate(1, target=USD)]),
        make_office(2, 0.02, rates=[make_rate(2, target=EUR)]),
    ])
    uc = _use_case(currency_lookup, store)

    result = await uc.execute(_search(available_currencies=("EUR",)))

    assert _ids(result) == [2]


@pytest.mark.asyncio
async def test_popular_sort_is_forwarded(currency_lookup):
    store = FakeOfficeStore([
        make_office(1, 0.01),
        make_office(2, 0.02, is_featured=True),
    ])
    uc = _use_case(currency_lookup, store)

    result = await uc.execute(_search(sort=SortPreference.POPULAR))

    assert _ids(result) == [2, 1]
    assert store.calls[0][2].sort == SortPreference.POPULAR


# ─── Currency resolution and rates ───────────────────────────────────


@pytest.mark.asyncio
async def test_sell_values_and_best_is_lowest(currency_lookup, office_store):
    """1000 MAD → USD; best office asks the fewest reference units."""
    uc = _use_case(currency_lookup, office_store)

    result = await uc.execute(
        _search(base_currency="MAD", target_currency="USD", amount=Decimal("1000"))
    )

    values = {r.office.id: r.equivalent_value for r in result.offices}
    assert values == {1: Decimal("97.56"), 2: Decimal("97.09"), 3: Decimal("98.04")}
    assert [r.office.id for r in result.offices if r.best_office] == [2]
    assert all(r.target_currency == USD for r in result.offices)


@pytest.mark.asyncio
async def test_buy_values_use_swapped_pair(currency_lookup, office_store):
    """100 USD → MAD; the rate row is MAD/USD and the buy side applies."""
    uc = _use_case(currency_lookup, office_store)

    result = await uc.execute(
        _search(base_currency="usd", target_currency="MAD", amount=Decimal("100"))
    )

    values = {r.office.id: r.equivalent_value for r in result.offices}
    assert values == {1: Decimal("1015.00"), 2: Decimal("1020.00"), 3: Decimal("1010.00")}
    assert [r.office.id for r in result.offices if r.best_office] == [2]
    assert office_store.calls[0][2].base_currency_id == MAD.id
    assert office_store.calls[0][2].target_currency_id == USD.id
    assert all(r.target_currency == MAD for r in result.offices)


@pytest.mark.asyncio
async def test_amount_defaults_to_one(currency_lookup, office_store):
    uc = _use_case(currency_lookup, office_store)

    result = await uc.execute(_search(base_currency="MAD", target_currency="USD"))

    office_1 = next(r for r in result.offices if r.office.id == 1)
    assert office_1.equivalent_value == Decimal("0.10")


@pytest.mark.asyncio
async def test_currency_ids_are_accepted(currency_lookup, office_store):
    uc = _use_case(currency_lookup, office_store)

    result = await uc.execute(
        _search(base_currency=str(MAD.id), target_currency=str(USD.id), amount=Decimal("1000"))
    )

    assert result.offices[0].equivalent_value is not None


@pytest.mark.asyncio
async def test_no_currencies_means_no_values(currency_lookup, office_store):
    uc = _use_case(currency_lookup, office_store)

    result = await uc.execute(_search())

    assert all(r.equivalent_value is None for r in result.offices)
    assert not any(r.best_office for r in result.offices)
    assert office_store.calls[0][2].base_currency_id == MAD.id
    assert office_store.calls[0][2].target_currency_id is None


@pytest.mark.asyncio
async def test_unknown_currency(currency_lookup, office_store):
    uc = _use_case(currency_lookup, office_store)

    with pytest.raises(CurrencyNotFoundError) as exc:
        await uc.execute(_search(base_currency="MAD", target_currency="XYZ"))

    assert exc.value.field == "targetCurrency"
    assert office_store.calls == []
    assert exc.value.message == "Currency with code 'XYZ' not found"


@pytest.mark.asyncio
async def test_unknown_currency_id(currency_lookup, office_store):
    uc = _use_case(currency_lookup, office_store)

    with pytest.raises(CurrencyNotFoundError) as exc:
        await uc.execute(_search(base_currency="99", target_currency="MAD"))

    assert exc.value.field == "baseCurrency"
    assert exc.value.message == "Currency with id 99 not found"


@pytest.mark.asyncio
async def test_cross_pair_is_rejected(currency_lookup, office_store):
    uc = _use_case(currency_lookup, office_store)

    with pytest.raises(UnsupportedCrossCurrencyPairError):
        await uc.execute(_search(base_currency="USD", target_currency="EUR"))

    assert office_store.calls == []


@pytest.mark.asyncio
async def test_missing_reference_currency(office_store):
    uc = _use_case(FakeCurrencyLookup(reference_code=None), office_store)

    with pytest.raises(ReferenceCurrencyUnconfiguredError):
        await uc.execute(_search(base_currency="MAD", target_currency="USD"))


# ─── Working hours ───────────────────────────────────────────────────


@pytest.mark.asyncio
async def test_open_flags_and_today_hours(currency_lookup, office_store):
    uc = _use_case(currency_lookup, office_store)

    result = await uc.execute(_search())

    open_by_id = {r.office.id: r.is_currently_open for r in result.offices}
    assert open_by_id == {1: True, 2: True, 3: False}
    assert all(r.today_working_hours is not None for r in result.offices)


@pytest.mark.asyncio
async def test_only_open_now_drops_closed_offices(currency_lookup, office_store):
    uc = _use_case(currency_lookup, office_store)

    result = await uc.execute(_search(only_open_now=True))

    assert _ids(result) == [1, 2]
    assert result.total_offices_in_area == 3


@pytest.mark.asyncio
async def test_aware_clock_is_read_in_office_zone(currency_lookup, office_store):
    """12:30 UTC is 14:30 at UTC+2, when office 3 has opened."""
    uc = _use_case(
        currency_lookup,
        office_store,
        clock=lambda: datetime(2026, 10, 19, 12, 30, tzinfo=timezone.utc),
        office_tz=timezone(timedelta(hours=2)),
    )

    result = await uc.execute(_search())

    office_3 = next(r for r in result.offices if r.office.id == 3)
    assert office_3.is_currently_open is True


# ─── Failures ────────────────────────────────────────────────────────


@pytest.mark.asyncio
async def test_invalid_search_never_reaches_store(currency_lookup, office_store):
    uc = _use_case(currency_lookup, office_store)

    with pytest.raises(InvalidSearchParametersError) as exc:
        await uc.execute(SearchFilter(center=GeoPoint(95.0, 0.0), radius_km=5.0))

    assert exc.value.field == "latitude"
    assert office_store.calls == []


@pytest.mark.asyncio
async def test_store_failure_propagates(currency_lookup):
    uc = _use_case(currency_lookup, BrokenOfficeStore())

    with pytest.raises(StoreUnavailableError):
        await uc.execute(_search())


@pytest.mark.asyncio
async def test_slow_store_times_out(currency_lookup, casablanca_offices):
    store = FakeOfficeStore(casablanca_offices, delay=1.0)
    uc = _use_case(currency_lookup, store, query_timeout=0.01)

    with pytest.raises(SearchTimeoutError):
        await uc.execute(_search())
