"""Pytest configuration and shared fixtures."""

from __future__ import annotations

import asyncio
from datetime import datetime, time
from decimal import Decimal

import pytest

from app.application.ports.currency_lookup import CurrencyLookup
from app.application.ports.office_store import OfficeStore
from app.domain.entities.currency import Currency
from app.domain.entities.office import Office
from app.domain.entities.office_rate import OfficeRate
from app.domain.entities.search import NearbyCandidate, NearbyQueryResult
from app.domain.entities.working_hour import WorkingHour
from app.domain.policies.pagination import paginate
from app.domain.policies.ranking import rank_offices
from app.domain.value_objects.enums import DayOfWeek
from app.domain.value_objects.geo_point import GeoPoint

MAD = Currency(id=1, code="MAD", name="Moroccan Dirham", symbol="DH")
USD = Currency(id=2, code="USD", name="US Dollar", symbol="$")
EUR = Currency(id=3, code="EUR", name="Euro", symbol="€")

CASABLANCA = GeoPoint(latitude=33.5731, longitude=-7.5898)

# Monday 2026-10-19, 10:30 local
MONDAY_MORNING = datetime(2026, 10, 19, 10, 30)


# ─── In-memory fakes ────────────────────────────────────────────────


class FakeCurrencyLookup(CurrencyLookup):
    def __init__(self, currencies=(MAD, USD, EUR), reference_code: str | None = "MAD"):
        self.currencies = {c.code: c for c in currencies}
        self._reference_code = reference_code

    async def find_by_code(self, code):
        return self.currencies.get(code.upper())

    async def find_by_id(self, currency_id):
        return next((c for c in self.currencies.values() if c.id == currency_id), None)

    async def get_reference_currency(self):
        if self._reference_code is None:
            return None
        return self.currencies.get(self._reference_code)


class FakeOfficeStore(OfficeStore):
    """Applies the same filters as the SQL store over a list of offices."""

    def __init__(self, offices: list[Office], delay: float = 0.0):
        self.offices = offices
        self.delay = delay
        self.calls = []

    async def query_nearby(self, center, radius_km, filters, page, limit):
        self.calls.append((center, radius_km, filters, page, limit))
        if self.delay:
            await asyncio.sleep(self.delay)

        matched = []
        for office in self.offices:
            if office.location is None:
                continue
            distance = center.haversine_km(office.location)
            if distance > radius_km or not self._matches(office, filters):
                continue
            matched.append(NearbyCandidate(office=office, distance_km=distance))

        ordered = rank_offices(matched, filters.sort)
        window = paginate(ordered, len(ordered), page, limit)
        return NearbyQueryResult(rows=window.items, total_count=len(ordered))

    @staticmethod
    def _matches(office, filters) -> bool:
        for flag, value in (
            (filters.is_active, office.is_active),
            (filters.is_verified, office.is_verified),
            (filters.is_featured, office.is_featured),
        ):
            if flag is not None and flag != value:
                return False

        rates = office.active_rates()
        if filters.available_currencies and not any(
            r.target_currency.code in filters.available_currencies for r in rates
        ):
            return False
        if filters.base_currency_id is not None or filters.target_currency_id is not None:
            return any(
                (filters.base_currency_id is None or r.base_currency.id == filters.base_currency_id)
                and (filters.target_currency_id is None or r.target_currency.id == filters.target_currency_id)
                for r in rates
            )
        return True


# ─── Builders ────────────────────────────────────────────────────────


def make_rate(office_id, target=USD, buy="10.15", sell="10.25", active=True) -> OfficeRate:
    return OfficeRate(
        id=None, office_id=office_id, base_currency=MAD, target_currency=target,
        buy_rate=Decimal(buy), sell_rate=Decimal(sell), is_active=active,
    )


def make_weekday_hours(office_id, start=time(9, 0), end=time(18, 0)) -> list[WorkingHour]:
    return [
        WorkingHour(
            id=None, office_id=office_id, day_of_week=day, is_active=True,
            from_time=start, to_time=end,
        )
        for day in (
            DayOfWeek.MONDAY, DayOfWeek.TUESDAY, DayOfWeek.WEDNESDAY,
            DayOfWeek.THURSDAY, DayOfWeek.FRIDAY,
        )
    ]


def make_office(office_id, lat_offset=0.0, rates=None, hours=None, **kwargs) -> Office:
    """Office north of Casablanca; 0.01 deg of latitude is about 1.11 km."""
    return Office(
        id=office_id,
        name=f"Bureau {office_id}",
        address=f"{office_id} Bd Mohammed V",
        location=GeoPoint(
            latitude=CASABLANCA.latitude + lat_offset,
            longitude=CASABLANCA.longitude,
        ),
        rates=rates if rates is not None else [make_rate(office_id)],
        working_hours=hours if hours is not None else make_weekday_hours(office_id),
        city="Casablanca",
        country="Morocco",
        **kwargs,
    )


# ─── Fixtures ────────────────────────────────────────────────────────


@pytest.fixture
def currency_lookup():
    return FakeCurrencyLookup()


@pytest.fixture
def casablanca_offices():
    """Three nearby offices with different USD rates and one far away."""
    return [
        make_office(1, 0.01, rates=[make_rate(1, buy="10.15", sell="10.25")]),
        make_office(2, 0.02, rates=[make_rate(2, buy="10.20", sell="10.30")]),
        make_office(
            3, 0.005,
            rates=[make_rate(3, buy="10.10", sell="10.20")],
            hours=make_weekday_hours(3, start=time(14, 0), end=time(20, 0)),
        ),
        make_office(4, 3.0),
    ]


@pytest.fixture
def office_store(casablanca_offices):
    return FakeOfficeStore(casablanca_offices)
