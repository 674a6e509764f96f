"""SQLAlchemy repository implementations."""

from __future__ import annotations

import logging
import math
from datetime import time
from decimal import Decimal

from sqlalchemy import and_, func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from app.adapters.persistence.models import (
    CurrencyModel,
    OfficeModel,
    OfficeRateModel,
    WorkingHourModel,
)
from app.application.ports.currency_lookup import CurrencyLookup
from app.application.ports.office_store import OfficeStore
from app.domain.entities.currency import Currency
from app.domain.entities.office import Office
from app.domain.entities.office_rate import OfficeRate
from app.domain.entities.search import NearbyCandidate, NearbyQuery, NearbyQueryResult
from app.domain.entities.working_hour import WorkingHour
from app.domain.errors import StoreUnavailableError
from app.domain.policies.pagination import page_offset
from app.domain.value_objects.enums import DayOfWeek, SortPreference
from app.domain.value_objects.geo_point import EARTH_RADIUS_KM, GeoPoint

logger = logging.getLogger(__name__)

# ─── Mappers ─────────────────────────────────────────────────────────


def parse_hhmm(value: str | None) -> time | None:
    """Parse an "HH:MM" (or "HH:MM:SS") column value."""
    if not value:
        return None
    hours, minutes = value.strip().split(":")[:2]
    return time(int(hours), int(minutes))


def _currency_to_domain(m: CurrencyModel) -> Currency:
    return Currency(id=m.id, code=m.code, name=m.name, symbol=m.symbol)


def _rate_to_domain(m: OfficeRateModel) -> OfficeRate:
    return OfficeRate(
        id=m.id,
        office_id=m.office_id,
        base_currency=_currency_to_domain(m.base_currency),
        target_currency=_currency_to_domain(m.target_currency),
        buy_rate=Decimal(m.buy_rate),
        sell_rate=Decimal(m.sell_rate),
        is_active=m.is_active,
    )


def _working_hour_to_domain(m: WorkingHourModel) -> WorkingHour:
    return WorkingHour(
        id=m.id,
        office_id=m.office_id,
        day_of_week=DayOfWeek(m.day_of_week.strip().upper()),
        is_active=m.is_active,
        from_time=parse_hhmm(m.from_time),
        to_time=parse_hhmm(m.to_time),
        has_break=m.has_break,
        break_from_time=parse_hhmm(m.break_from_time),
        break_to_time=parse_hhmm(m.break_to_time),
    )


def _office_to_domain(m: OfficeModel) -> Office:
    location = None
    if m.latitude is not None and m.longitude is not None:
        location = GeoPoint(latitude=m.latitude, longitude=m.longitude)
    return Office(
        id=m.id,
        name=m.office_name,
        address=m.address,
        location=location,
        is_active=m.is_active,
        is_verified=m.is_verified,
        is_featured=m.is_featured,
        created_at=m.created_at,
        rates=[_rate_to_domain(r) for r in m.rates],
        working_hours=[_working_hour_to_domain(wh) for wh in m.working_hours],
        city=m.city.name if m.city else None,
        country=m.country.name if m.country else None,
        state=m.state,
        slug=m.slug,
        email=m.email,
        primary_phone_number=m.primary_phone_number,
        secondary_phone_number=m.secondary_phone_number,
        third_phone_number=m.third_phone_number,
        whatsapp_number=m.whatsapp_number,
    )


# ─── Query building ──────────────────────────────────────────────────


def distance_km_expr(center: GeoPoint):
    """Haversine distance from ``center`` to each office, evaluated in SQL."""
    lat1 = math.radians(center.latitude)
    lon1 = math.radians(center.longitude)
    lat2 = func.radians(OfficeModel.latitude)
    lon2 = func.radians(OfficeModel.longitude)

    a = (
        func.power(func.sin((lat2 - lat1) / 2), 2)
        + math.cos(lat1) * func.cos(lat2) * func.power(func.sin((lon2 - lon1) / 2), 2)
    )
    # least() guards asin against float drift just above 1
    return 2 * EARTH_RADIUS_KM * func.asin(func.sqrt(func.least(a, 1.0)))


def nearby_conditions(center: GeoPoint, radius_km: float, filters: NearbyQuery) -> list:
    """WHERE clauses for one nearby search; status filters only when requested."""
    conditions = [
        OfficeModel.latitude.is_not(None),
        OfficeModel.longitude.is_not(None),
        distance_km_expr(center) <= radius_km,
    ]

    if filters.is_active is not None:
        conditions.append(OfficeModel.is_active.is_(filters.is_active))
    if filters.is_verified is not None:
        conditions.append(OfficeModel.is_verified.is_(filters.is_verified))
    if filters.is_featured is not None:
        conditions.append(OfficeModel.is_featured.is_(filters.is_featured))

    if filters.available_currencies:
        codes = [c.strip().upper() for c in filters.available_currencies if c and c.strip()]
        if codes:
            conditions.append(
                OfficeModel.rates.any(
                    and_(
                        OfficeRateModel.is_active.is_(True),
                        OfficeRateModel.target_currency.has(CurrencyModel.code.in_(codes)),
                    )
                )
            )

    if filters.base_currency_id is not None or filters.target_currency_id is not None:
        rate_clauses = [OfficeRateModel.is_active.is_(True)]
        if filters.base_currency_id is not None:
            rate_clauses.append(OfficeRateModel.base_currency_id == filters.base_currency_id)
        if filters.target_currency_id is not None:
            rate_clauses.append(OfficeRateModel.target_currency_id == filters.target_currency_id)
        conditions.append(OfficeModel.rates.any(and_(*rate_clauses)))

    return conditions


def nearby_ordering(sort: SortPreference, distance) -> list:
    if sort == SortPreference.POPULAR:
        order = [
            OfficeModel.is_featured.desc(),
            OfficeModel.is_verified.desc(),
            OfficeModel.created_at.asc(),
        ]
    elif sort == SortPreference.MOST_SEARCHED:
        order = [
            OfficeModel.is_featured.desc(),
            OfficeModel.is_verified.desc(),
            OfficeModel.created_at.desc(),
        ]
    else:
        order = [distance.asc()]
    return order + [OfficeModel.id]


# ─── Repositories ────────────────────────────────────────────────────


class SqlCurrencyLookup(CurrencyLookup):
    def __init__(self, session: AsyncSession, reference_code: str = "MAD"):
        self._s = session
        self._reference_code = reference_code.upper()

    async def find_by_code(self, code: str) -> Currency | None:
        try:
            result = await self._s.execute(
                select(CurrencyModel).where(CurrencyModel.code == code.upper())
            )
            m = result.scalar_one_or_none()
        except (SQLAlchemyError, OSError) as e:
            logger.exception("Currency lookup failed for code '%s'", code)
            raise StoreUnavailableError("failedToLoadCurrency", field="currency") from e
        return _currency_to_domain(m) if m else None

    async def find_by_id(self, currency_id: int) -> Currency | None:
        try:
            m = await self._s.get(CurrencyModel, currency_id)
        except (SQLAlchemyError, OSError) as e:
            logger.exception("Currency lookup failed for id %d", currency_id)
            raise StoreUnavailableError("failedToLoadCurrency", field="currency") from e
        return _currency_to_domain(m) if m else None

    async def get_reference_currency(self) -> Currency | None:
        return await self.find_by_code(self._reference_code)


class SqlOfficeStore(OfficeStore):
    def __init__(self, session: AsyncSession):
        self._s = session

    async def query_nearby(
        self,
        center: GeoPoint,
        radius_km: float,
        filters: NearbyQuery,
        page: int,
        limit: int,
    ) -> NearbyQueryResult:
        conditions = nearby_conditions(center, radius_km, filters)
        distance = distance_km_expr(center).label("distance_km")

        try:
            total = (
                await self._s.execute(select(func.count(OfficeModel.id)).where(*conditions))
            ).scalar() or 0

            result = await self._s.execute(
                select(OfficeModel, distance)
                .where(*conditions)
                .options(
                    selectinload(OfficeModel.rates).selectinload(OfficeRateModel.base_currency),
                    selectinload(OfficeModel.rates).selectinload(OfficeRateModel.target_currency),
                    selectinload(OfficeModel.working_hours),
                    selectinload(OfficeModel.city),
                    selectinload(OfficeModel.country),
                )
                .order_by(*nearby_ordering(filters.sort, distance))
                .offset(page_offset(page, limit))
                .limit(limit)
            )
            rows = result.all()
        except (SQLAlchemyError, OSError) as e:
            logger.exception("Nearby office query failed")
            raise StoreUnavailableError("failedToFindNearbyOffices") from e

        logger.debug(
            "Nearby query matched %d offices, returning %d (page %d)", total, len(rows), page
        )
        return NearbyQueryResult(
            rows=[
                NearbyCandidate(office=_office_to_domain(m), distance_km=float(d))
                for m, d in rows
            ],
            total_count=total,
        )
