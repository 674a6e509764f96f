"""FastAPI dependency injection — wires adapters into use cases."""

from __future__ import annotations

import logging
from datetime import datetime
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.adapters.persistence.database import get_session
from app.adapters.persistence.repositories import SqlCurrencyLookup, SqlOfficeStore
from app.application.use_cases.find_nearby_offices import FindNearbyOfficesUseCase
from app.config import settings

logger = logging.getLogger(__name__)

# Re-export session dependency
get_db_session = get_session

try:
    _office_tz = ZoneInfo(settings.office_timezone)
except ZoneInfoNotFoundError:
    logger.warning("Unknown OFFICE_TIMEZONE '%s', using server local time", settings.office_timezone)
    _office_tz = None


def _office_now() -> datetime:
    return datetime.now(_office_tz)


def get_currency_lookup(session: AsyncSession = Depends(get_session)) -> SqlCurrencyLookup:
    return SqlCurrencyLookup(session, reference_code=settings.reference_currency_code)


def get_office_store(session: AsyncSession = Depends(get_session)) -> SqlOfficeStore:
    return SqlOfficeStore(session)


def get_find_nearby_offices_uc(
    currency_lookup: SqlCurrencyLookup = Depends(get_currency_lookup),
    office_store: SqlOfficeStore = Depends(get_office_store),
) -> FindNearbyOfficesUseCase:
    return FindNearbyOfficesUseCase(
        currency_lookup=currency_lookup,
        office_store=office_store,
        clock=_office_now,
        office_tz=_office_tz,
        query_timeout=settings.search_timeout_seconds,
    )
