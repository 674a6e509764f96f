"""FindNearbyOfficesUseCase — full pipeline: validate → resolve → query → rank."""

from __future__ import annotations

import asyncio
import logging
from datetime import datetime, timezone, tzinfo
from decimal import Decimal
from typing import Callable

from app.application.ports.currency_lookup import CurrencyLookup
from app.application.ports.office_store import OfficeStore
from app.domain.entities.currency import Currency
from app.domain.entities.search import (
    NearbyQuery,
    NearbySearchResult,
    RankedOffice,
    ResolvedCurrencyPair,
    SearchFilter,
)
from app.domain.errors import (
    CurrencyNotFoundError,
    DomainError,
    ReferenceCurrencyUnconfiguredError,
    SearchTimeoutError,
)
from app.domain.policies.currency_direction import resolve_direction
from app.domain.policies.pagination import build_page
from app.domain.policies.ranking import rank_offices, select_best_office
from app.domain.policies.rate_evaluation import evaluate_equivalent_value
from app.domain.policies.search_validation import validate_search_filter
from app.domain.policies.working_hours import is_open, today_hours
from app.domain.value_objects.enums import SearchState

logger = logging.getLogger(__name__)

DEFAULT_AMOUNT = Decimal("1")


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class FindNearbyOfficesUseCase:
    """Orchestrates one nearby-office search.

    Holds no per-request state between calls; collaborators are injected.
    """

    def __init__(
        self,
        currency_lookup: CurrencyLookup,
        office_store: OfficeStore,
        clock: Callable[[], datetime] = _utc_now,
        office_tz: tzinfo | None = None,
        query_timeout: float | None = None,
    ):
        self._currencies = currency_lookup
        self._offices = office_store
        self._clock = clock
        self._tz = office_tz
        self._timeout = query_timeout

    async def execute(self, search: SearchFilter) -> NearbySearchResult:
        """Run the search pipeline.

        Pipeline:
        1. Validate ranges
        2. Resolve currency references and rate direction
        3. Spatial + filter query (one page, plus total count)
        4. Evaluate working hours, drop closed offices if requested
        5. Evaluate equivalent values
        6. Rank and flag the best office
        7. Assemble page metadata

        Raises:
            DomainError: any validation, resolution or store failure. No
                partial result is returned.
        """
        state = SearchState.VALIDATING
        try:
            validate_search_filter(search)

            state = SearchState.RESOLVING_CURRENCY
            pair, target_currency = await self._resolve_currency_pair(search)
            logger.debug(
                "Resolved pair base=%s target=%s direction=%s",
                pair.base_id, pair.target_id, pair.direction,
            )

            state = SearchState.QUERYING
            query = NearbyQuery(
                is_active=search.is_active,
                is_verified=search.is_verified,
                is_featured=search.is_featured,
                available_currencies=search.available_currencies,
                base_currency_id=pair.base_id,
                target_currency_id=pair.target_id,
                sort=search.sort,
            )
            result = await self._query(search, query)

            state = SearchState.EVALUATING_HOURS
            now = self._clock()
            candidates = [
                RankedOffice(
                    office=row.office,
                    distance_km=row.distance_km,
                    is_currently_open=is_open(row.office.working_hours, now, self._tz),
                    today_working_hours=today_hours(row.office.working_hours, now, self._tz),
                    target_currency=target_currency,
                )
                for row in result.rows
            ]
            if search.only_open_now:
                before = len(candidates)
                candidates = [c for c in candidates if c.is_currently_open]
                logger.debug("Open-now filter reduced page from %d to %d", before, len(candidates))

            state = SearchState.EVALUATING_RATES
            amount = search.amount if search.amount is not None else DEFAULT_AMOUNT
            for candidate in candidates:
                candidate.equivalent_value = evaluate_equivalent_value(
                    candidate.office, pair, amount
                )

            state = SearchState.RANKING
            candidates = rank_offices(candidates, search.sort)
            best = select_best_office(candidates, pair.direction)
            if best is not None:
                best.best_office = True

            state = SearchState.PAGINATING
            page = build_page(candidates, result.total_count, search.page, search.limit)

            state = SearchState.DONE
        except DomainError as e:
            failed_at, state = state, SearchState.FAILED
            logger.warning("Nearby search %s while %s: %s", state.value, failed_at.value, e.message)
            raise

        logger.info(
            "Found %d nearby offices (page %d/%d, %d in area)",
            len(page.items), page.page, page.total_pages, page.total_count,
        )
        return NearbySearchResult(
            offices=page.items,
            total_offices_in_area=page.total_count,
            current_page=page.page,
            total_pages=page.total_pages,
            has_more=page.has_more,
        )

    async def _query(self, search: SearchFilter, query: NearbyQuery):
        call = self._offices.query_nearby(
            search.center, search.radius_km, query, search.page, search.limit
        )
        if self._timeout is None:
            return await call
        try:
            return await asyncio.wait_for(call, timeout=self._timeout)
        except asyncio.TimeoutError as e:
            raise SearchTimeoutError(
                f"Office query exceeded {self._timeout:.1f}s"
            ) from e

    async def _resolve_currency_pair(
        self, search: SearchFilter
    ) -> tuple[ResolvedCurrencyPair, Currency | None]:
        """Return the pair in rate-table orientation and the client's own target."""
        reference = await self._currencies.get_reference_currency()
        if reference is None:
            raise ReferenceCurrencyUnconfiguredError("defaultReferenceCurrencyNotFound")

        base = await self._lookup(search.base_currency, "baseCurrency")
        target = await self._lookup(search.target_currency, "targetCurrency")
        pair = resolve_direction(
            base.id if base else None,
            target.id if target else None,
            reference.id,
        )
        return pair, target

    async def _lookup(self, ref: str | None, field: str) -> Currency | None:
        """Resolve a currency code or numeric id."""
        if ref is None or not ref.strip():
            return None

        ref = ref.strip()
        if ref.isdigit():
            currency = await self._currencies.find_by_id(int(ref))
            missing = f"Currency with id {ref} not found"
        else:
            currency = await self._currencies.find_by_code(ref.upper())
            missing = f"Currency with code '{ref.upper()}' not found"

        if currency is None:
            raise CurrencyNotFoundError(missing, field=field)
        return currency
