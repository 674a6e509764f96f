"""Request-scoped search values — built per request, never persisted."""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal

from app.domain.entities.currency import Currency
from app.domain.entities.office import Office
from app.domain.entities.working_hour import WorkingHour
from app.domain.value_objects.enums import RateDirection, SortPreference
from app.domain.value_objects.geo_point import GeoPoint

DEFAULT_PAGE_SIZE = 9


@dataclass(frozen=True)
class SearchFilter:
    """Validated input of one nearby search.

    Status flags use ``None`` for "not requested", which is distinct from
    requiring ``False``.
    """

    center: GeoPoint
    radius_km: float
    base_currency: str | None = None
    target_currency: str | None = None
    amount: Decimal | None = None
    available_currencies: tuple[str, ...] = ()
    is_active: bool | None = None
    is_verified: bool | None = None
    is_featured: bool | None = None
    only_open_now: bool = False
    sort: SortPreference = SortPreference.DEFAULT
    page: int = 1
    limit: int = DEFAULT_PAGE_SIZE


@dataclass(frozen=True)
class ResolvedCurrencyPair:
    """Currency ids in rate-table orientation plus the applicable rate side."""

    base_id: int | None
    target_id: int | None
    direction: RateDirection | None = None

    def is_complete(self) -> bool:
        return (
            self.base_id is not None
            and self.target_id is not None
            and self.direction is not None
        )


@dataclass(frozen=True)
class NearbyQuery:
    """Non-spatial filters pushed down to the office store."""

    is_active: bool | None = None
    is_verified: bool | None = None
    is_featured: bool | None = None
    available_currencies: tuple[str, ...] = ()
    base_currency_id: int | None = None
    target_currency_id: int | None = None
    sort: SortPreference = SortPreference.DEFAULT


@dataclass(frozen=True)
class NearbyCandidate:
    office: Office
    distance_km: float


@dataclass(frozen=True)
class NearbyQueryResult:
    rows: list[NearbyCandidate]
    total_count: int


@dataclass
class RankedOffice:
    office: Office
    distance_km: float
    equivalent_value: Decimal | None = None
    best_office: bool = False
    is_currently_open: bool = False
    today_working_hours: WorkingHour | None = None
    target_currency: Currency | None = None


@dataclass(frozen=True)
class NearbySearchResult:
    offices: list[RankedOffice] = field(default_factory=list)
    total_offices_in_area: int = 0
    current_page: int = 1
    total_pages: int = 0
    has_more: bool = False

    @property
    def offices_in_page(self) -> int:
        return len(self.offices)
