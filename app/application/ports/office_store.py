"""Port interface for the spatial office query."""

from abc import ABC, abstractmethod

from app.domain.entities.search import NearbyQuery, NearbyQueryResult
from app.domain.value_objects.geo_point import GeoPoint


class OfficeStore(ABC):
    @abstractmethod
    async def query_nearby(
        self,
        center: GeoPoint,
        radius_km: float,
        filters: NearbyQuery,
        page: int,
        limit: int,
    ) -> NearbyQueryResult:
        """Return one page of offices within ``radius_km`` of ``center``.

        Rows are ordered by ``filters.sort`` and carry their distance;
        ``total_count`` covers every matching office, not just the page.
        """
        ...
