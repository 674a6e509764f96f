"""Port interface for read-only currency lookups."""

from abc import ABC, abstractmethod

from app.domain.entities.currency import Currency


class CurrencyLookup(ABC):
    @abstractmethod
    async def find_by_code(self, code: str) -> Currency | None:
        ...

    @abstractmethod
    async def find_by_id(self, currency_id: int) -> Currency | None:
        ...

    @abstractmethod
    async def get_reference_currency(self) -> Currency | None:
        """Return the currency all two-way rates are anchored on.

        Returns None if it is missing from the store.
        """
        ...
