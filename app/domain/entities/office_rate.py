"""OfficeRate entity — a two-way rate posted by one office."""

from dataclasses import dataclass
from decimal import Decimal

from app.domain.entities.currency import Currency


@dataclass
class OfficeRate:
    id: int | None
    office_id: int | None
    base_currency: Currency
    target_currency: Currency
    buy_rate: Decimal
    sell_rate: Decimal
    is_active: bool = True

    def matches(self, base_currency_id: int, target_currency_id: int) -> bool:
        return (
            self.base_currency.id == base_currency_id
            and self.target_currency.id == target_currency_id
        )
