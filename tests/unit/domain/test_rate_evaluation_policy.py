"""Tests for RateEvaluationPolicy."""

from decimal import Decimal

from app.domain.entities.currency import Currency
from app.domain.entities.office import Office
from app.domain.entities.office_rate import OfficeRate
from app.domain.entities.search import ResolvedCurrencyPair
from app.domain.policies.rate_evaluation import (
    evaluate_equivalent_value,
    find_matching_rate,
    round2,
)
from app.domain.value_objects.enums import RateDirection

MAD = Currency(id=1, code="MAD", name="Moroccan Dirham", symbol="DH")
USD = Currency(id=2, code="USD", name="US Dollar", symbol="$")
EUR = Currency(id=3, code="EUR", name="Euro", symbol="€")


def _office_with_rates(*rates: OfficeRate) -> Office:
    return Office(id=1, name="Bureau Atlas", address="Bd Mohammed V", rates=list(rates))


def _rate(target=USD, buy="10.15", sell="10.25", active=True) -> OfficeRate:
    return OfficeRate(
        id=None, office_id=1, base_currency=MAD, target_currency=target,
        buy_rate=Decimal(buy), sell_rate=Decimal(sell), is_active=active,
    )


def test_sell_divides_by_sell_rate():
    """MAD → USD, 1000 MAD at 10.25 → 97.56 USD."""
    office = _office_with_rates(_rate())
    pair = ResolvedCurrencyPair(base_id=MAD.id, target_id=USD.id, direction=RateDirection.SELL)
    assert evaluate_equivalent_value(office, pair, Decimal("1000")) == Decimal("97.56")


def test_buy_multiplies_by_buy_rate():
    """USD → MAD (swapped), 100 USD at 10.15 → 1015.00 MAD."""
    office = _office_with_rates(_rate())
    pair = ResolvedCurrencyPair(base_id=MAD.id, target_id=USD.id, direction=RateDirection.BUY)
    assert evaluate_equivalent_value(office, pair, Decimal("100")) == Decimal("1015.00")


def test_missing_rate_is_absent_not_zero():
    office = _office_with_rates(_rate(target=EUR))
    pair = ResolvedCurrencyPair(base_id=MAD.id, target_id=USD.id, direction=RateDirection.SELL)
    assert evaluate_equivalent_value(office, pair, Decimal("1000")) is None


def test_inactive_rate_is_ignored():
    office = _office_with_rates(_rate(active=False))
    pair = ResolvedCurrencyPair(base_id=MAD.id, target_id=USD.id, direction=RateDirection.BUY)
    assert find_matching_rate(office, pair) is None
    assert evaluate_equivalent_value(office, pair, Decimal("100")) is None


def test_active_rate_chosen_over_inactive_duplicate():
    office = _office_with_rates(
        _rate(buy="9.00", active=False),
        _rate(buy="10.00"),
    )
    pair = ResolvedCurrencyPair(base_id=MAD.id, target_id=USD.id, direction=RateDirection.BUY)
    assert evaluate_equivalent_value(office, pair, Decimal("10")) == Decimal("100.00")


def test_incomplete_pair_yields_nothing():
    office = _office_with_rates(_rate())
    pair = ResolvedCurrencyPair(base_id=MAD.id, target_id=None, direction=None)
    assert evaluate_equivalent_value(office, pair, Decimal("1")) is None


def test_round2_is_half_up():
    assert round2(Decimal("2.675")) == Decimal("2.68")
    assert round2(Decimal("0.005")) == Decimal("0.01")
    assert round2(Decimal("123456789.125")) == Decimal("123456789.13")
    assert round2(Decimal("1.004")) == Decimal("1.00")


def test_round2_handles_values_beyond_default_precision():
    assert round2(Decimal("123456789012345678901234567890.125")) == Decimal(
        "123456789012345678901234567890.13"
    )


def test_huge_amount_buy_keeps_cents():
    office = _office_with_rates(_rate())
    pair = ResolvedCurrencyPair(base_id=MAD.id, target_id=USD.id, direction=RateDirection.BUY)
    assert evaluate_equivalent_value(office, pair, Decimal("1e27")) == Decimal(
        "10150000000000000000000000000.00"
    )


def test_huge_amount_sell_keeps_cents():
    """1e27 / 10.25 = 97560975609756097560975609.7560..."""
    office = _office_with_rates(_rate())
    pair = ResolvedCurrencyPair(base_id=MAD.id, target_id=USD.id, direction=RateDirection.SELL)
    assert evaluate_equivalent_value(office, pair, Decimal("1e27")) == Decimal(
        "97560975609756097560975609.76"
    )
