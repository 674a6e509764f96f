"""RateEvaluationPolicy — compute the equivalent value an office offers."""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal, localcontext

from app.domain.entities.office import Office
from app.domain.entities.office_rate import OfficeRate
from app.domain.entities.search import ResolvedCurrencyPair
from app.domain.value_objects.enums import RateDirection

_CENT = Decimal("0.01")
_GUARD_DIGITS = 28


def _working_precision(*values: Decimal) -> int:
    """Digits needed so products stay exact and quotients keep every cent."""
    digits = sum(len(v.as_tuple().digits) for v in values)
    spread = sum(abs(v.adjusted()) for v in values)
    return digits + spread + _GUARD_DIGITS


def round2(value: Decimal) -> Decimal:
    """Half-up rounding to two decimal places, whatever the magnitude."""
    with localcontext() as ctx:
        ctx.prec = max(ctx.prec, value.adjusted() + 3)
        return value.quantize(_CENT, rounding=ROUND_HALF_UP)


def find_matching_rate(office: Office, pair: ResolvedCurrencyPair) -> OfficeRate | None:
    if pair.base_id is None or pair.target_id is None:
        return None
    return next(
        (r for r in office.active_rates() if r.matches(pair.base_id, pair.target_id)),
        None,
    )


def evaluate_equivalent_value(
    office: Office,
    pair: ResolvedCurrencyPair,
    amount: Decimal,
) -> Decimal | None:
    """Convert ``amount`` with the office's matching rate.

    BUY multiplies by the buy rate, SELL divides by the sell rate. Returns
    None when the pair is incomplete or the office posts no active rate for it.
    """
    if not pair.is_complete():
        return None

    rate = find_matching_rate(office, pair)
    if rate is None:
        return None

    amount = Decimal(amount)
    if pair.direction == RateDirection.BUY:
        factor = Decimal(rate.buy_rate)
        with localcontext() as ctx:
            ctx.prec = _working_precision(amount, factor)
            return round2(amount * factor)

    factor = Decimal(rate.sell_rate)
    with localcontext() as ctx:
        ctx.prec = _working_precision(amount, factor)
        return round2(amount / factor)
