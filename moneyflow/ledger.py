import re
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from enum import Enum
from typing import Mapping, Optional, Union

ZERO = Decimal("0")
CENT = Decimal("0.01")
HUNDRED = Decimal("100")

WARNING_AT = Decimal("70")
EXTREME_AT = Decimal("85")
CRITICAL_AT = Decimal("90")

Amount = Union[Decimal, int, float, str]


class AlertLevel(str, Enum):
    NORMAL = "normal"
    WARNING = "warning"
    CRITICAL = "critical"


@dataclass(frozen=True)
class BudgetStatus:
    level: AlertLevel
    percent: Decimal
    extreme: bool      # warning tier, >= 85%
    shake: bool        # >= 70%
    show_alert: bool
    progress: Decimal  # percent clamped to 0..100 for the progress bar


def to_decimal(value: Amount) -> Decimal:
    return value if isinstance(value, Decimal) else Decimal(str(value))


def to_money(value: Amount) -> Optional[Decimal]:
    """Coerce a number to a two-place Decimal.

    None for NaN, infinities and values too large to carry cents.
    """
    number = to_decimal(value)
    if not number.is_finite():
        return None
    try:
        return number.quantize(CENT, rounding=ROUND_HALF_UP)
    except InvalidOperation:
        return None


def parse_masked_amount(text: str) -> Decimal:
    """Read a masked currency input: the digits are a count of cents.

    "1.234,56" -> 1234.56, "R$ 5" -> 0.05, "" -> 0.00
    """
    digits = re.sub(r"\D", "", text or "")
    if not digits:
        return Decimal("0.00")
    return Decimal(f"{digits}E-2")


def limit_for(period_key: str, budgets: Mapping[str, Decimal]) -> Decimal:
    return budgets.get(period_key, ZERO)


def balance(limit: Decimal, spent: Decimal) -> Decimal:
    return limit - spent


def percent_utilized(limit: Decimal, spent: Decimal) -> Decimal:
    if limit <= 0:
        return ZERO
    return spent / limit * HUNDRED


def set_limit(period_key: str, amount: Amount, budgets: Mapping[str, Decimal]) -> dict[str, Decimal]:
    """Return a copy of ``budgets`` with ``period_key`` overwritten.

    Strings are read as masked input; numbers are rounded to cents.
    Negative, NaN and infinite values are stored as zero.
    """
    value = parse_masked_amount(amount) if isinstance(amount, str) else to_money(amount)
    if value is None or value < 0:
        value = Decimal("0.00")
    updated = dict(budgets)
    updated[period_key] = value
    return updated


def alert_level(percent: Decimal) -> AlertLevel:
    if percent >= CRITICAL_AT:
        return AlertLevel.CRITICAL
    if percent >= WARNING_AT:
        return AlertLevel.WARNING
    return AlertLevel.NORMAL


def utilization_status(limit: Decimal, spent: Decimal) -> BudgetStatus:
    pct = percent_utilized(limit, spent)
    level = alert_level(pct)
    return BudgetStatus(
        level=level,
        percent=pct,
        extreme=level is AlertLevel.WARNING and pct >= EXTREME_AT,
        shake=pct >= WARNING_AT,
        show_alert=limit > 0 and level is not AlertLevel.NORMAL,
        progress=min(max(pct, ZERO), HUNDRED),
    )
