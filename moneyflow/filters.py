from datetime import datetime, tzinfo
from typing import Optional

from moneyflow.domain import Expense
from moneyflow.periods import parse_period_key


def local_date(ts: datetime, tz: Optional[tzinfo] = None) -> datetime:
    """Move an aware timestamp into ``tz``; naive ones are already local."""
    if tz is None or ts.tzinfo is None:
        return ts
    return ts.astimezone(tz)


def belongs_to_period(expense: Expense, period_key: str, tz: Optional[tzinfo] = None) -> bool:
    month, year = parse_period_key(period_key)
    d = local_date(expense.date, tz)
    return d.month == month and d.year == year


def by_period(period_key: str, tz: Optional[tzinfo] = None):
    return lambda e: belongs_to_period(e, period_key, tz)


def by_description(text: str):
    needle = text.strip().lower()

    def _filter(e: Expense) -> bool:
        return e.description.strip().lower() == needle

    return _filter
