from datetime import datetime
from typing import Sequence

from moneyflow.config import Locale, PT_BR
from moneyflow.domain import MonthOption

SEPARATOR = "/"


def format_period_key(month: int, year: int) -> str:
    return f"{month:02d}{SEPARATOR}{year:04d}"


def parse_period_key(key: str) -> tuple[int, int]:
    """Split "MM/YYYY" into (month, year). Raises ValueError on bad input."""
    m, y = key.split(SEPARATOR)
    return int(m), int(y)


def list_years(first_year: int = 2026, count: int = 5) -> list[int]:
    return list(range(first_year, first_year + count))


def list_months(year: int, locale: Locale = PT_BR) -> list[MonthOption]:
    return [
        MonthOption(name=name, short=name[:3], key=format_period_key(idx, year))
        for idx, name in enumerate(locale.month_names, start=1)
    ]


def current_period_key(now: datetime) -> str:
    return format_period_key(now.month, now.year)


def default_period_key(now: datetime, years: Sequence[int]) -> str:
    # Outside the range: earliest year, but still the real current month.
    year = now.year if now.year in years else years[0]
    return format_period_key(now.month, year)


def with_year(period_key: str, year: int) -> str:
    month, _ = parse_period_key(period_key)
    return format_period_key(month, year)
