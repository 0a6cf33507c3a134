from datetime import datetime, tzinfo
from decimal import Decimal
from typing import Optional

from moneyflow.config import Locale, PT_BR
from moneyflow.filters import local_date


def format_amount(value: Decimal, locale: Locale = PT_BR) -> str:
    """1234.5 -> "1.234,50" for pt-BR."""
    text = f"{abs(value):,.2f}"
    text = text.replace(",", "\0").replace(".", locale.decimal_sep).replace("\0", locale.thousands_sep)
    return f"-{text}" if value < 0 else text


def format_currency(value: Decimal, locale: Locale = PT_BR) -> str:
    sign = "-" if value < 0 else ""
    return f"{sign}{locale.currency_symbol} {format_amount(abs(value), locale)}"


def format_date(ts: datetime, tz: Optional[tzinfo] = None) -> str:
    return local_date(ts, tz).strftime("%d/%m/%Y")


def format_datetime(ts: datetime, tz: Optional[tzinfo] = None) -> str:
    return local_date(ts, tz).strftime("%d/%m %H:%M")
