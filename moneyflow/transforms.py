from datetime import datetime, tzinfo
from decimal import Decimal
from typing import Any, Dict, Iterable, Mapping, Optional, Tuple, Union
from uuid import uuid4

from moneyflow.domain import Expense
from moneyflow.ledger import CENT


def new_expense(
    amount: Decimal, description: str, date: datetime, id: Optional[str] = None
) -> Expense:
    return Expense(id=id or uuid4().hex, amount=amount, description=description, date=date)


def add_expense(expenses: Tuple[Expense, ...], e: Expense) -> Tuple[Expense, ...]:
    # newest first
    return (e,) + expenses


def delete_expense(expenses: Tuple[Expense, ...], expense_id: str) -> Tuple[Expense, ...]:
    return tuple(filter(lambda e: e.id != expense_id, expenses))


def money_to_json(value: Decimal) -> Union[float, str]:
    """A JSON number when the float reads back as the same amount, else decimal text."""
    number = float(value)
    if Decimal(str(number)) == value:
        return number
    return str(value)


def money_from_json(raw: Any) -> Decimal:
    """Read an amount written as a JSON number or as decimal text."""
    value = Decimal(str(raw))
    if not value.is_finite():
        raise ValueError(f"not a finite amount: {raw!r}")
    return value.quantize(CENT)


def expense_to_record(e: Expense) -> Dict[str, Any]:
    return {
        "id": e.id,
        "amount": money_to_json(e.amount),
        "description": e.description,
        "date": e.date.isoformat(),
    }


def expense_from_record(record: Mapping[str, Any], tz: Optional[tzinfo] = None) -> Expense:
    """Rebuild an Expense from its stored form.

    Accepts the trailing "Z" that browser-generated ISO strings carry;
    timestamps without an offset are pinned to ``tz``.
    Raises KeyError, ValueError, TypeError or InvalidOperation on malformed records.
    """
    raw_date = str(record["date"])
    if raw_date.endswith("Z"):
        raw_date = raw_date[:-1] + "+00:00"
    date = datetime.fromisoformat(raw_date)
    if date.tzinfo is None and tz is not None:
        date = date.replace(tzinfo=tz)
    return Expense(
        id=str(record["id"]),
        amount=money_from_json(record["amount"]),
        description=str(record["description"]),
        date=date,
    )


def budgets_to_record(budgets: Mapping[str, Decimal]) -> Dict[str, Union[float, str]]:
    return {key: money_to_json(value) for key, value in budgets.items()}


def budgets_from_record(record: Mapping[str, Any]) -> Dict[str, Decimal]:
    return {
        str(key): money_from_json(value) for key, value in record.items()
    }


def description_suggestions(expenses: Iterable[Expense]) -> list[str]:
    return sorted({e.description for e in expenses})


def match_suggestions(suggestions: Iterable[str], text: str) -> list[str]:
    """Suggestions containing ``text``, minus an exact (case-insensitive) match."""
    if not text.strip():
        return []
    needle = text.lower()
    return [s for s in suggestions if needle in s.lower() and s.lower() != needle]
