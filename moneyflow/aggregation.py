from datetime import tzinfo
from decimal import Decimal
from functools import reduce
from itertools import islice
from typing import Callable, Iterable, Iterator, Optional

from moneyflow.domain import ConsolidatedGroup, Expense
from moneyflow.filters import by_description, by_period

ZERO = Decimal("0")


def iter_expenses(
    expenses: Iterable[Expense], pred: Callable[[Expense], bool]
) -> Iterator[Expense]:
    for e in expenses:
        if pred(e):
            yield e


def filter_by_period(
    expenses: Iterable[Expense], period_key: str, tz: Optional[tzinfo] = None
) -> tuple[Expense, ...]:
    """Expenses of one month, in the order they were given (newest first)."""
    return tuple(iter_expenses(expenses, by_period(period_key, tz)))


def total_of(expenses: Iterable[Expense]) -> Decimal:
    return reduce(lambda acc, e: acc + e.amount, expenses, ZERO)


def normalize_description(text: str) -> str:
    return text.strip().lower()


def _label(key: str) -> str:
    return key[:1].upper() + key[1:]


def consolidate(expenses: Iterable[Expense]) -> list[ConsolidatedGroup]:
    """Group by normalized description, largest total first.

    Groups with equal totals keep the order in which they first appeared.
    """
    totals: dict[str, Decimal] = {}
    counts: dict[str, int] = {}

    for e in expenses:
        key = normalize_description(e.description)
        totals[key] = totals.get(key, ZERO) + e.amount
        counts[key] = counts.get(key, 0) + 1

    ordered = sorted(totals.items(), key=lambda item: item[1], reverse=True)
    return [
        ConsolidatedGroup(description=_label(key), total=total, count=counts[key], key=key)
        for key, total in ordered
    ]


def top_groups(groups: Iterable[ConsolidatedGroup], k: int) -> Iterator[ConsolidatedGroup]:
    yield from islice(groups, max(0, k))


def group_items(expenses: Iterable[Expense], key: str) -> list[Expense]:
    """Entries behind one consolidated row, most recent first.

    ``key`` is the group's normalized description, not its display label,
    which may not lower back to it (e.g. "ß" is shown as "SS").
    """
    return sorted(
        iter_expenses(expenses, by_description(key)),
        key=lambda e: e.date,
        reverse=True,
    )
