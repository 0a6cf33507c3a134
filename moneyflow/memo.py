from functools import lru_cache

from moneyflow.aggregation import consolidate
from moneyflow.domain import ConsolidatedGroup, Expense


@lru_cache(maxsize=32)
def cached_consolidate(expenses: tuple[Expense, ...]) -> tuple[ConsolidatedGroup, ...]:
    return tuple(consolidate(expenses))
