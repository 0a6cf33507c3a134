from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal


@dataclass(frozen=True)
class Expense:
    id: str
    amount: Decimal      # > 0, two decimal places
    description: str     # original casing, trimmed on add
    date: datetime       # timezone-aware


# A description group for the active period, recomputed on every query
@dataclass(frozen=True)
class ConsolidatedGroup:
    description: str
    total: Decimal
    count: int
    key: str = field(default="", compare=False)  # normalized description shared by the group


@dataclass(frozen=True)
class MonthOption:
    name: str    # localized, e.g. "Março"
    short: str   # e.g. "Mar"
    key: str     # period key, e.g. "03/2027"
