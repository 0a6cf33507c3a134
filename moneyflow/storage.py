"""JSON-file key-value store for the expense list and the budget map.

Each key lives in its own ``<key>.json`` under the data directory and is
rewritten in full on every save.
"""

from __future__ import annotations

import json
import logging
import os
import tempfile
from datetime import tzinfo
from decimal import Decimal, InvalidOperation
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

from moneyflow.domain import Expense
from moneyflow.transforms import (
    budgets_from_record,
    budgets_to_record,
    expense_from_record,
    expense_to_record,
)

logger = logging.getLogger(__name__)

EXPENSES_KEY = "all_expenses"
BUDGETS_KEY = "all_budgets"


class JsonStore:

    def __init__(self, data_dir: Path):
        self.data_dir = Path(data_dir)

    def path_for(self, key: str) -> Path:
        return self.data_dir / f"{key}.json"

    def load(self, key: str, default: Any) -> Any:
        target = self.path_for(key)
        if not target.exists():
            return default
        try:
            with target.open("r", encoding="utf-8") as handle:
                return json.load(handle, parse_float=Decimal)
        except (ValueError, OSError) as exc:
            # JSONDecodeError and UnicodeDecodeError are both ValueErrors
            logger.warning("Could not read %s, starting empty: %s", target, exc)
            return default

    def save(self, key: str, value: Any) -> bool:
        """Replace the stored value. Failures are logged, not raised."""
        target = self.path_for(key)
        temp_name: Optional[str] = None
        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            with tempfile.NamedTemporaryFile(
                "w",
                encoding="utf-8",
                dir=target.parent,
                prefix=f"{key}-",
                suffix=".tmp",
                delete=False,
            ) as handle:
                temp_name = handle.name
                json.dump(value, handle, indent=2, ensure_ascii=False)
            os.replace(temp_name, target)
        except (OSError, TypeError, ValueError) as exc:
            logger.error("Could not write %s: %s", target, exc)
            if temp_name and os.path.exists(temp_name):
                os.unlink(temp_name)
            return False
        logger.debug("Saved %s", target)
        return True


def load_expenses(store: JsonStore, tz: Optional[tzinfo] = None) -> Tuple[Expense, ...]:
    data = store.load(EXPENSES_KEY, [])
    if not isinstance(data, list):
        logger.warning("Stored expenses are not a list, ignoring them")
        return ()
    try:
        return tuple(expense_from_record(r, tz) for r in data)
    except (KeyError, TypeError, ValueError, InvalidOperation) as exc:
        logger.warning("Stored expenses are malformed, ignoring them: %s", exc)
        return ()


def save_expenses(store: JsonStore, expenses: Tuple[Expense, ...]) -> bool:
    return store.save(EXPENSES_KEY, [expense_to_record(e) for e in expenses])


def load_budgets(store: JsonStore) -> Dict[str, Decimal]:
    data = store.load(BUDGETS_KEY, {})
    if not isinstance(data, dict):
        logger.warning("Stored budgets are not a mapping, ignoring them")
        return {}
    try:
        return budgets_from_record(data)
    except (TypeError, ValueError, InvalidOperation) as exc:
        logger.warning("Stored budgets are malformed, ignoring them: %s", exc)
        return {}


def save_budgets(store: JsonStore, budgets: Dict[str, Decimal]) -> bool:
    return store.save(BUDGETS_KEY, budgets_to_record(budgets))
