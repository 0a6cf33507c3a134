"""The single owner of the expense list, the budget map and the UI selection.

Every user action goes through one method here; each mutation publishes an
event, and persistence runs as a subscribed handler.
"""

from __future__ import annotations

import logging
from datetime import datetime
from decimal import Decimal
from typing import Any, Callable, Dict, List, Optional, Tuple, Union

from moneyflow.advisory import GeminiAdvisor, should_request_advice
from moneyflow.aggregation import filter_by_period, group_items, total_of
from moneyflow.config import Settings
from moneyflow.domain import ConsolidatedGroup, Expense, MonthOption
from moneyflow.events import (
    BUDGET_UPDATED,
    EXPENSE_ADDED,
    EXPENSE_DELETED,
    EventBus,
    budget_alert_handler,
    persist_budgets_handler,
    persist_expenses_handler,
)
from moneyflow.formatting import format_amount
from moneyflow.functional import find_expense, validate_expense_input
from moneyflow.ledger import Amount, limit_for, set_limit
from moneyflow.memo import cached_consolidate
from moneyflow.periods import (
    current_period_key,
    default_period_key,
    format_period_key,
    list_months,
    list_years,
    parse_period_key,
    with_year,
)
from moneyflow.services import ReportService, default_report_service
from moneyflow.storage import JsonStore, load_budgets, load_expenses
from moneyflow.transforms import add_expense, delete_expense, description_suggestions, new_expense

logger = logging.getLogger(__name__)

# Expenses added to a month other than the current one get this timestamp.
SYNTHETIC_DAY = 15
SYNTHETIC_HOUR = 12


class BudgetSession:

    def __init__(
        self,
        store: JsonStore,
        settings: Settings,
        clock: Optional[Callable[[], datetime]] = None,
        advisor: Optional[GeminiAdvisor] = None,
        reports: Optional[ReportService] = None,
    ):
        self.store = store
        self.settings = settings
        self.clock = clock or (lambda: datetime.now(settings.tz))
        self.advisor = advisor or GeminiAdvisor.from_settings(settings)
        self.reports = reports or default_report_service()

        self.expenses: Tuple[Expense, ...] = load_expenses(store, settings.tz)
        self.budgets: Dict[str, Decimal] = load_budgets(store)
        logger.info("Loaded %d expenses and %d budgets", len(self.expenses), len(self.budgets))

        self.years: List[int] = list_years(settings.first_year, settings.year_count)
        self.selected_period = default_period_key(self.clock(), self.years)
        self.alerts: List[str] = []
        self.advice: Optional[str] = None
        self.advice_pending = False

        self.bus = EventBus()
        self.bus.subscribe(EXPENSE_ADDED, persist_expenses_handler(store))
        self.bus.subscribe(EXPENSE_DELETED, persist_expenses_handler(store))
        self.bus.subscribe(BUDGET_UPDATED, persist_budgets_handler(store))
        self.bus.subscribe(EXPENSE_ADDED, budget_alert_handler())
        self.bus.subscribe(BUDGET_UPDATED, budget_alert_handler())

    # --- selection

    @property
    def selected_year(self) -> int:
        return parse_period_key(self.selected_period)[1]

    def months(self) -> List[MonthOption]:
        return list_months(self.selected_year, self.settings.locale)

    def select_year(self, year: int) -> None:
        if year not in self.years:
            raise ValueError(f"Year {year} is not selectable")
        self.selected_period = with_year(self.selected_period, year)

    def select_month(self, month: Union[int, str]) -> None:
        """Accepts a full period key, or a month number for the selected year."""
        if isinstance(month, str) and "/" in month:
            parse_period_key(month)
            self.selected_period = month
        else:
            self.selected_period = format_period_key(int(month), self.selected_year)

    # --- queries

    def period_expenses(self) -> Tuple[Expense, ...]:
        return filter_by_period(self.expenses, self.selected_period, self.settings.tz)

    def total_spent(self) -> Decimal:
        return total_of(self.period_expenses())

    def current_limit(self) -> Decimal:
        return limit_for(self.selected_period, self.budgets)

    def consolidated(self) -> Tuple[ConsolidatedGroup, ...]:
        return cached_consolidate(self.period_expenses())

    def group_details(self, key: str) -> List[Expense]:
        return group_items(self.period_expenses(), key)

    def summary(self) -> Dict[str, Any]:
        return self.reports.period_report(self.selected_period, self.period_expenses(), self.budgets)

    def suggestions(self) -> List[str]:
        return description_suggestions(self.expenses)

    def budget_input_value(self) -> str:
        limit = self.current_limit()
        return format_amount(limit, self.settings.locale) if limit > 0 else ""

    # --- mutations

    def _expense_date(self) -> datetime:
        now = self.clock()
        if self.selected_period == current_period_key(now):
            return now
        month, year = parse_period_key(self.selected_period)
        return datetime(year, month, SYNTHETIC_DAY, SYNTHETIC_HOUR, 0, tzinfo=self.settings.tz)

    def _publish(self, name: str, payload: dict) -> None:
        payload.update(
            period_key=self.selected_period,
            limit=self.current_limit(),
            spent=self.total_spent(),
        )
        for result in self.bus.publish(name, payload):
            if "alert" in result:
                self.alerts.append(result["alert"])

    def add_expense(self, amount: Amount, description: str) -> Optional[Expense]:
        checked = validate_expense_input(amount, description)
        if checked.is_left():
            logger.debug("Rejected expense: %s", checked.get_error()["message"])
            return None

        value, text = checked.get_or_else(None)
        expense = new_expense(value, text, self._expense_date())
        self.expenses = add_expense(self.expenses, expense)
        logger.info("Added expense %s (%s) to %s", expense.id, value, self.selected_period)
        self._publish(EXPENSE_ADDED, {"expenses": self.expenses, "expense": expense})
        return expense

    def delete_expense(self, expense_id: str) -> bool:
        found = find_expense(self.expenses, expense_id)
        if not found.is_some():
            logger.debug("No expense with id %s", expense_id)
            return False

        self.expenses = delete_expense(self.expenses, expense_id)
        logger.info("Deleted expense %s", expense_id)
        self._publish(EXPENSE_DELETED, {"expenses": self.expenses, "expense": found.get_or_else(None)})
        return True

    def set_budget(self, amount: Amount) -> Decimal:
        self.budgets = set_limit(self.selected_period, amount, self.budgets)
        limit = self.budgets[self.selected_period]
        logger.info("Budget for %s set to %s", self.selected_period, limit)
        self._publish(BUDGET_UPDATED, {"budgets": self.budgets})
        return limit

    async def request_advice(self) -> Optional[str]:
        """Ask the advisor about the selected period.

        Returns None, without calling out, when there is nothing to analyse or
        a request is already in flight.
        """
        limit, spent = self.current_limit(), self.total_spent()
        if self.advice_pending or not should_request_advice(limit, spent):
            return None

        self.advice_pending = True
        try:
            self.advice = await self.advisor.advise(limit, spent, self.consolidated())
        finally:
            self.advice_pending = False
        return self.advice
