import logging
from typing import Any, Callable, Dict, Mapping, Sequence

from moneyflow.aggregation import consolidate, total_of
from moneyflow.domain import Expense
from moneyflow.ledger import balance, limit_for, utilization_status

logger = logging.getLogger(__name__)

Validator = Callable[[str, Sequence[Expense], Mapping[str, Any]], Sequence[str]]
Calculator = Callable[[str, Sequence[Expense], Mapping[str, Any], Dict[str, Any]], Dict[str, Any]]


class ReportService:
    """Builds the summary of one period from injected validators and calculators.

    validators: (period_key, expenses, budgets) -> messages
    calculators: (period_key, expenses, budgets, acc) -> partial result dict;
        ``acc`` holds everything computed by the calculators before it.

    ``expenses`` are the expenses already filtered to ``period_key``.
    """

    def __init__(self, validators: Sequence[Validator], calculators: Sequence[Calculator]):
        self.validators = validators
        self.calculators = calculators

    def period_report(self, period_key: str, expenses: Sequence[Expense], budgets: Mapping[str, Any]) -> Dict[str, Any]:
        report = {
            "period": period_key,
            "validation": [],
            "steps": [],
            "result": {},
        }

        for v in self.validators:
            try:
                msgs = v(period_key, expenses, budgets)
            except Exception as e:
                logger.exception("Validator %s failed", getattr(v, "__name__", v))
                msgs = [f"validator_error: {e}"]
            report["validation"].append({"validator": getattr(v, "__name__", str(v)), "messages": list(msgs)})

        acc: Dict[str, Any] = {}
        for calc in self.calculators:
            out = calc(period_key, expenses, budgets, acc)
            report["steps"].append({"calculator": getattr(calc, "__name__", str(calc)), "output": out})
            acc.update(out)

        report["result"] = acc
        return report


def validator_has_budget(period_key, expenses, budgets):
    if limit_for(period_key, budgets) <= 0:
        return [f"No budget set for {period_key}"]
    return []


def validator_has_expenses(period_key, expenses, budgets):
    if not expenses:
        return [f"No expenses recorded in {period_key}"]
    return []


def calc_total_spent(period_key, expenses, budgets, acc):
    return {"total_spent": total_of(expenses), "count": len(expenses)}


def calc_limit(period_key, expenses, budgets, acc):
    return {"limit": limit_for(period_key, budgets)}


def calc_balance(period_key, expenses, budgets, acc):
    return {"balance": balance(acc["limit"], acc["total_spent"])}


def calc_utilization(period_key, expenses, budgets, acc):
    status = utilization_status(acc["limit"], acc["total_spent"])
    return {"percent": status.percent, "status": status}


def calc_consolidation(period_key, expenses, budgets, acc):
    return {"consolidated": consolidate(expenses)}


def default_report_service() -> ReportService:
    return ReportService(
        validators=[validator_has_budget, validator_has_expenses],
        calculators=[calc_total_spent, calc_limit, calc_balance, calc_utilization, calc_consolidation],
    )
