import logging
from datetime import datetime
from typing import Callable, Dict, List, NamedTuple

from moneyflow.ledger import AlertLevel, utilization_status
from moneyflow.storage import JsonStore, save_budgets, save_expenses

__all__ = [
    'EXPENSE_ADDED', 'EXPENSE_DELETED', 'BUDGET_UPDATED', 'Event', 'EventBus',
    'persist_expenses_handler', 'persist_budgets_handler', 'budget_alert_handler',
]

logger = logging.getLogger(__name__)

EXPENSE_ADDED = "EXPENSE_ADDED"
EXPENSE_DELETED = "EXPENSE_DELETED"
BUDGET_UPDATED = "BUDGET_UPDATED"


class Event(NamedTuple):
    name: str
    ts: str
    payload: dict


Handler = Callable[[Event, dict], dict]


class EventBus:
    def __init__(self):
        self._subscribers: Dict[str, List[Handler]] = {}

    def subscribe(self, name: str, handler: Handler) -> None:
        self._subscribers.setdefault(name, []).append(handler)

    def publish(self, name: str, payload: dict) -> List[dict]:
        handlers = self._subscribers.get(name, [])
        if not handlers:
            return []

        event = Event(name=name, ts=datetime.now().isoformat(), payload=payload)
        logger.debug("Publishing %s to %d handler(s)", name, len(handlers))
        return [handler(event, payload) for handler in handlers]

    def unsubscribe(self, name: str, handler: Handler) -> None:
        if handler in self._subscribers.get(name, []):
            self._subscribers[name].remove(handler)


def persist_expenses_handler(store: JsonStore) -> Handler:
    def _handler(event: Event, payload: dict) -> dict:
        return {"persisted": save_expenses(store, payload["expenses"])}

    return _handler


def persist_budgets_handler(store: JsonStore) -> Handler:
    def _handler(event: Event, payload: dict) -> dict:
        return {"persisted": save_budgets(store, payload["budgets"])}

    return _handler


def budget_alert_handler() -> Handler:
    """Report warning/critical utilization of the period touched by the event."""

    def _handler(event: Event, payload: dict) -> dict:
        limit = payload.get("limit")
        spent = payload.get("spent")
        if limit is None or spent is None:
            return {}

        status = utilization_status(limit, spent)
        if not status.show_alert:
            return {}

        period_key = payload.get("period_key", "")
        if status.level is AlertLevel.CRITICAL:
            message = f"Critical: {status.percent:.0f}% of the {period_key} budget is spent"
        else:
            message = f"Warning: {status.percent:.0f}% of the {period_key} budget is spent"
        logger.info(message)
        return {"alert": message, "level": status.level, "percent": status.percent}

    return _handler
