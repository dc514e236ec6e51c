"""Publish/subscribe notifications for data changes.

Screens and commands that show budget figures subscribe to BUDGETS_CHANGED
and re-fetch when it fires.
"""

from datetime import datetime
from typing import Any, Callable, Dict, List, NamedTuple, Optional

from logger import get_logger

logger = get_logger()

BUDGETS_CHANGED = "budgets_changed"
TRANSACTIONS_CHANGED = "transactions_changed"


class Event(NamedTuple):
    name: str
    ts: str
    payload: dict


Handler = Callable[[Event], Any]


class EventBus:
    """Registry of handlers keyed by event name."""

    def __init__(self):
        self._subscribers: Dict[str, List[Handler]] = {}

    def subscribe(self, name: str, handler: Handler) -> None:
        self._subscribers.setdefault(name, []).append(handler)

    def unsubscribe(self, name: str, handler: Handler) -> None:
        handlers = self._subscribers.get(name, [])
        if handler in handlers:
            handlers.remove(handler)

    def publish(self, name: str, payload: Optional[dict] = None) -> List[Any]:
        """Deliver an event to every handler subscribed to its name.

        A failing handler is logged and does not prevent delivery to the rest.

        Returns:
            Results of the handlers that completed, in subscription order.
        """
        event = Event(name=name, ts=datetime.now().isoformat(), payload=payload or {})

        results = []
        # Copy so handlers may unsubscribe themselves while being called
        for handler in list(self._subscribers.get(name, [])):
            try:
                results.append(handler(event))
            except Exception as e:
                logger.error(f"Handler for '{name}' failed: {e}")
        return results
