"""Change events published after committed writes."""

import logging
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Callable, List

logger = logging.getLogger(__name__)


class Collection(str, Enum):
    PRODUCTS = "products"
    SALES_ORDERS = "sales_orders"
    ORDERS = "orders"
    JOB_CARDS = "job_cards"
    USERS = "users"


class ChangeAction(str, Enum):
    CREATE = "CREATE"
    UPDATE = "UPDATE"
    DELETE = "DELETE"


@dataclass
class ChangeEvent:
    collection: Collection
    action: ChangeAction
    key: str  # business key of the record, e.g. "SO-0001" or "ORD-1001"
    data: dict[str, Any] | None = None  # None for deletes
    occurred_at: datetime = field(default_factory=datetime.utcnow)


class ChangeEventEmitter:
    """Event emitter for broadcasting record changes to listeners.

    Listeners are called synchronously, in subscription order, with every
    ChangeEvent emitted after a write has been committed.
    """

    def __init__(self) -> None:
        """Initialize an empty list of listeners."""
        self._listeners: List[Callable[[ChangeEvent], None]] = []

    def subscribe(self, listener: Callable[[ChangeEvent], None]) -> None:
        """Subscribe a listener to change events.

        Args:
            listener: A callable that accepts a ChangeEvent.

        Raises:
            ValueError: If the listener is already subscribed.
        """
        if listener in self._listeners:
            raise ValueError("Listener is already subscribed")
        self._listeners.append(listener)

    def unsubscribe(self, listener: Callable[[ChangeEvent], None]) -> None:
        """Unsubscribe a listener from change events.

        Args:
            listener: The listener to remove.

        Raises:
            ValueError: If the listener is not subscribed.
        """
        try:
            self._listeners.remove(listener)
        except ValueError:
            raise ValueError("Listener is not subscribed") from None

    def emit(self, event: ChangeEvent) -> None:
        """Emit a change event to all subscribed listeners.

        Args:
            event: The event to broadcast.
        """
        logger.debug(f"Change event: {event.action.value} {event.collection.value}/{event.key}")
        for listener in self._listeners:
            listener(event)

    def emit_many(self, events: List[ChangeEvent]) -> None:
        for event in events:
            self.emit(event)

    def __len__(self) -> int:
        return len(self._listeners)


# Process-wide emitter; the API publishes here and the live state store
# subscribes to it at startup.
change_emitter = ChangeEventEmitter()
