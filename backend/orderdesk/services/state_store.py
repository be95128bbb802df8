"""Live state store for dashboard views.

The store keeps one snapshot (key -> record dict) per collection. It is
hydrated once from the database and then kept current by reducing the
ChangeEvents published after each write. Views subscribe per collection
and receive the whole snapshot whenever it changes.
"""

import logging
from collections import deque
from typing import Any, Callable, Dict, Iterable, List

from orderdesk.services.events import ChangeAction, ChangeEvent, Collection

logger = logging.getLogger(__name__)

Snapshot = Dict[str, Dict[str, Any]]
SnapshotListener = Callable[[Collection, Snapshot], None]


class LiveStateStore:
    """Single source of truth for live collection snapshots."""

    def __init__(self, activity_log_size: int = 50) -> None:
        self._snapshots: Dict[Collection, Snapshot] = {c: {} for c in Collection}
        self._listeners: Dict[Collection, List[SnapshotListener]] = {c: [] for c in Collection}
        self._activity: deque[ChangeEvent] = deque(maxlen=activity_log_size)

    def load(self, collection: Collection, records: Iterable[tuple[str, Dict[str, Any]]]) -> None:
        """Replace a collection snapshot with freshly loaded records.

        Args:
            collection: Collection to hydrate
            records: (key, record) pairs
        """
        self._snapshots[collection] = {key: dict(data) for key, data in records}
        logger.info(f"Hydrated {collection.value} with {len(self._snapshots[collection])} records")
        self._notify(collection)

    def apply(self, event: ChangeEvent) -> None:
        """Reduce one change event into the matching snapshot.

        This is the listener registered on the ChangeEventEmitter.
        """
        snapshot = self._snapshots[event.collection]
        if event.action == ChangeAction.DELETE:
            snapshot.pop(event.key, None)
        else:
            snapshot[event.key] = dict(event.data or {})
        self._activity.append(event)
        self._notify(event.collection)

    def snapshot(self, collection: Collection) -> Snapshot:
        return dict(self._snapshots[collection])

    def records(self, collection: Collection) -> List[Dict[str, Any]]:
        return list(self._snapshots[collection].values())

    def count(self, collection: Collection) -> int:
        return len(self._snapshots[collection])

    def recent_activity(self, limit: int | None = None) -> List[ChangeEvent]:
        """Most recent change events first."""
        events = list(reversed(self._activity))
        return events[:limit] if limit is not None else events

    def subscribe(self, collection: Collection, listener: SnapshotListener) -> Callable[[], None]:
        """Subscribe to snapshot changes of one collection.

        The listener is called immediately with the current snapshot.

        Returns:
            A callable that removes the subscription.
        """
        if listener in self._listeners[collection]:
            raise ValueError("Listener is already subscribed")
        self._listeners[collection].append(listener)
        listener(collection, self.snapshot(collection))

        def unsubscribe() -> None:
            if listener in self._listeners[collection]:
                self._listeners[collection].remove(listener)

        return unsubscribe

    def _notify(self, collection: Collection) -> None:
        if not self._listeners[collection]:
            return
        snapshot = self.snapshot(collection)
        for listener in list(self._listeners[collection]):
            listener(collection, snapshot)
