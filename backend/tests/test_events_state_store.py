"""Tests for change events and the live state store."""

import pytest

from orderdesk.services.events import ChangeAction, ChangeEvent, ChangeEventEmitter, Collection
from orderdesk.services.state_store import LiveStateStore


class TestChangeEventEmitter:
    def test_listeners_receive_events_in_order(self):
        emitter = ChangeEventEmitter()
        seen = []
        emitter.subscribe(lambda e: seen.append(("first", e.key)))
        emitter.subscribe(lambda e: seen.append(("second", e.key)))

        emitter.emit(ChangeEvent(Collection.PRODUCTS, ChangeAction.CREATE, "1", {}))

        assert seen == [("first", "1"), ("second", "1")]

    def test_duplicate_subscription(self):
        emitter = ChangeEventEmitter()
        listener = lambda e: None  # noqa: E731
        emitter.subscribe(listener)
        with pytest.raises(ValueError):
            emitter.subscribe(listener)

    def test_unsubscribe(self):
        emitter = ChangeEventEmitter()
        seen = []
        emitter.subscribe(seen.append)
        emitter.unsubscribe(seen.append)
        emitter.emit(ChangeEvent(Collection.USERS, ChangeAction.DELETE, "bob"))

        assert seen == []
        assert len(emitter) == 0
        with pytest.raises(ValueError):
            emitter.unsubscribe(seen.append)


class TestLiveStateStore:
    @pytest.fixture
    def store(self):
        store = LiveStateStore(activity_log_size=3)
        store.load(Collection.SALES_ORDERS, [("SO-0001", {"status": "DRAFT"})])
        return store

    def test_load_replaces_snapshot(self, store):
        store.load(Collection.SALES_ORDERS, [("SO-0002", {"status": "CONFIRMED"})])
        assert list(store.snapshot(Collection.SALES_ORDERS)) == ["SO-0002"]

    def test_update_overwrites_record(self, store):
        store.apply(ChangeEvent(Collection.SALES_ORDERS, ChangeAction.UPDATE, "SO-0001", {"status": "COMPLETED"}))
        assert store.snapshot(Collection.SALES_ORDERS)["SO-0001"] == {"status": "COMPLETED"}

    def test_delete_removes_record(self, store):
        store.apply(ChangeEvent(Collection.SALES_ORDERS, ChangeAction.DELETE, "SO-0001"))
        assert store.count(Collection.SALES_ORDERS) == 0

    def test_snapshot_is_a_copy(self, store):
        store.snapshot(Collection.SALES_ORDERS).clear()
        assert store.count(Collection.SALES_ORDERS) == 1

    def test_collections_are_independent(self, store):
        store.apply(ChangeEvent(Collection.ORDERS, ChangeAction.CREATE, "ORD-1001", {"status": "PENDING"}))
        assert store.count(Collection.SALES_ORDERS) == 1
        assert store.records(Collection.ORDERS) == [{"status": "PENDING"}]

    def test_subscriber_gets_current_then_changes(self, store):
        seen = []
        unsubscribe = store.subscribe(Collection.SALES_ORDERS, lambda c, s: seen.append(sorted(s)))

        store.apply(ChangeEvent(Collection.SALES_ORDERS, ChangeAction.CREATE, "SO-0002", {}))
        store.apply(ChangeEvent(Collection.JOB_CARDS, ChangeAction.CREATE, "JC-5001", {}))
        unsubscribe()
        store.apply(ChangeEvent(Collection.SALES_ORDERS, ChangeAction.CREATE, "SO-0003", {}))

        assert seen == [["SO-0001"], ["SO-0001", "SO-0002"]]

    def test_activity_is_bounded_and_newest_first(self, store):
        for n in range(5):
            store.apply(ChangeEvent(Collection.ORDERS, ChangeAction.CREATE, f"ORD-{n}", {}))

        assert [e.key for e in store.recent_activity()] == ["ORD-4", "ORD-3", "ORD-2"]
        assert [e.key for e in store.recent_activity(1)] == ["ORD-4"]

    def test_emitter_drives_store(self):
        emitter = ChangeEventEmitter()
        store = LiveStateStore()
        emitter.subscribe(store.apply)

        emitter.emit(ChangeEvent(Collection.PRODUCTS, ChangeAction.CREATE, "7", {"product_name": "Spring"}))

        assert store.snapshot(Collection.PRODUCTS) == {"7": {"product_name": "Spring"}}
