# tests/test_load_controller.py

"""Tests for the async load lifecycle."""

import asyncio
import threading
import unittest
from collections.abc import Sequence
from datetime import datetime, timezone
from typing import Any

from catalog_state.errors import InvalidCommandError
from catalog_state.models.item import Item
from catalog_state.models.load_state import (
    Collection,
    LoadOutcome,
    LoadState,
    LoadStatus,
)
from catalog_state.services.catalog_store import CatalogStore
from catalog_state.services.load_controller import LoadController


def _make_item(item_id: int) -> Item:
    return Item(
        id=item_id,
        name=f"Item {item_id}",
        price=10.0,
        category="home",
        created_at=datetime(2026, 1, 1, tzinfo=timezone.utc),
    )


def _record(item_id: int) -> dict[str, Any]:
    return {
        "id": item_id,
        "name": f"Item {item_id}",
        "price": 10,
        "category": "home",
        "createdAt": "2026-01-01T00:00:00+00:00",
    }


class _Sinks:
    """Records every batch delivered per collection."""

    def __init__(self) -> None:
        self.delivered: dict[Collection, list[tuple[int, ...]]] = {
            c: [] for c in Collection
        }

    def sink(self, collection: Collection):  # type: ignore[no-untyped-def]
        def deliver(items: Sequence[Item]) -> None:
            self.delivered[collection].append(tuple(i.id for i in items))
        return deliver

    def controller(self) -> LoadController:
        return LoadController({c: self.sink(c) for c in Collection})


class TestTransitions(unittest.TestCase):
    """Synchronous begin/complete transitions."""

    def setUp(self) -> None:
        self.sinks = _Sinks()
        self.loader = self.sinks.controller()

    def test_starts_idle(self) -> None:
        for collection in Collection:
            self.assertEqual(self.loader.state(collection), LoadState())

    def test_begin_moves_to_pending(self) -> None:
        ticket = self.loader.begin_load(Collection.CATALOG)
        self.assertTrue(self.loader.state(Collection.CATALOG).is_pending)
        self.assertEqual(ticket.sequence, 1)
        self.assertEqual(
            self.loader.state(Collection.RECOMMENDATIONS).status,
            LoadStatus.IDLE,
        )

    def test_success_delivers_and_fulfils(self) -> None:
        self.loader.begin_load(Collection.CATALOG)
        self.loader.complete_load(
            Collection.CATALOG, LoadOutcome.success([_make_item(1)])
        )
        self.assertEqual(
            self.loader.state(Collection.CATALOG).status, LoadStatus.FULFILLED
        )
        self.assertEqual(self.sinks.delivered[Collection.CATALOG], [(1,)])

    def test_recommendations_routed_to_own_sink(self) -> None:
        self.loader.begin_load(Collection.RECOMMENDATIONS)
        self.loader.complete_load(
            Collection.RECOMMENDATIONS, LoadOutcome.success([_make_item(4)])
        )
        self.assertEqual(self.sinks.delivered[Collection.RECOMMENDATIONS], [(4,)])
        self.assertEqual(self.sinks.delivered[Collection.CATALOG], [])

    def test_failure_rejects_with_reason_and_delivers_nothing(self) -> None:
        self.loader.begin_load(Collection.CATALOG)
        self.loader.complete_load(
            Collection.CATALOG, LoadOutcome.failure("network down")
        )
        state = self.loader.state(Collection.CATALOG)
        self.assertEqual(state.status, LoadStatus.REJECTED)
        self.assertEqual(state.error, "network down")
        self.assertEqual(self.sinks.delivered[Collection.CATALOG], [])

    def test_empty_reason_gets_default(self) -> None:
        self.loader.begin_load(Collection.RECOMMENDATIONS)
        self.loader.complete_load(
            Collection.RECOMMENDATIONS, LoadOutcome.failure("")
        )
        self.assertEqual(
            self.loader.state(Collection.RECOMMENDATIONS).error,
            "Failed to fetch recommended items",
        )

    def test_fresh_request_clears_error(self) -> None:
        self.loader.begin_load(Collection.CATALOG)
        self.loader.complete_load(Collection.CATALOG, LoadOutcome.failure("x"))
        self.loader.begin_load(Collection.CATALOG)
        state = self.loader.state(Collection.CATALOG)
        self.assertTrue(state.is_pending)
        self.assertIsNone(state.error)

    def test_complete_without_request_rejected(self) -> None:
        with self.assertRaises(InvalidCommandError):
            self.loader.complete_load(
                Collection.CATALOG, LoadOutcome.success([])
            )
        self.assertEqual(
            self.loader.state(Collection.CATALOG).status, LoadStatus.IDLE
        )

    def test_batch_refused_by_store_settles_as_rejected(self) -> None:
        store = CatalogStore()
        store.replace_canonical_items([_make_item(9)])
        loader = LoadController(
            {
                Collection.CATALOG: store.replace_canonical_items,
                Collection.RECOMMENDATIONS: store.set_recommendations,
            }
        )
        loader.begin_load(Collection.CATALOG)
        loader.complete_load(
            Collection.CATALOG,
            LoadOutcome.success([_make_item(1), _make_item(1)]),
        )
        state = loader.state(Collection.CATALOG)
        self.assertEqual(state.status, LoadStatus.REJECTED)
        self.assertIn("unique ids", state.error or "")
        self.assertEqual(loader.outstanding(Collection.CATALOG), 0)
        self.assertEqual([i.id for i in store.items], [9])

        # A retry goes through normally
        loader.begin_load(Collection.CATALOG)
        loader.complete_load(
            Collection.CATALOG, LoadOutcome.success([_make_item(2)])
        )
        self.assertEqual(
            loader.state(Collection.CATALOG).status, LoadStatus.FULFILLED
        )
        self.assertEqual([i.id for i in store.items], [2])

    def test_no_return_to_pending_without_request(self) -> None:
        self.loader.begin_load(Collection.CATALOG)
        self.loader.complete_load(Collection.CATALOG, LoadOutcome.success([]))
        with self.assertRaises(InvalidCommandError):
            self.loader.complete_load(
                Collection.CATALOG, LoadOutcome.success([])
            )

    def test_overlapping_loads_last_completion_wins(self) -> None:
        self.loader.begin_load(Collection.CATALOG)
        self.loader.begin_load(Collection.CATALOG)
        self.assertEqual(self.loader.outstanding(Collection.CATALOG), 2)
        # Second request finishes first, then the first one lands
        self.loader.complete_load(
            Collection.CATALOG, LoadOutcome.success([_make_item(2)])
        )
        self.loader.complete_load(
            Collection.CATALOG, LoadOutcome.failure("late failure")
        )
        self.assertEqual(
            self.loader.state(Collection.CATALOG).status, LoadStatus.REJECTED
        )
        self.assertEqual(self.sinks.delivered[Collection.CATALOG], [(2,)])
        self.assertEqual(self.loader.outstanding(Collection.CATALOG), 0)

    def test_listeners_see_every_transition(self) -> None:
        seen: list[tuple[Collection, LoadStatus]] = []
        self.loader.add_listener(lambda c, s: seen.append((c, s.status)))
        self.loader.begin_load(Collection.CATALOG)
        self.loader.complete_load(Collection.CATALOG, LoadOutcome.success([]))
        self.assertEqual(
            seen,
            [
                (Collection.CATALOG, LoadStatus.PENDING),
                (Collection.CATALOG, LoadStatus.FULFILLED),
            ],
        )


class TestRun(unittest.IsolatedAsyncioTestCase):
    """LoadController.run async driver."""

    def setUp(self) -> None:
        self.sinks = _Sinks()
        self.loader = self.sinks.controller()

    async def test_run_is_pending_until_fetch_returns(self) -> None:
        release = threading.Event()

        def fetch() -> list[dict[str, Any]]:
            release.wait(timeout=5)
            return [_record(1), _record(2)]

        task = self.loader.run(Collection.CATALOG, fetch)
        self.assertTrue(self.loader.state(Collection.CATALOG).is_pending)
        release.set()
        state = await task
        self.assertEqual(state.status, LoadStatus.FULFILLED)
        self.assertEqual(self.sinks.delivered[Collection.CATALOG], [(1, 2)])

    async def test_run_parses_and_drops_bad_records(self) -> None:
        bad = {"id": 3, "name": "Bad"}
        state = await self.loader.run(
            Collection.CATALOG, lambda: [_record(1), bad]
        )
        self.assertEqual(state.status, LoadStatus.FULFILLED)
        self.assertEqual(self.sinks.delivered[Collection.CATALOG], [(1,)])

    async def test_run_exception_becomes_rejection(self) -> None:
        def fetch() -> list[dict[str, Any]]:
            msg = "Connection timeout"
            raise ConnectionError(msg)

        state = await self.loader.run(Collection.CATALOG, fetch)
        self.assertEqual(state.status, LoadStatus.REJECTED)
        self.assertEqual(state.error, "Connection timeout")

    async def test_run_exception_without_message_uses_default(self) -> None:
        def fetch() -> list[dict[str, Any]]:
            raise RuntimeError

        state = await self.loader.run(Collection.CATALOG, fetch)
        self.assertEqual(state.error, "Failed to fetch catalog items")

    async def test_run_tasks_complete_out_of_order(self) -> None:
        """A slow first load landing after a fast second one wins."""
        slow_gate = threading.Event()

        def slow() -> list[dict[str, Any]]:
            slow_gate.wait(timeout=5)
            return [_record(1)]

        first = self.loader.run(Collection.CATALOG, slow)
        second = self.loader.run(Collection.CATALOG, lambda: [_record(2)])
        await second
        slow_gate.set()
        await first
        self.assertEqual(
            self.sinks.delivered[Collection.CATALOG], [(2,), (1,)]
        )

    async def test_run_returns_task(self) -> None:
        task = self.loader.run(Collection.RECOMMENDATIONS, lambda: [])
        self.assertIsInstance(task, asyncio.Task)
        await task


if __name__ == "__main__":
    unittest.main()
