# src/catalog_state/services/load_controller.py

"""Async load lifecycle for the catalog and recommendation collections."""

import asyncio
import logging
from collections.abc import Callable, Mapping, Sequence
from typing import Any

from catalog_state.errors import InvalidCommandError
from catalog_state.filters.item_validator import ItemValidator
from catalog_state.models.item import Item
from catalog_state.models.load_state import (
    Collection,
    LoadOutcome,
    LoadState,
    LoadStatus,
    LoadTicket,
)

logger = logging.getLogger("catalog_state.loader")

ItemSink = Callable[[Sequence[Item]], None]
LoadListener = Callable[[Collection, LoadState], None]
RecordFetcher = Callable[[], Sequence[Mapping[str, Any]]]

DEFAULT_FAILURE_REASONS: dict[Collection, str] = {
    Collection.CATALOG: "Failed to fetch catalog items",
    Collection.RECOMMENDATIONS: "Failed to fetch recommended items",
}


class LoadController:
    """Tracks idle → pending → fulfilled | rejected per collection.

    A fresh request is legal from any state.  Overlapping requests are
    never cancelled: whichever completes last decides the final state and
    data (last writer wins).  Successful batches are handed to the sink
    registered for the collection; a failure leaves earlier data alone.
    """

    def __init__(self, sinks: Mapping[Collection, ItemSink]) -> None:
        self._sinks = dict(sinks)
        self._states: dict[Collection, LoadState] = {
            c: LoadState() for c in Collection
        }
        self._issued: dict[Collection, int] = {c: 0 for c in Collection}
        self._outstanding: dict[Collection, int] = {
            c: 0 for c in Collection
        }
        self._listeners: list[LoadListener] = []

    def state(self, collection: Collection) -> LoadState:
        return self._states[collection]

    def states(self) -> dict[Collection, LoadState]:
        return dict(self._states)

    def outstanding(self, collection: Collection) -> int:
        """Number of requests begun but not yet completed."""
        return self._outstanding[collection]

    def add_listener(self, listener: LoadListener) -> None:
        """Call *listener(collection, state)* after every transition."""
        self._listeners.append(listener)

    # ── Transitions ──────────────────────────────────────

    def begin_load(self, collection: Collection) -> LoadTicket:
        """Move *collection* to pending and clear any earlier error."""
        self._issued[collection] += 1
        self._outstanding[collection] += 1
        ticket = LoadTicket(collection, self._issued[collection])
        logger.info(
            "Load #%d of %s started", ticket.sequence, collection.value
        )
        self._transition(collection, LoadState(status=LoadStatus.PENDING))
        return ticket

    def complete_load(
        self,
        collection: Collection,
        outcome: LoadOutcome,
    ) -> None:
        """Settle one outstanding request for *collection*.

        Raises :class:`InvalidCommandError` when no request is outstanding.
        A batch the sink refuses settles the request as rejected.
        """
        if self._outstanding[collection] == 0:
            msg = f"No outstanding load for {collection.value}"
            raise InvalidCommandError(msg)
        self._outstanding[collection] -= 1

        if outcome.ok:
            try:
                self._sinks[collection](outcome.items)
            except ValueError as exc:
                # Batch refused by the store; earlier data stays in place
                reason = str(exc) or DEFAULT_FAILURE_REASONS[collection]
                logger.warning(
                    "Load of %s rejected by store: %s",
                    collection.value,
                    reason,
                )
                self._transition(collection, LoadState.rejected(reason))
                return
            logger.info(
                "Load of %s fulfilled with %d items",
                collection.value,
                len(outcome.items),
            )
            self._transition(
                collection, LoadState(status=LoadStatus.FULFILLED)
            )
        else:
            reason = outcome.error or DEFAULT_FAILURE_REASONS[collection]
            logger.warning(
                "Load of %s rejected: %s", collection.value, reason
            )
            self._transition(collection, LoadState.rejected(reason))

    # ── Async driver ─────────────────────────────────────

    def run(
        self,
        collection: Collection,
        fetch: RecordFetcher,
    ) -> "asyncio.Task[LoadState]":
        """Begin a load now and settle it from a background task.

        *fetch* is a blocking callable returning raw item records; it runs
        in a worker thread.  The returned task resolves to the collection's
        state right after this load completed.  Must be called from a
        running event loop.
        """
        ticket = self.begin_load(collection)
        return asyncio.create_task(
            self._settle(ticket, fetch),
            name=f"load-{collection.value}-{ticket.sequence}",
        )

    async def _settle(
        self,
        ticket: LoadTicket,
        fetch: RecordFetcher,
    ) -> LoadState:
        collection = ticket.collection
        try:
            records = await asyncio.to_thread(fetch)
            items, _dropped = ItemValidator.parse(records)
        except Exception as exc:
            logger.error(
                "Load #%d of %s failed: %s",
                ticket.sequence,
                collection.value,
                exc,
                exc_info=exc,
            )
            reason = str(exc) or DEFAULT_FAILURE_REASONS[collection]
            self.complete_load(collection, LoadOutcome.failure(reason))
        else:
            self.complete_load(collection, LoadOutcome.success(items))
        return self._states[collection]

    def _transition(self, collection: Collection, state: LoadState) -> None:
        self._states[collection] = state
        for listener in list(self._listeners):
            listener(collection, state)
