# src/catalog_state/services/catalog_engine.py

"""Composition point wiring store, loader, cart and projector together."""

import asyncio
import logging
from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Any

from catalog_state.models.criteria import FilterCriteria
from catalog_state.models.derived_view import DerivedView
from catalog_state.models.item import Item
from catalog_state.models.load_state import (
    Collection,
    LoadOutcome,
    LoadState,
    LoadTicket,
)
from catalog_state.models.pagination import PaginationCursor
from catalog_state.services.cart_aggregator import CartAggregator
from catalog_state.services.catalog_store import CatalogStore
from catalog_state.services.load_controller import LoadController
from catalog_state.services.view_projector import (
    ContentState,
    PresentationMode,
    ViewProjector,
)
from catalog_state.sources.base_source import CatalogSource

logger = logging.getLogger("catalog_state.engine")


@dataclass(frozen=True)
class CatalogSnapshot:
    """Consistent read-only copy of everything a presentation layer reads."""

    canonical_count: int
    view: DerivedView
    criteria: FilterCriteria
    cursor: PaginationCursor
    load_states: dict[Collection, LoadState]
    cart: dict[int, int]
    recommendations: tuple[Item, ...] = field(default=())

    @property
    def total_items(self) -> int:
        return self.view.total_items


class CatalogEngine:
    """Owns one store and one cart for the lifetime of the caller.

    Construct it explicitly (optionally injecting a pre-built store or
    cart) and pass it to whatever renders the catalog.
    """

    def __init__(
        self,
        store: CatalogStore | None = None,
        cart: CartAggregator | None = None,
    ) -> None:
        self.store = store or CatalogStore()
        self.cart = cart or CartAggregator()
        self.loader = LoadController(
            {
                Collection.CATALOG: self.store.replace_canonical_items,
                Collection.RECOMMENDATIONS: self.store.set_recommendations,
            }
        )

    # ── Reads ────────────────────────────────────────────

    def snapshot(self) -> CatalogSnapshot:
        return CatalogSnapshot(
            canonical_count=self.store.canonical_count,
            view=self.store.view,
            criteria=self.store.criteria,
            cursor=self.store.cursor,
            load_states=self.loader.states(),
            cart=self.cart.as_dict(),
            recommendations=self.store.recommendations,
        )

    def current_page(self) -> tuple[Item, ...]:
        return ViewProjector.page_slice(self.store.view, self.store.cursor)

    def page_count(self) -> int:
        return ViewProjector.page_count(
            self.store.view.total_items, self.store.cursor.page_size
        )

    def presentation_mode(self) -> PresentationMode:
        return ViewProjector.presentation_mode(self.store.view.total_items)

    def content_state(self) -> ContentState:
        return ViewProjector.content_state(
            self.loader.state(Collection.CATALOG),
            self.store.canonical_count,
            self.store.view.total_items,
        )

    # ── Commands ─────────────────────────────────────────

    def replace_canonical_items(self, items: Sequence[Item]) -> None:
        self.store.replace_canonical_items(items)

    def set_recommendations(self, items: Sequence[Item]) -> None:
        self.store.set_recommendations(items)

    def update_criteria(self, **changes: Any) -> None:
        self.store.update_criteria(**changes)

    def reset_criteria(self) -> None:
        self.store.reset_criteria()

    def set_pagination(
        self,
        page: int | None = None,
        page_size: int | None = None,
    ) -> None:
        self.store.set_pagination(page=page, page_size=page_size)

    def add_to_cart(self, item_id: int, quantity: int = 1) -> int:
        return self.cart.add_quantity(item_id, quantity)

    def begin_load(self, collection: Collection) -> LoadTicket:
        return self.loader.begin_load(collection)

    def complete_load(
        self,
        collection: Collection,
        outcome: LoadOutcome,
    ) -> None:
        self.loader.complete_load(collection, outcome)

    # ── Async loads ──────────────────────────────────────

    async def load_catalog(self, source: CatalogSource) -> LoadState:
        return await self.loader.run(Collection.CATALOG, source.fetch_items)

    async def load_recommendations(self, source: CatalogSource) -> LoadState:
        return await self.loader.run(
            Collection.RECOMMENDATIONS, source.fetch_recommendations
        )

    async def load_all(
        self,
        source: CatalogSource,
    ) -> dict[Collection, LoadState]:
        """Load catalog and recommendations concurrently."""
        catalog_result, recommendation_result = await asyncio.gather(
            self.load_catalog(source),
            self.load_recommendations(source),
        )
        logger.info(
            "Initial load finished (catalog=%s, recommendations=%s)",
            catalog_result.status.value,
            recommendation_result.status.value,
        )
        return {
            Collection.CATALOG: catalog_result,
            Collection.RECOMMENDATIONS: recommendation_result,
        }
