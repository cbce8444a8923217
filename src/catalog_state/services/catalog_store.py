# src/catalog_state/services/catalog_store.py

"""Single source of truth for canonical items, criteria, cursor and view."""

import logging
from collections.abc import Sequence
from dataclasses import replace
from typing import Any

from catalog_state.errors import InvalidCommandError
from catalog_state.filters.catalog_filter import CatalogFilter
from catalog_state.models.criteria import FilterCriteria
from catalog_state.models.derived_view import DerivedView
from catalog_state.models.item import Item
from catalog_state.models.pagination import PaginationCursor

logger = logging.getLogger("catalog_state.store")


class CatalogStore:
    """Holds canonical items and derives the filtered, sorted view.

    Every mutating command computes the new derived view first and only
    then swaps it in together with the new inputs, so a reader never sees
    old items paired with new criteria (or the reverse).
    """

    def __init__(
        self,
        page_size: int | None = None,
    ) -> None:
        self._items: tuple[Item, ...] = ()
        self._recommendations: tuple[Item, ...] = ()
        self._criteria = FilterCriteria()
        self._cursor = (
            PaginationCursor(page_size=page_size)
            if page_size is not None
            else PaginationCursor()
        )
        self._view = DerivedView()

    # ── Read accessors ───────────────────────────────────

    @property
    def items(self) -> tuple[Item, ...]:
        return self._items

    @property
    def canonical_count(self) -> int:
        return len(self._items)

    @property
    def recommendations(self) -> tuple[Item, ...]:
        return self._recommendations

    @property
    def criteria(self) -> FilterCriteria:
        return self._criteria

    @property
    def cursor(self) -> PaginationCursor:
        return self._cursor

    @property
    def view(self) -> DerivedView:
        return self._view

    # ── Commands ─────────────────────────────────────────

    def replace_canonical_items(self, items: Sequence[Item]) -> None:
        """Replace the canonical collection and reset to page 1."""
        new_items = tuple(items)
        ids = [item.id for item in new_items]
        if len(ids) != len(set(ids)):
            msg = "Canonical items must have unique ids"
            raise InvalidCommandError(msg)

        view = CatalogFilter.apply(new_items, self._criteria)
        self._items, self._view = new_items, view
        self._cursor = replace(self._cursor, page=1)
        logger.info(
            "Loaded %d canonical items (%d match current criteria)",
            len(new_items),
            view.total_items,
        )

    def set_recommendations(self, items: Sequence[Item]) -> None:
        """Replace the recommendation snapshot; it is never filtered."""
        self._recommendations = tuple(items)
        logger.info(
            "Recommendations replaced (%d items)",
            len(self._recommendations),
        )

    def update_criteria(self, **changes: Any) -> None:
        """Merge *changes* into the criteria, reset to page 1, recompute.

        Fields left out keep their value; a field passed as ``None`` is
        cleared.  Invalid input raises before anything changes.
        """
        criteria = self._criteria.merged(**changes)
        self._apply_criteria(criteria)
        logger.debug("Criteria updated with %s", changes)

    def reset_criteria(self) -> None:
        """Clear every filter and the sort key, reset to page 1."""
        self._apply_criteria(FilterCriteria())
        logger.debug("Criteria reset")

    def set_pagination(
        self,
        page: int | None = None,
        page_size: int | None = None,
    ) -> None:
        """Merge page and/or page size without resetting the page."""
        changes: dict[str, int] = {}
        if page is not None:
            changes["page"] = page
        if page_size is not None:
            changes["page_size"] = page_size
        self._cursor = replace(self._cursor, **changes)

    def recompute(self) -> DerivedView:
        """Rebuild the derived view from the current items and criteria."""
        self._view = CatalogFilter.apply(self._items, self._criteria)
        return self._view

    # ── Private helpers ──────────────────────────────────

    def _apply_criteria(self, criteria: FilterCriteria) -> None:
        view = CatalogFilter.apply(self._items, criteria)
        self._criteria, self._view = criteria, view
        self._cursor = replace(self._cursor, page=1)
