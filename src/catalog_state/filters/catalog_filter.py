# src/catalog_state/filters/catalog_filter.py

"""Filtering and sorting of canonical items into a derived view."""

import logging
from collections.abc import Callable, Sequence
from typing import Any

from catalog_state.models.criteria import FilterCriteria, SortKey
from catalog_state.models.derived_view import DerivedView
from catalog_state.models.item import Item

logger = logging.getLogger("catalog_state.filters")

# Sort key → (key function, descending)
_ORDERS: dict[SortKey, tuple[Callable[[Item], Any], bool]] = {
    SortKey.PRICE_ASC: (lambda i: i.price, False),
    SortKey.PRICE_DESC: (lambda i: i.price, True),
    SortKey.RATING_DESC: (lambda i: i.rating, True),
    SortKey.SALES_DESC: (lambda i: i.sales, True),
    SortKey.NEWEST: (lambda i: i.created_at, True),
}


class CatalogFilter:
    """Pure recomputation of the derived view from items and criteria."""

    @staticmethod
    def matches(item: Item, criteria: FilterCriteria) -> bool:
        """Return True when *item* satisfies every present predicate."""
        if criteria.category is not None and item.category != criteria.category:
            return False
        if criteria.min_price is not None and item.price < criteria.min_price:
            return False
        if criteria.max_price is not None and item.price > criteria.max_price:
            return False
        if criteria.search_term:
            term = criteria.search_term.lower()
            if (
                term not in item.name.lower()
                and term not in item.description.lower()
            ):
                return False
        if criteria.tags and not any(
            tag in item.tags for tag in criteria.tags
        ):
            return False
        if criteria.in_stock_only and not item.in_stock:
            return False
        return True

    @staticmethod
    def sort(
        items: Sequence[Item],
        sort_key: SortKey | None,
    ) -> list[Item]:
        """Stable-sort *items* by *sort_key*; no key keeps input order."""
        order = _ORDERS.get(sort_key) if sort_key is not None else None
        if order is None:
            return list(items)
        key_fn, descending = order
        # sorted() keeps ties in input order, also with reverse=True
        return sorted(items, key=key_fn, reverse=descending)

    @staticmethod
    def apply(
        items: Sequence[Item],
        criteria: FilterCriteria,
    ) -> DerivedView:
        """Filter conjunctively, then sort, returning a new view."""
        kept = [
            item for item in items
            if CatalogFilter.matches(item, criteria)
        ]
        excluded = len(items) - len(kept)
        if excluded:
            logger.debug(
                "Criteria excluded %d of %d items", excluded, len(items)
            )
        return DerivedView(
            items=tuple(CatalogFilter.sort(kept, criteria.sort_key))
        )
