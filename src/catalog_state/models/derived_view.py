# src/catalog_state/models/derived_view.py

"""Filtered and sorted projection of the canonical items."""

from dataclasses import dataclass

from catalog_state.models.item import Item


@dataclass(frozen=True)
class DerivedView:
    """Immutable result of applying criteria to the canonical items."""

    items: tuple[Item, ...] = ()

    @property
    def total_items(self) -> int:
        """Number of items that passed every filter."""
        return len(self.items)

    @property
    def ids(self) -> tuple[int, ...]:
        """Identities in view order."""
        return tuple(item.id for item in self.items)
