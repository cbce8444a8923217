# src/catalog_state/models/item.py

"""Catalog item data model."""

from dataclasses import dataclass
from datetime import datetime

from catalog_state.config.settings import Settings


@dataclass(frozen=True)
class Item:
    """A single catalog item as held by the store.

    ``original_price`` is advisory only: nothing requires it to exceed
    ``price``.  Use :attr:`is_marked_down` before showing a strike-through.
    """

    id: int
    name: str
    price: float
    category: str
    created_at: datetime
    description: str = ""
    tags: tuple[str, ...] = ()
    rating: float = 0.0
    sales: int = 0
    in_stock: bool = True
    original_price: float | None = None
    discount: float | None = None
    image: str = ""

    def __post_init__(self) -> None:
        if isinstance(self.id, bool) or not isinstance(self.id, int):
            msg = f"Item id must be an int, got {self.id!r}"
            raise ValueError(msg)
        if not self.price > 0:
            msg = f"Item {self.id} price must be positive, got {self.price!r}"
            raise ValueError(msg)
        if self.category not in Settings.CATEGORIES:
            msg = f"Item {self.id} has unknown category {self.category!r}"
            raise ValueError(msg)
        if not 0.0 <= self.rating <= 5.0 or (self.rating * 2) % 1:
            msg = (
                f"Item {self.id} rating must be 0.0-5.0 in half steps, "
                f"got {self.rating!r}"
            )
            raise ValueError(msg)
        if (
            isinstance(self.sales, bool)
            or not isinstance(self.sales, int)
            or self.sales < 0
        ):
            msg = f"Item {self.id} sales must be an int >= 0, got {self.sales!r}"
            raise ValueError(msg)
        if not isinstance(self.created_at, datetime):
            msg = f"Item {self.id} created_at must be a datetime"
            raise ValueError(msg)
        if self.created_at.tzinfo is None:
            msg = f"Item {self.id} created_at must be timezone-aware"
            raise ValueError(msg)
        if isinstance(self.tags, (list, set, frozenset)):
            object.__setattr__(self, "tags", tuple(self.tags))
        if not isinstance(self.tags, tuple) or not all(
            isinstance(tag, str) for tag in self.tags
        ):
            msg = f"Item {self.id} tags must be strings, got {self.tags!r}"
            raise ValueError(msg)

    @property
    def is_marked_down(self) -> bool:
        """True when an original price is present and above the current one."""
        return (
            self.original_price is not None
            and self.original_price > self.price
        )
