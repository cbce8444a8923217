# src/catalog_state/services/cart_aggregator.py

"""Cart quantity ledger."""

import logging
from dataclasses import dataclass

from catalog_state.errors import InvalidCommandError

logger = logging.getLogger("catalog_state.cart")


@dataclass(frozen=True)
class CartLine:
    """One ledger entry."""

    item_id: int
    quantity: int


class CartAggregator:
    """Accumulates requested quantities per item id.

    Adding to an id that is already present increments its quantity;
    there is no removal.
    """

    def __init__(self) -> None:
        self._ledger: dict[int, int] = {}

    def add_quantity(self, item_id: int, quantity: int) -> int:
        """Add *quantity* of *item_id* and return the new stored quantity.

        Raises :class:`InvalidCommandError` unless *quantity* is a positive
        int; the ledger is left unchanged in that case.
        """
        if isinstance(quantity, bool) or not isinstance(quantity, int):
            msg = f"Cart quantity must be an int, got {quantity!r}"
            raise InvalidCommandError(msg)
        if quantity <= 0:
            msg = f"Cart quantity must be positive, got {quantity}"
            raise InvalidCommandError(msg)

        total = self._ledger.get(item_id, 0) + quantity
        self._ledger[item_id] = total
        logger.info(
            "Added %d x item %s to cart (now %d)", quantity, item_id, total
        )
        return total

    def quantity_of(self, item_id: int) -> int:
        return self._ledger.get(item_id, 0)

    @property
    def total_quantity(self) -> int:
        """Sum of all quantities (the cart badge count)."""
        return sum(self._ledger.values())

    def lines(self) -> tuple[CartLine, ...]:
        return tuple(
            CartLine(item_id=item_id, quantity=qty)
            for item_id, qty in self._ledger.items()
        )

    def as_dict(self) -> dict[int, int]:
        """Copy of the ledger; mutating it does not touch the cart."""
        return dict(self._ledger)
