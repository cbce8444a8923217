# src/catalog_state/services/view_projector.py

"""Page slicing and presentation-strategy decisions over a derived view.

Everything here is a pure function of its arguments; nothing reads or
writes store state.
"""

import math
from collections.abc import Sequence
from enum import Enum

from catalog_state.config.settings import Settings
from catalog_state.models.derived_view import DerivedView
from catalog_state.models.item import Item
from catalog_state.models.load_state import LoadState, LoadStatus
from catalog_state.models.pagination import PaginationCursor


class PresentationMode(str, Enum):
    PAGED = "paged"
    VIRTUALIZED = "virtualized"


class ContentState(str, Enum):
    """What a list area should show instead of, or as, the items."""

    PLACEHOLDER = "placeholder"  # still loading, nothing to show yet
    FAILED = "failed"            # load rejected, nothing to show
    EMPTY = "empty"              # loaded, but no item matches
    ITEMS = "items"


class ViewProjector:
    """Projects a derived view onto what a caller renders."""

    @staticmethod
    def page_slice(
        view: DerivedView,
        cursor: PaginationCursor,
    ) -> tuple[Item, ...]:
        """Return the items on ``cursor.page``; empty when past the end."""
        start = cursor.offset
        return view.items[start:start + cursor.page_size]

    @staticmethod
    def page_count(total_items: int, page_size: int) -> int:
        return math.ceil(total_items / page_size) if total_items else 0

    @staticmethod
    def presentation_mode(
        total_items: int,
        threshold: int = Settings.VIRTUALIZATION_THRESHOLD,
    ) -> PresentationMode:
        """Virtualized when the total exceeds *threshold*, else paged."""
        if total_items > threshold:
            return PresentationMode.VIRTUALIZED
        return PresentationMode.PAGED

    @staticmethod
    def items_per_row(viewport_width: int) -> int:
        """Grid columns for a viewport width, using the row breakpoints."""
        for max_width, per_row in Settings.ROW_BREAKPOINTS:
            if viewport_width < max_width:
                return per_row
        return Settings.MAX_ITEMS_PER_ROW

    @staticmethod
    def row_count(total_items: int, items_per_row: int) -> int:
        return math.ceil(total_items / items_per_row) if total_items else 0

    @staticmethod
    def rows(
        items: Sequence[Item],
        items_per_row: int,
        start_row: int = 0,
        stop_row: int | None = None,
    ) -> list[tuple[Item, ...]]:
        """Group *items* into rows ``start_row`` to ``stop_row`` (exclusive)."""
        total_rows = ViewProjector.row_count(len(items), items_per_row)
        stop = total_rows if stop_row is None else min(stop_row, total_rows)
        return [
            tuple(items[row * items_per_row:(row + 1) * items_per_row])
            for row in range(max(start_row, 0), stop)
        ]

    @staticmethod
    def carousel_slides(
        items: Sequence[Item],
        per_slide: int = Settings.CAROUSEL_ITEMS_PER_SLIDE,
    ) -> list[tuple[Item, ...]]:
        """Split recommendations into fixed-size carousel slides."""
        return [
            tuple(items[i:i + per_slide])
            for i in range(0, len(items), per_slide)
        ]

    @staticmethod
    def content_state(
        load_state: LoadState,
        canonical_count: int,
        total_items: int,
    ) -> ContentState:
        """Tell "still loading" apart from "loaded but empty"."""
        if canonical_count == 0:
            if load_state.status is LoadStatus.PENDING:
                return ContentState.PLACEHOLDER
            if load_state.status is LoadStatus.REJECTED:
                return ContentState.FAILED
        if total_items == 0:
            return ContentState.EMPTY
        return ContentState.ITEMS
