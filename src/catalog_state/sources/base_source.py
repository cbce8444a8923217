# src/catalog_state/sources/base_source.py

"""Abstract base class for item record suppliers."""

import logging
from abc import ABC, abstractmethod
from typing import Any

ItemRecord = dict[str, Any]


class CatalogSource(ABC):
    """Supplies raw item records for the catalog and recommendation feeds.

    Both methods are blocking; the load controller runs them in a worker
    thread.  Records use the camelCase wire keys understood by
    :class:`~catalog_state.filters.item_validator.ItemValidator`.
    """

    def __init__(self, source_name: str) -> None:
        self.source_name = source_name
        self.logger = logging.getLogger(
            f"catalog_state.sources.{source_name}"
        )

    @abstractmethod
    def fetch_items(self) -> list[ItemRecord]:
        """Return the full catalog as raw records."""

    @abstractmethod
    def fetch_recommendations(self) -> list[ItemRecord]:
        """Return the recommendation feed as raw records."""
