# src/catalog_state/sources/json_file_source.py

"""Item records read from a local JSON file."""

import json
from pathlib import Path
from typing import Any

from catalog_state.sources.base_source import CatalogSource, ItemRecord


def extract_records(payload: Any) -> list[ItemRecord]:
    """Accept either a bare JSON array or an object with an ``items`` array."""
    if isinstance(payload, dict) and "items" in payload:
        payload = payload["items"]
    if not isinstance(payload, list):
        msg = "Expected a JSON array of item records"
        raise ValueError(msg)
    return payload


class JsonFileCatalogSource(CatalogSource):
    """Reads the catalog, and optionally recommendations, from JSON files.

    Without a recommendations file the feed is the first
    ``recommendation_count`` catalog records.
    """

    def __init__(
        self,
        items_path: Path,
        recommendations_path: Path | None = None,
        recommendation_count: int = 10,
    ) -> None:
        super().__init__("json_file")
        self.items_path = Path(items_path)
        self.recommendations_path = (
            Path(recommendations_path) if recommendations_path else None
        )
        self.recommendation_count = recommendation_count

    def _read(self, path: Path) -> list[ItemRecord]:
        with open(path, encoding="utf-8") as f:
            records = extract_records(json.load(f))
        self.logger.debug("Read %d records from %s", len(records), path)
        return records

    def fetch_items(self) -> list[ItemRecord]:
        return self._read(self.items_path)

    def fetch_recommendations(self) -> list[ItemRecord]:
        if self.recommendations_path is not None:
            return self._read(self.recommendations_path)
        return self._read(self.items_path)[: self.recommendation_count]
