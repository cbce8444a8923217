# src/catalog_state/sources/mock_source.py

"""Generated demo catalog with simulated network latency."""

import random
import time
from datetime import datetime, timedelta, timezone

from catalog_state.config.settings import Settings
from catalog_state.sources.base_source import CatalogSource, ItemRecord

_TAG_GROUPS: list[list[str]] = [
    ["bestseller", "new", "limited"],
    ["sale", "recommended"],
]

_NAMES: dict[str, list[str]] = {
    "electronics": ["Headphones", "Smart Watch", "Power Bank", "Speaker"],
    "clothing": ["Running Shoe", "Rain Jacket", "Wool Scarf", "Denim Jeans"],
    "home": ["Desk Lamp", "Coffee Mug", "Throw Pillow", "Wall Clock"],
    "food": ["Green Tea", "Dark Chocolate", "Olive Oil", "Trail Mix"],
    "beauty": ["Face Serum", "Lip Balm", "Hand Cream", "Sun Screen"],
}


def generate_records(
    count: int = Settings.MOCK_ITEM_COUNT,
    seed: int | None = None,
    now: datetime | None = None,
) -> list[ItemRecord]:
    """Build *count* plausible item records with ids ``1..count``.

    A fixed *seed* makes the output reproducible.
    """
    rng = random.Random(seed)
    now = now or datetime.now(timezone.utc)
    records: list[ItemRecord] = []

    for index in range(count):
        category = rng.choice(Settings.CATEGORIES)
        name = rng.choice(_NAMES[category])
        price = rng.randint(100, 999)
        records.append(
            {
                "id": index + 1,
                "name": f"{name} {index + 1}",
                "price": price,
                "originalPrice": rng.randint(200, 1199),
                "discount": rng.randint(10, 59),
                "category": category,
                "tags": list(rng.choice(_TAG_GROUPS)),
                "rating": rng.randint(6, 10) / 2,
                "sales": rng.randint(0, 999),
                "image": f"https://picsum.photos/id/{index + 20}/300/300",
                "description": (
                    f"A quality {name.lower()} with carefully chosen "
                    "materials and a detailed feature list."
                ),
                "inStock": rng.random() > 0.1,
                "createdAt": (
                    now - timedelta(seconds=rng.uniform(0, 30 * 24 * 3600))
                ).isoformat(),
            }
        )

    return records


class MockCatalogSource(CatalogSource):
    """Serves a generated catalog after a short artificial delay."""

    def __init__(
        self,
        count: int = Settings.MOCK_ITEM_COUNT,
        seed: int | None = None,
    ) -> None:
        super().__init__("mock")
        self._rng = random.Random(seed)
        self._records = generate_records(count, seed=seed)

    def fetch_items(self) -> list[ItemRecord]:
        time.sleep(Settings.MOCK_CATALOG_DELAY)
        self.logger.debug("Serving %d mock items", len(self._records))
        return [dict(r) for r in self._records]

    def fetch_recommendations(self) -> list[ItemRecord]:
        """Return a random sample of the catalog."""
        time.sleep(Settings.MOCK_RECOMMENDATION_DELAY)
        size = min(Settings.RECOMMENDATION_COUNT, len(self._records))
        picked = self._rng.sample(self._records, size)
        return [dict(r) for r in picked]
