# src/catalog_state/filters/item_validator.py

"""Item record validation: turn raw records into items, drop the rest."""

import logging
from collections.abc import Iterable, Mapping
from datetime import datetime, timezone
from typing import Any

from catalog_state.models.item import Item

logger = logging.getLogger("catalog_state.filters")


def _parse_timestamp(value: Any) -> datetime:
    """Parse an ISO-8601 timestamp; naive values are taken as UTC."""
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, str):
        parsed = datetime.fromisoformat(value)
    else:
        msg = f"createdAt must be an ISO-8601 string, got {value!r}"
        raise ValueError(msg)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def _parse_tags(value: Any) -> tuple[str, ...]:
    if not isinstance(value, (list, tuple)) or not all(
        isinstance(tag, str) for tag in value
    ):
        msg = f"tags must be a list of strings, got {value!r}"
        raise ValueError(msg)
    return tuple(value)


def _parse_sales(value: Any) -> int:
    # JSON has one number type; 12.0 is fine, 3.7 is not
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    if isinstance(value, bool) or not isinstance(value, int):
        msg = f"sales must be a whole number, got {value!r}"
        raise ValueError(msg)
    return value


def _optional_float(value: Any) -> float | None:
    return None if value is None else float(value)


class ItemValidator:
    """Validate raw item records and drop those that cannot become items."""

    @staticmethod
    def parse_record(record: Mapping[str, Any]) -> Item:
        """Build an :class:`Item` from a camelCase record.

        Ratings are snapped to the nearest half star.  Raises ``ValueError``
        (or ``KeyError``/``TypeError`` for missing or mistyped fields).
        """
        rating = float(record.get("rating", 0.0))
        return Item(
            id=record["id"],
            name=str(record["name"]),
            price=float(record["price"]),
            category=record["category"],
            created_at=_parse_timestamp(record["createdAt"]),
            description=str(record.get("description", "")),
            tags=_parse_tags(record.get("tags", [])),
            rating=round(rating * 2) / 2,
            sales=_parse_sales(record.get("sales", 0)),
            in_stock=bool(record.get("inStock", True)),
            original_price=_optional_float(record.get("originalPrice")),
            discount=_optional_float(record.get("discount")),
            image=str(record.get("image", "")),
        )

    @staticmethod
    def parse(
        records: Iterable[Mapping[str, Any]],
    ) -> tuple[list[Item], int]:
        """Parse records, dropping malformed ones and repeated ids.

        The first record seen for an id wins.  Returns the valid items
        and the count of dropped records.
        """
        items: list[Item] = []
        seen_ids: set[int] = set()
        dropped = 0

        for record in records:
            try:
                item = ItemValidator.parse_record(record)
            except (AttributeError, KeyError, TypeError, ValueError) as exc:
                logger.debug(
                    "Dropped malformed item record (id=%s): %s",
                    record.get("id") if isinstance(record, Mapping) else None,
                    exc,
                )
                dropped += 1
                continue
            if item.id in seen_ids:
                logger.debug("Dropped duplicate item id=%s", item.id)
                dropped += 1
                continue
            seen_ids.add(item.id)
            items.append(item)

        if dropped:
            logger.info(
                "Validation dropped %d invalid item records", dropped
            )

        return items, dropped
