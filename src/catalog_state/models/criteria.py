# src/catalog_state/models/criteria.py

"""Filter and sort criteria supplied by the user."""

from dataclasses import dataclass, fields, replace
from enum import Enum
from numbers import Real
from typing import Any

from catalog_state.config.settings import Settings
from catalog_state.errors import InvalidCommandError


class SortKey(str, Enum):
    """Total orders the derived view can be sorted by."""

    PRICE_ASC = "price-asc"
    PRICE_DESC = "price-desc"
    RATING_DESC = "rating-desc"
    SALES_DESC = "sales-desc"
    NEWEST = "newest"
    DEFAULT = "default"

    @classmethod
    def parse(cls, value: "str | SortKey") -> "SortKey":
        """Resolve a sort key from its wire value, rejecting unknown keys."""
        if isinstance(value, SortKey):
            return value
        try:
            return cls(value)
        except ValueError:
            valid = ", ".join(k.value for k in cls)
            msg = f"Unknown sort key {value!r} (expected one of: {valid})"
            raise InvalidCommandError(msg) from None


@dataclass(frozen=True)
class FilterCriteria:
    """User-specified filter and sort parameters.

    Every field is optional.  ``None`` (or ``False`` for ``in_stock_only``)
    means the filter is absent; an all-absent criteria set matches every
    item and keeps input order.
    """

    category: str | None = None
    min_price: float | None = None
    max_price: float | None = None
    search_term: str | None = None
    tags: tuple[str, ...] | None = None
    in_stock_only: bool = False
    sort_key: SortKey | None = None

    @property
    def has_active_filters(self) -> bool:
        """Whether any filter (sorting excluded) is currently applied."""
        return self.active_filter_count > 0

    @property
    def active_filter_count(self) -> int:
        """Number of active filters; the price range counts once."""
        count = 0
        if self.search_term:
            count += 1
        if self.category:
            count += 1
        if self.min_price is not None or self.max_price is not None:
            count += 1
        if self.in_stock_only:
            count += 1
        return count

    def merged(self, **changes: Any) -> "FilterCriteria":
        """Return a copy with *changes* applied after validation.

        Omitted fields keep their value; a field passed as ``None`` is
        cleared.  Raises :class:`InvalidCommandError` on unknown fields or
        malformed values.
        """
        known = {f.name for f in fields(self)}
        unknown = sorted(set(changes) - known)
        if unknown:
            msg = f"Unknown criteria field(s): {', '.join(unknown)}"
            raise InvalidCommandError(msg)

        normalised = {
            name: _normalise(name, value)
            for name, value in changes.items()
        }
        return replace(self, **normalised)


def _normalise(name: str, value: Any) -> Any:
    """Validate and canonicalise one criteria field value."""
    if name == "in_stock_only":
        if value is None:
            return False
        if not isinstance(value, bool):
            msg = f"in_stock_only must be a bool, got {value!r}"
            raise InvalidCommandError(msg)
        return value

    if value is None:
        return None

    if name == "category":
        if value == "":
            return None
        if value not in Settings.CATEGORIES:
            valid = ", ".join(Settings.CATEGORIES)
            msg = f"Unknown category {value!r} (expected one of: {valid})"
            raise InvalidCommandError(msg)
        return value

    if name in ("min_price", "max_price"):
        if isinstance(value, bool) or not isinstance(value, Real):
            msg = f"{name} must be a number, got {value!r}"
            raise InvalidCommandError(msg)
        if value < 0:
            msg = f"{name} must be >= 0, got {value!r}"
            raise InvalidCommandError(msg)
        return value

    if name == "search_term":
        if not isinstance(value, str):
            msg = f"search_term must be a string, got {value!r}"
            raise InvalidCommandError(msg)
        return value or None

    if name == "tags":
        if not isinstance(
            value, (list, tuple, set, frozenset)
        ) or not all(isinstance(tag, str) for tag in value):
            msg = f"tags must be a collection of strings, got {value!r}"
            raise InvalidCommandError(msg)
        return tuple(value) or None

    # sort_key
    key = SortKey.parse(value)
    return None if key is SortKey.DEFAULT else key


def price_range_changes(low: float, high: float) -> dict[str, float | None]:
    """Criteria changes for a range picked on the 0..PRICE_SLIDER_MAX scale.

    A bound on the end of the scale clears that side of the filter.
    """
    if low > high:
        msg = f"Price range {low}-{high} is inverted"
        raise InvalidCommandError(msg)
    return {
        "min_price": low if low > 0 else None,
        "max_price": high if high < Settings.PRICE_SLIDER_MAX else None,
    }


def price_preset_changes(label: str) -> dict[str, float | None]:
    """Criteria changes for one of ``Settings.PRICE_PRESETS`` by label."""
    for preset_label, low, high in Settings.PRICE_PRESETS:
        if preset_label == label:
            return price_range_changes(low, high)
    valid = ", ".join(p[0] for p in Settings.PRICE_PRESETS)
    msg = f"Unknown price preset {label!r} (expected one of: {valid})"
    raise InvalidCommandError(msg)


def price_label(criteria: FilterCriteria) -> str:
    """Preset label matching the current bounds, else ``low-high``."""
    low = criteria.min_price if criteria.min_price is not None else 0
    high = (
        criteria.max_price
        if criteria.max_price is not None
        else Settings.PRICE_SLIDER_MAX
    )
    for preset_label, preset_low, preset_high in Settings.PRICE_PRESETS:
        if (preset_low, preset_high) == (low, high):
            return preset_label
    return f"{low:g}-{high:g}"
