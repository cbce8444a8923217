# src/catalog_state/models/load_state.py

"""Async load lifecycle state per collection."""

from dataclasses import dataclass
from enum import Enum

from catalog_state.models.item import Item


class Collection(str, Enum):
    """Collections with an independent load lifecycle."""

    CATALOG = "catalog"
    RECOMMENDATIONS = "recommendations"


class LoadStatus(str, Enum):
    """Lifecycle states of a collection load."""

    IDLE = "idle"
    PENDING = "pending"
    FULFILLED = "fulfilled"
    REJECTED = "rejected"


@dataclass(frozen=True)
class LoadState:
    """Current status of a collection and, when rejected, the reason."""

    status: LoadStatus = LoadStatus.IDLE
    error: str | None = None

    @property
    def is_pending(self) -> bool:
        return self.status is LoadStatus.PENDING

    @classmethod
    def rejected(cls, reason: str) -> "LoadState":
        return cls(status=LoadStatus.REJECTED, error=reason)


@dataclass(frozen=True)
class LoadTicket:
    """Handle returned for every load request, numbered per collection."""

    collection: Collection
    sequence: int


@dataclass(frozen=True)
class LoadOutcome:
    """Result delivered when a load completes: items, or a failure reason."""

    items: tuple[Item, ...] = ()
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def success(cls, items: "list[Item] | tuple[Item, ...]") -> "LoadOutcome":
        return cls(items=tuple(items))

    @classmethod
    def failure(cls, reason: str) -> "LoadOutcome":
        return cls(error=reason)
