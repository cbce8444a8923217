# src/catalog_state/models/pagination.py

"""Pagination cursor model."""

from dataclasses import dataclass

from catalog_state.config.settings import Settings
from catalog_state.errors import InvalidCommandError


@dataclass(frozen=True)
class PaginationCursor:
    """1-based page number and page size."""

    page: int = 1
    page_size: int = Settings.DEFAULT_PAGE_SIZE

    def __post_init__(self) -> None:
        for name in ("page", "page_size"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int):
                msg = f"{name} must be an int, got {value!r}"
                raise InvalidCommandError(msg)
            if value < 1:
                msg = f"{name} must be >= 1, got {value!r}"
                raise InvalidCommandError(msg)

    @property
    def offset(self) -> int:
        """Zero-based index of the first item on this page."""
        return (self.page - 1) * self.page_size
