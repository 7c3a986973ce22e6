"""Pagination settings for data selection."""

from __future__ import annotations

from dataclasses import dataclass

__all__ = [
    "PaginationQuery",
    "NO_PAGINATION",
    "EMPTY_PAGINATION",
    "DEFAULT_PAGINATION",
]


@dataclass(frozen=True)
class PaginationQuery:
    """How many items per page to return and which page (0-based)."""

    items_per_page: int
    page: int

    def is_valid_pagination(self) -> bool:
        """True when both parameters are non-negative."""
        return self.items_per_page >= 0 and self.page >= 0

    def is_page_available(self, items_count: int, starting_index: int) -> bool:
        """True when at least one element can be placed on the page."""
        return items_count > starting_index and self.items_per_page > 0

    def get_pagination_settings(self, items_count: int) -> tuple[int, int]:
        """Return the start and end index of the page within items_count items."""
        start_index = self.items_per_page * self.page
        end_index = min(start_index + self.items_per_page, items_count)
        return start_index, end_index


NO_PAGINATION = PaginationQuery(-1, -1)
"""Backend pagination is not applied."""

EMPTY_PAGINATION = PaginationQuery(0, 0)
"""No items are returned."""

DEFAULT_PAGINATION = PaginationQuery(10, 0)
"""Ten items from the first page."""