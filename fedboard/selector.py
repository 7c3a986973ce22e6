"""Generic sort, filter and pagination over lists of data cells."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Iterable
from dataclasses import dataclass, field
from functools import cmp_to_key
from typing import Optional, Union

from fedboard.comparable import ComparableValue, PropertyName
from fedboard.query import NO_DATA_SELECT, DataSelectQuery

__all__ = [
    "DataCell",
    "DataSelector",
    "generic_data_select",
    "generic_data_select_with_filter",
]


class DataCell(ABC):
    """An item that exposes comparable properties for data selection."""

    @abstractmethod
    def get_property(
        self, name: Union[PropertyName, str]
    ) -> Optional[ComparableValue]:
        """Return the named property, or None when it is not supported."""


@dataclass
class DataSelector:
    """Holds a list of cells and the query that selects from it.

    Each operation replaces the held list and returns the selector itself,
    so operations can be chained.
    """

    generic_data_list: list[DataCell] = field(default_factory=list)
    data_select_query: DataSelectQuery = field(default=NO_DATA_SELECT)

    def _less(self, first: DataCell, second: DataCell) -> bool:
        for sort_by in self.data_select_query.sort_query.sort_by_list:
            a = first.get_property(sort_by.property)
            b = second.get_property(sort_by.property)
            # An unknown property switches sorting off entirely.
            if a is None or b is None:
                break
            cmp = a.compare(b)
            if cmp == 0:
                continue
            return (cmp == -1 and sort_by.ascending) or (
                cmp == 1 and not sort_by.ascending
            )
        return False

    def _order(self, first: DataCell, second: DataCell) -> int:
        if self._less(first, second):
            return -1
        if self._less(second, first):
            return 1
        return 0

    def sort(self) -> "DataSelector":
        """Sort the cells by the query's sort criteria."""
        self.generic_data_list = sorted(
            self.generic_data_list, key=cmp_to_key(self._order)
        )
        return self

    def _matches(self, cell: DataCell) -> bool:
        for filter_by in self.data_select_query.filter_query.filter_by_list:
            value = cell.get_property(filter_by.property)
            if value is None or not value.contains(filter_by.value):
                return False
        return True

    def filter(self) -> "DataSelector":
        """Keep only the cells that match every filter criterion."""
        self.generic_data_list = [
            cell for cell in self.generic_data_list if self._matches(cell)
        ]
        return self

    def paginate(self) -> "DataSelector":
        """Keep only the cells on the requested page."""
        query = self.data_select_query.pagination_query
        items = self.generic_data_list
        start, end = query.get_pagination_settings(len(items))
        if not query.is_valid_pagination():
            return self
        if not query.is_page_available(len(items), start):
            self.generic_data_list = []
            return self
        self.generic_data_list = items[start:end]
        return self


def generic_data_select(
    data_list: Iterable[DataCell], ds_query: DataSelectQuery
) -> list[DataCell]:
    """Sort and paginate the cells as the query instructs."""
    selector = DataSelector(list(data_list), ds_query)
    return selector.sort().paginate().generic_data_list


def generic_data_select_with_filter(
    data_list: Iterable[DataCell], ds_query: DataSelectQuery
) -> tuple[list[DataCell], int]:
    """Filter, sort and paginate the cells.

    Returns the selected page and the number of cells that passed the filter.
    """
    selector = DataSelector(list(data_list), ds_query)
    filtered = selector.filter()
    filtered_total = len(filtered.generic_data_list)
    processed = filtered.sort().paginate()
    return processed.generic_data_list, filtered_total