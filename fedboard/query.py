"""Sort, filter and pagination instructions for data selection."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Union

from fedboard.comparable import ComparableValue, PropertyName, StdComparableString
from fedboard.pagination import NO_PAGINATION, PaginationQuery

__all__ = [
    "SortBy",
    "SortQuery",
    "FilterBy",
    "FilterQuery",
    "DataSelectQuery",
    "NO_SORT",
    "NO_FILTER",
    "NO_DATA_SELECT",
    "new_sort_query",
    "new_filter_query",
]

_VALID_PROPERTIES = frozenset(p.value for p in PropertyName)


@dataclass(frozen=True)
class SortBy:
    """A property to sort by and the direction."""

    property: Union[PropertyName, str]
    ascending: bool


@dataclass(frozen=True)
class SortQuery:
    """Ordered sort criteria plus flags for rejected input."""

    sort_by_list: tuple[SortBy, ...] = ()
    has_invalid_ascending: bool = False
    has_invalid_property: bool = False


@dataclass(frozen=True)
class FilterBy:
    """A property to filter on and the value it must contain."""

    property: Union[PropertyName, str]
    value: ComparableValue


@dataclass(frozen=True)
class FilterQuery:
    """Filter criteria, all of which must match."""

    filter_by_list: tuple[FilterBy, ...] = ()


NO_SORT = SortQuery()
NO_FILTER = FilterQuery()


@dataclass(frozen=True)
class DataSelectQuery:
    """Pagination, sort and filter options for a data selection."""

    pagination_query: PaginationQuery = field(default=NO_PAGINATION)
    sort_query: SortQuery = field(default=NO_SORT)
    filter_query: FilterQuery = field(default=NO_FILTER)


NO_DATA_SELECT = DataSelectQuery(NO_PAGINATION, NO_SORT, NO_FILTER)


def _pairs(raw: Sequence[str]):
    return zip(raw[0::2], raw[1::2])


def new_sort_query(sort_by_list_raw: Sequence[str] | None) -> SortQuery:
    """Build a SortQuery from alternating order/property strings.

    For example ``["a", "name", "d", "creationTimestamp"]`` sorts by name
    ascending, then by creation time descending.
    """
    if sort_by_list_raw is None or len(sort_by_list_raw) % 2 == 1:
        return NO_SORT
    sort_by_list = []
    for order, property_name in _pairs(sort_by_list_raw):
        if order == "a":
            ascending = True
        elif order == "d":
            ascending = False
        else:
            return SortQuery(has_invalid_ascending=True)
        if property_name not in _VALID_PROPERTIES:
            return SortQuery(has_invalid_property=True)
        sort_by_list.append(SortBy(PropertyName(property_name), ascending))
    return SortQuery(tuple(sort_by_list))


def _as_property(name: str) -> Union[PropertyName, str]:
    return PropertyName(name) if name in _VALID_PROPERTIES else name


def new_filter_query(filter_by_list_raw: Sequence[str] | None) -> FilterQuery:
    """Build a FilterQuery from alternating property/value strings."""
    if filter_by_list_raw is None or len(filter_by_list_raw) % 2 == 1:
        return NO_FILTER
    return FilterQuery(
        tuple(
            FilterBy(_as_property(name), StdComparableString(value))
            for name, value in _pairs(filter_by_list_raw)
        )
    )