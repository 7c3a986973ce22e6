"""Query-string parsing and small helpers shared by API handlers."""

from __future__ import annotations

import math
import re
from collections.abc import Iterable, Mapping
from typing import Any, Optional

from fedboard.kubetypes import ObjectMeta
from fedboard.pagination import NO_PAGINATION, PaginationQuery
from fedboard.query import (
    DataSelectQuery,
    FilterQuery,
    SortQuery,
    new_filter_query,
    new_sort_query,
)

__all__ = [
    "InvalidKeyValueFormat",
    "parse_pagination",
    "parse_sort",
    "parse_filter",
    "parse_data_select",
    "round_to_two_decimals",
    "extract_labels",
    "extract_namespaces",
    "parse_key_value_strings",
]

_INTEGER = re.compile(r"[+-]?[0-9]+")
_INT64_MIN = -(2**63)
_INT64_MAX = 2**63 - 1


class InvalidKeyValueFormat(ValueError):
    """An entry is not of the form key=value with a non-empty key."""


def _query_value(query: Mapping[str, Any], key: str) -> str:
    """Return the first value of a query parameter, or an empty string."""
    value = query.get(key)
    if value is None:
        return ""
    if isinstance(value, (list, tuple)):
        return str(value[0]) if value else ""
    return str(value)


def _parse_int(text: str) -> Optional[int]:
    if not _INTEGER.fullmatch(text):
        return None
    number = int(text)
    if not _INT64_MIN <= number <= _INT64_MAX:
        return None
    return number


def parse_pagination(query: Mapping[str, Any]) -> PaginationQuery:
    """Read itemsPerPage and the 1-based page from the query parameters.

    Missing or malformed values switch pagination off.
    """
    items_per_page = _parse_int(_query_value(query, "itemsPerPage"))
    if items_per_page is None:
        return NO_PAGINATION
    page = _parse_int(_query_value(query, "page"))
    if page is None:
        return NO_PAGINATION
    # Pages start from 1 on the frontend and from 0 here.
    return PaginationQuery(items_per_page, page - 1)


def parse_sort(query: Mapping[str, Any]) -> SortQuery:
    """Read the comma-separated sortBy parameter."""
    return new_sort_query(_query_value(query, "sortBy").split(","))


def parse_filter(query: Mapping[str, Any]) -> FilterQuery:
    """Read the comma-separated filterBy parameter."""
    return new_filter_query(_query_value(query, "filterBy").split(","))


def parse_data_select(query: Mapping[str, Any]) -> DataSelectQuery:
    """Build the full data selection from the query parameters."""
    return DataSelectQuery(
        parse_pagination(query), parse_sort(query), parse_filter(query)
    )


def round_to_two_decimals(val: float) -> float:
    """Round to two decimal places, halves away from zero."""
    scaled = val * 100
    if not math.isfinite(scaled):
        return scaled / 100
    whole = math.trunc(scaled)
    if abs(scaled - whole) >= 0.5:
        whole += int(math.copysign(1, scaled))
    return whole / 100


def _metadata_field(item: Any, name: str) -> Any:
    if isinstance(item, ObjectMeta):
        return getattr(item, name)
    if isinstance(item, Mapping):
        metadata = item.get("metadata")
        if isinstance(metadata, Mapping):
            return metadata.get(name)
        return item.get(name)
    return getattr(item, name, None)


def extract_labels(items: Iterable[Any]) -> list[str]:
    """Return every distinct label of the items as sorted key=value strings."""
    selectors = {
        f"{key}={value}"
        for item in items
        for key, value in (_metadata_field(item, "labels") or {}).items()
    }
    return sorted(selectors)


def extract_namespaces(items: Iterable[Any]) -> list[str]:
    """Return the distinct non-empty namespaces of the items, sorted."""
    return sorted(
        {ns for item in items if (ns := _metadata_field(item, "namespace"))}
    )


def parse_key_value_strings(label_strings: Iterable[str]) -> dict[str, str]:
    """Turn key=value strings into a mapping, trimming spaces around each part."""
    labels: dict[str, str] = {}
    for item in label_strings:
        key, sep, value = item.partition("=")
        if not sep:
            raise InvalidKeyValueFormat(f"invalid key=value entry: {item!r}")
        key = key.strip()
        if not key:
            raise InvalidKeyValueFormat(f"empty key in entry: {item!r}")
        labels[key] = value.strip()
    return labels