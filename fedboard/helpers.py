"""Label selector matching."""

from __future__ import annotations

from collections.abc import Mapping
from types import MappingProxyType
from typing import Any, Optional

__all__ = ["LIST_EVERYTHING", "is_selector_matching", "is_label_selector_matching"]

LIST_EVERYTHING = MappingProxyType({"labelSelector": "", "fieldSelector": ""})
"""List options that select every resource."""


def is_selector_matching(
    src_selector: Optional[Mapping[str, str]],
    target_object_labels: Optional[Mapping[str, str]],
) -> bool:
    """True if every label of a non-empty selector is on the target."""
    if not src_selector:
        return False
    labels = target_object_labels or {}
    return all(
        label in labels and labels[label] == value
        for label, value in src_selector.items()
    )


def is_label_selector_matching(
    src_selector: Optional[Mapping[str, str]], target_label_selector: Any
) -> bool:
    """True if the selector matches the matchLabels of a label selector."""
    if target_label_selector is None:
        return False
    if isinstance(target_label_selector, Mapping):
        match_labels = target_label_selector.get("matchLabels")
    else:
        match_labels = getattr(target_label_selector, "match_labels", None)
    return is_selector_matching(src_selector, match_labels)