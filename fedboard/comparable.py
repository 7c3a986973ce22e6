"""Property names and comparable value wrappers used for sorting and filtering."""

from __future__ import annotations

import re
from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from enum import Enum

__all__ = [
    "PropertyName",
    "ComparableValue",
    "StdComparableInt",
    "StdComparableString",
    "StdComparableRFC3339Timestamp",
    "StdComparableTime",
    "ints_compare",
]


class PropertyName(str, Enum):
    """Names of data cell properties supported by the UI."""

    NAME = "name"
    CREATION_TIMESTAMP = "creationTimestamp"
    NAMESPACE = "namespace"
    STATUS = "status"
    TYPE = "type"
    FIRST_SEEN = "firstSeen"
    LAST_SEEN = "lastSeen"
    REASON = "reason"


def ints_compare(a: int, b: int) -> int:
    """Return 1 if a > b, 0 if equal, -1 otherwise."""
    if a > b:
        return 1
    if a == b:
        return 0
    return -1


class ComparableValue(ABC):
    """A value that can be compared with another value of its own kind."""

    @abstractmethod
    def compare(self, other: "ComparableValue") -> int:
        """Return 1 if other is smaller, 0 if equal, -1 if other is larger."""

    @abstractmethod
    def contains(self, other: "ComparableValue") -> bool:
        """Return True if this value contains or equals the other."""


def _same_kind(value: ComparableValue, other: ComparableValue):
    if not isinstance(other, type(value)):
        raise TypeError(
            f"cannot compare {type(value).__name__} with {type(other).__name__}"
        )
    return other


@dataclass(frozen=True)
class StdComparableInt(ComparableValue):
    """An integer compared numerically."""

    value: int

    def compare(self, other: ComparableValue) -> int:
        other = _same_kind(self, other)
        return ints_compare(self.value, other.value)

    def contains(self, other: ComparableValue) -> bool:
        return self.compare(other) == 0


@dataclass(frozen=True)
class StdComparableString(ComparableValue):
    """A string compared lexically; containment means substring."""

    value: str

    def compare(self, other: ComparableValue) -> int:
        other = _same_kind(self, other)
        return ints_compare(0, 0) if self.value == other.value else (
            1 if self.value > other.value else -1
        )

    def contains(self, other: ComparableValue) -> bool:
        other = _same_kind(self, other)
        return other.value in self.value


_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)

_RFC3339 = re.compile(
    r"^(\d{4})-(\d{2})-(\d{2})T(\d{2}):(\d{2}):(\d{2})(?:\.\d+)?"
    r"(Z|[+-]\d{2}:\d{2})$"
)


def _unix_seconds(moment: datetime) -> int:
    if moment.tzinfo is None:
        moment = moment.astimezone()
    return (moment - _EPOCH) // timedelta(seconds=1)


def _parse_rfc3339(text: str) -> int | None:
    """Return the Unix seconds of an RFC 3339 timestamp, or None if invalid."""
    match = _RFC3339.match(text)
    if match is None:
        return None
    year, month, day, hour, minute, second = (int(g) for g in match.groups()[:6])
    zone = match.group(7)
    try:
        if zone == "Z":
            tz = timezone.utc
        else:
            sign = -1 if zone[0] == "-" else 1
            off_hours, off_minutes = int(zone[1:3]), int(zone[4:6])
            if off_hours >= 24 or off_minutes >= 60:
                return None
            tz = timezone(sign * timedelta(hours=off_hours, minutes=off_minutes))
        moment = datetime(year, month, day, hour, minute, second, tzinfo=tz)
    except ValueError:
        return None
    return _unix_seconds(moment)


@dataclass(frozen=True)
class StdComparableRFC3339Timestamp(ComparableValue):
    """An RFC 3339 timestamp string compared as a time.

    When either side fails to parse, the raw strings are compared instead.
    """

    value: str

    def compare(self, other: ComparableValue) -> int:
        other = _same_kind(self, other)
        self_time = _parse_rfc3339(self.value)
        other_time = _parse_rfc3339(other.value)
        if self_time is None or other_time is None:
            return StdComparableString(self.value).compare(
                StdComparableString(other.value)
            )
        return ints_compare(self_time, other_time)

    def contains(self, other: ComparableValue) -> bool:
        return self.compare(other) == 0


@dataclass(frozen=True)
class StdComparableTime(ComparableValue):
    """A datetime compared at whole-second precision."""

    value: datetime

    def compare(self, other: ComparableValue) -> int:
        other = _same_kind(self, other)
        return ints_compare(_unix_seconds(self.value), _unix_seconds(other.value))

    def contains(self, other: ComparableValue) -> bool:
        return self.compare(other) == 0