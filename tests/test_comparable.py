from datetime import datetime, timedelta, timezone

import pytest

from fedboard.comparable import (
    PropertyName,
    StdComparableInt,
    StdComparableRFC3339Timestamp,
    StdComparableString,
    StdComparableTime,
    ints_compare,
)


@pytest.mark.parametrize("a, b, expected", [(5, 1, 1), (5, 5, 0), (1, 3, -1)])
def test_ints_compare(a, b, expected):
    assert ints_compare(a, b) == expected


def test_std_comparable_time_contains():
    now = datetime.now(timezone.utc)
    future = now + timedelta(microseconds=894718949)
    assert StdComparableTime(now).contains(StdComparableTime(now)) is True
    assert StdComparableTime(now).contains(StdComparableTime(future)) is False


def test_std_comparable_time_compare_order():
    now = datetime.now(timezone.utc)
    future = now + timedelta(microseconds=894718949)
    assert StdComparableTime(now).compare(StdComparableTime(future)) == -1
    assert StdComparableTime(future).compare(StdComparableTime(now)) == 1


@pytest.mark.parametrize("a, b, expected", [(3, 3, True), (1, 3, False)])
def test_std_comparable_int_contains(a, b, expected):
    assert StdComparableInt(a).contains(StdComparableInt(b)) is expected


@pytest.mark.parametrize(
    "a, b, expected", [("abc", "abc", True), ("abc", "xyz", False)]
)
def test_std_comparable_string_contains(a, b, expected):
    assert StdComparableString(a).contains(StdComparableString(b)) is expected


def test_std_comparable_string_substring():
    assert StdComparableString("abc").contains(StdComparableString("b")) is True
    assert StdComparableString("b").contains(StdComparableString("abc")) is False


def test_std_comparable_string_compare():
    assert StdComparableString("ab").compare(StdComparableString("ac")) == -1
    assert StdComparableString("ac").compare(StdComparableString("ab")) == 1
    assert StdComparableString("ab").compare(StdComparableString("ab")) == 0


@pytest.mark.parametrize(
    "a, b, expected",
    [
        ("2011-08-30T13:22:53.108Z", "2011-08-30T13:22:53.108Z", True),
        ("2011-08-30T13:22:53.108Z", "2018-08-30T13:22:53.108Z", False),
    ],
)
def test_std_comparable_rfc3339_timestamp(a, b, expected):
    result = StdComparableRFC3339Timestamp(a).contains(StdComparableRFC3339Timestamp(b))
    assert result is expected


def test_rfc3339_compares_as_time_across_offsets():
    utc = StdComparableRFC3339Timestamp("2011-08-30T13:22:53Z")
    shifted = StdComparableRFC3339Timestamp("2011-08-30T15:22:53+02:00")
    assert utc.compare(shifted) == 0


def test_rfc3339_falls_back_to_string_compare():
    bad = StdComparableRFC3339Timestamp("not-a-time")
    good = StdComparableRFC3339Timestamp("2011-08-30T13:22:53Z")
    assert bad.compare(good) == 1
    assert good.compare(bad) == -1


def test_mismatched_kinds_raise():
    with pytest.raises(TypeError):
        StdComparableInt(1).compare(StdComparableString("1"))


def test_property_name_values():
    assert PropertyName.NAME == "name"
    assert PropertyName("creationTimestamp") is PropertyName.CREATION_TIMESTAMP