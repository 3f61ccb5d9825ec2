from __future__ import annotations

from datetime import UTC, datetime

import pytest

from reelrate.domain.coercion import (
    coerce_rating,
    coerce_votes,
    coerce_year,
    format_timestamp,
    parse_optional_float,
    parse_rating,
    parse_released,
    parse_timestamp,
)


def test_parse_rating_handles_unknown_values() -> None:
    assert parse_rating("7.9") == 7.9
    assert parse_rating("N/A") is None
    assert parse_rating("") is None
    assert parse_rating(None) is None
    assert parse_rating("great") is None
    assert parse_rating("nan") is None
    assert parse_rating("inf") is None
    assert parse_rating(float("nan")) is None
    assert coerce_rating("N/A") == 0.0


@pytest.mark.parametrize(
    ("raw", "expected"),
    [("1,234,567", 1234567), ("42", 42), ("N/A", 0), (None, 0), ("lots", 0)],
)
def test_coerce_votes(raw: str | None, expected: int) -> None:
    assert coerce_votes(raw) == expected


@pytest.mark.parametrize(
    ("raw", "expected"),
    [("2018", 2018), ("2008–2013", 2008), ("2019–", 2019), ("N/A", 0), ("soon", 0)],
)
def test_coerce_year(raw: str, expected: int) -> None:
    assert coerce_year(raw) == expected


def test_parse_released_formats() -> None:
    assert parse_released("27 Jul 2018") == datetime(2018, 7, 27, tzinfo=UTC)
    assert parse_released("2018-07-27") == datetime(2018, 7, 27, tzinfo=UTC)
    assert parse_released("N/A") is None
    assert parse_released("someday") is None


def test_timestamps_round_trip_through_wire_format() -> None:
    value = datetime(2024, 6, 1, 12, 30, 15, 123000, tzinfo=UTC)

    text = format_timestamp(value)

    assert text == "2024-06-01T12:30:15.123Z"
    assert parse_timestamp(text) == value


def test_parse_timestamp_assumes_utc_for_naive_values() -> None:
    assert parse_timestamp("2024-06-01T12:00:00") == datetime(2024, 6, 1, 12, tzinfo=UTC)
    assert parse_timestamp("garbage") is None
    assert parse_timestamp(None) is None


def test_parse_optional_float_rejects_booleans() -> None:
    assert parse_optional_float(True) is None
    assert parse_optional_float(7) == 7.0
    assert parse_optional_float("7.2") == 7.2
    assert parse_optional_float({"rating": 7}) is None


def test_non_finite_verification_rating_is_ignored() -> None:
    assert parse_optional_float("NaN") is None
    assert parse_optional_float(float("inf")) is None
    assert parse_optional_float("-Infinity") is None
