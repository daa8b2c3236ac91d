"""Order number and CUID helpers."""

from datetime import UTC, datetime, timedelta, timezone

import pytest

from app.shared.utils.datetime import ensure_utc, utc_day_stamp
from app.shared.utils.generators import (
    format_order_number,
    generate_cuid,
    order_number_day_prefix,
    parse_order_sequence,
)


def test_generate_cuid_unique() -> None:
    ids = {generate_cuid() for _ in range(100)}
    assert len(ids) == 100
    assert all(isinstance(i, str) and i for i in ids)


def test_day_prefix() -> None:
    assert order_number_day_prefix("ORD", "20260106") == "ORD-20260106-"


@pytest.mark.parametrize(
    ("sequence", "expected"),
    [
        (1, "ORD-20260106-0001"),
        (42, "ORD-20260106-0042"),
        (9999, "ORD-20260106-9999"),
        (10000, "ORD-20260106-10000"),
    ],
)
def test_format_order_number(sequence, expected) -> None:
    assert format_order_number("ORD", "20260106", sequence) == expected


def test_format_rejects_non_positive_sequence() -> None:
    with pytest.raises(ValueError):
        format_order_number("ORD", "20260106", 0)


def test_parse_order_sequence() -> None:
    assert parse_order_sequence("ORD-20260106-0042", "ORD-20260106-") == 42
    assert parse_order_sequence("ORD-20260106-10000", "ORD-20260106-") == 10000


@pytest.mark.parametrize(
    "order_number",
    ["ORD-20260105-0001", "ORD-20260106-", "ORD-20260106-00a1", "ORD-20260106-١٢"],
)
def test_parse_order_sequence_rejects(order_number) -> None:
    with pytest.raises(ValueError):
        parse_order_sequence(order_number, "ORD-20260106-")


def test_utc_day_stamp_converts_to_utc() -> None:
    local = datetime(2026, 1, 6, 1, 0, tzinfo=timezone(timedelta(hours=5)))
    assert utc_day_stamp(local) == "20260105"
    assert utc_day_stamp(datetime(2026, 1, 6, 23, 59, tzinfo=UTC)) == "20260106"


def test_ensure_utc_treats_naive_as_utc() -> None:
    naive = datetime(2026, 1, 6, 12, 0)
    assert ensure_utc(naive) == datetime(2026, 1, 6, 12, 0, tzinfo=UTC)


def test_utc_day_stamp_rejects_none() -> None:
    with pytest.raises(ValueError):
        utc_day_stamp(None)  # type: ignore[arg-type]
