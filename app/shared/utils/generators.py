"""ID and value generators (CUID primary keys, order numbers)."""

from cuid2 import cuid_wrapper

from app.core.constants import ORDER_NUMBER_MIN_DIGITS, ORDER_NUMBER_SEP

cuid_generator = cuid_wrapper()


def generate_cuid() -> str:
    """Generate a collision-resistant unique identifier (CUID2).

    Returns:
        A new CUID string.
    """
    result = cuid_generator()
    if not isinstance(result, str):
        raise TypeError(
            f"Expected str from cuid_generator, got {type(result).__name__}"
        )
    return result


def order_number_day_prefix(prefix: str, day_stamp: str) -> str:
    """Return the shared leading part of every order number for one day.

    Example: ("ORD", "20260106") -> "ORD-20260106-".
    """
    return f"{prefix}{ORDER_NUMBER_SEP}{day_stamp}{ORDER_NUMBER_SEP}"


def format_order_number(prefix: str, day_stamp: str, sequence: int) -> str:
    """Format PREFIX-YYYYMMDD-NNNN; zero-padded to 4 digits, never truncated.

    Args:
        prefix: Uppercase order prefix (e.g. "ORD").
        day_stamp: UTC day as YYYYMMDD.
        sequence: 1-based sequence number for that day.

    Returns:
        Order number such as "ORD-20260106-0001" or "ORD-20260106-10000".
    """
    if sequence < 1:
        raise ValueError(f"Order sequence must be >= 1, got {sequence}")
    return (
        f"{order_number_day_prefix(prefix, day_stamp)}"
        f"{sequence:0{ORDER_NUMBER_MIN_DIGITS}d}"
    )


def parse_order_sequence(order_number: str, day_prefix: str) -> int:
    """Return the trailing sequence number of order_number.

    Raises:
        ValueError: If order_number does not start with day_prefix or the
            trailing segment is not all ASCII digits.
    """
    if not order_number.startswith(day_prefix):
        raise ValueError(
            f"Order number {order_number!r} does not start with {day_prefix!r}"
        )
    tail = order_number[len(day_prefix):]
    if not tail or not (tail.isascii() and tail.isdigit()):
        raise ValueError(f"Order number {order_number!r} has no numeric sequence")
    return int(tail)
