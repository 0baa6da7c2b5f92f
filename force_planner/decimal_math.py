"""Decimal arithmetic helpers for money and unit math.

Every amount in the planner is a :class:`decimal.Decimal` evaluated in a
dedicated 50-digit context, so sums across 50 groups of 20 items never pick
up binary floating point drift.  Inputs coming from widgets may be strings,
ints, floats or ``None``; :func:`to_decimal` turns all of them into a
finite Decimal and treats anything it cannot read as zero.
"""

from __future__ import annotations

import logging
from decimal import (
    ROUND_FLOOR,
    ROUND_HALF_UP,
    Context,
    Decimal,
    DecimalException,
    DivisionByZero,
    InvalidOperation,
)
from typing import Iterable, Union

logger = logging.getLogger(__name__)

Numeric = Union[int, float, str, Decimal, None]

PRECISION = 50
# Overflow is not trapped: an overflowing result becomes Infinity, which
# _finite() maps back to zero.
MONEY_CONTEXT = Context(
    prec=PRECISION,
    rounding=ROUND_HALF_UP,
    traps=[InvalidOperation, DivisionByZero],
)

ZERO = Decimal(0)
ONE = Decimal(1)

_STRIP_CHARS = (",", "$", "_", " ")


def to_decimal(value: Numeric) -> Decimal:
    """Convert ``value`` to a finite Decimal.

    Args:
        value: Raw amount from a widget, template or caller

    Returns:
        Parsed Decimal; ``ZERO`` for empty, unparseable or non-finite input

    Example:
        >>> to_decimal("$1,234.50")
        Decimal('1234.50')
        >>> to_decimal("")
        Decimal('0')
    """
    if value is None:
        return ZERO
    if isinstance(value, Decimal):
        result = value
    elif isinstance(value, bool):
        result = Decimal(int(value))
    elif isinstance(value, int):
        result = Decimal(value)
    elif isinstance(value, float):
        result = Decimal(repr(value))
    else:
        text = str(value).strip()
        for char in _STRIP_CHARS:
            text = text.replace(char, "")
        if not text:
            return ZERO
        try:
            result = MONEY_CONTEXT.create_decimal(text)
        except DecimalException:
            logger.debug("Treating unparseable amount %r as zero", value)
            return ZERO
    if not result.is_finite():
        logger.debug("Treating non-finite amount %r as zero", value)
        return ZERO
    return result


def _finite(result: Decimal) -> Decimal:
    if result.is_finite():
        return result
    logger.debug("Arithmetic result %s is out of range; using zero", result)
    return ZERO


def add(left: Numeric, right: Numeric) -> Decimal:
    return _finite(MONEY_CONTEXT.add(to_decimal(left), to_decimal(right)))


def subtract(left: Numeric, right: Numeric) -> Decimal:
    return _finite(MONEY_CONTEXT.subtract(to_decimal(left), to_decimal(right)))


def multiply(left: Numeric, right: Numeric) -> Decimal:
    return _finite(MONEY_CONTEXT.multiply(to_decimal(left), to_decimal(right)))


def divide(numerator: Numeric, divisor: Numeric) -> Decimal:
    """Divide in the money context.  A zero divisor raises ``DivisionByZero``."""
    return _finite(MONEY_CONTEXT.divide(to_decimal(numerator), to_decimal(divisor)))


def floor(value: Numeric) -> Decimal:
    """Round toward negative infinity to a whole number."""
    return to_decimal(value).to_integral_value(rounding=ROUND_FLOOR, context=MONEY_CONTEXT)


def floor_divide(numerator: Numeric, divisor: Numeric) -> Decimal:
    """Return ``floor(numerator / divisor)``, or zero when ``divisor`` is zero.

    Used to derive whole unit counts from a budget, where a unit cost of zero
    means no units can be priced.
    """
    divisor = to_decimal(divisor)
    if divisor.is_zero():
        return ZERO
    return floor(divide(numerator, divisor))


def round_places(value: Numeric, places: int = 2) -> Decimal:
    """Round half-up to ``places`` decimal places.

    Amounts too large to hold at that exponent within the context precision
    are returned unrounded.
    """
    value = to_decimal(value)
    exponent = ONE.scaleb(-places)
    try:
        return value.quantize(exponent, rounding=ROUND_HALF_UP, context=MONEY_CONTEXT)
    except InvalidOperation:
        logger.warning("Amount %s exceeds %d-digit precision; left unrounded", value, PRECISION)
        return _finite(MONEY_CONTEXT.plus(value))


def total(values: Iterable[Numeric]) -> Decimal:
    """Sum ``values`` in the money context."""
    result = ZERO
    for value in values:
        result = MONEY_CONTEXT.add(result, to_decimal(value))
    return _finite(result)


def lte(left: Numeric, right: Numeric) -> bool:
    return to_decimal(left) <= to_decimal(right)


def gt(left: Numeric, right: Numeric) -> bool:
    return to_decimal(left) > to_decimal(right)


def clamp(value: Numeric, low: Numeric, high: Numeric) -> Decimal:
    return min(max(to_decimal(value), to_decimal(low)), to_decimal(high))


def non_negative(value: Numeric) -> Decimal:
    return max(to_decimal(value), ZERO)


def to_float(value: Numeric, places: int = 2) -> float:
    """Round and convert to float for chart libraries; never used for math."""
    return float(round_places(value, places))
