"""Display scale conversion and currency formatting.

Amounts are stored raw (dollars).  The dashboard shows them in a chosen
magnitude such as billions, and slider input arrives in that magnitude, so
these helpers translate both ways and render the familiar ``$1.25B`` labels.
"""

from __future__ import annotations

from decimal import Decimal
from typing import Dict, List

from .decimal_math import Numeric, divide, multiply, round_places

SCALE_UNITS: Dict[str, Decimal] = {
    "Standard": Decimal(1),
    "Thousands": Decimal("1e3"),
    "Millions": Decimal("1e6"),
    "Billions": Decimal("1e9"),
    "Trillions": Decimal("1e12"),
}

SCALE_ABBREVIATIONS: Dict[str, str] = {
    "Standard": "",
    "Thousands": "K",
    "Millions": "M",
    "Billions": "B",
    "Trillions": "T",
}

CURRENCY_SYMBOL = "$"


def scale_names() -> List[str]:
    """Scale names ordered from smallest to largest multiplier."""
    return list(SCALE_UNITS)


def get_multiplier(scale: str) -> Decimal:
    """Return the multiplier for ``scale``.

    Raises:
        ValueError: If ``scale`` is not one of :data:`SCALE_UNITS`
    """
    try:
        return SCALE_UNITS[scale]
    except KeyError:
        raise ValueError(
            f"Unknown scale '{scale}'. Expected one of: {', '.join(SCALE_UNITS)}"
        ) from None


def to_scaled(amount: Numeric, scale: str) -> Decimal:
    """Convert a raw amount into ``scale`` units (``amount / multiplier``)."""
    return divide(amount, get_multiplier(scale))


def to_raw(display_value: Numeric, scale: str) -> Decimal:
    """Convert a value shown in ``scale`` units back to a raw amount."""
    return multiply(display_value, get_multiplier(scale))


def format_budget(value: Numeric, scale: str = "Standard", decimal_places: int = 2) -> str:
    """Format a raw amount for display in ``scale`` units.

    Args:
        value: Raw dollar amount
        scale: Name of the display scale
        decimal_places: Fixed number of decimals to show

    Returns:
        Currency string with thousands separators and the scale suffix

    Example:
        >>> format_budget(Decimal("143000000000"), "Billions")
        '$143.00B'
        >>> format_budget(1234567.891)
        '$1,234,567.89'
    """
    scaled = round_places(to_scaled(value, scale), decimal_places)
    return f"{CURRENCY_SYMBOL}{scaled:,.{decimal_places}f}{SCALE_ABBREVIATIONS[scale]}"
