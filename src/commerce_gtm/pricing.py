"""Price formatting for Google's Enhanced Ecommerce.

GA expects prices as plain decimal strings with exactly two decimals and no
thousands separator.  Values are truncated, never rounded, so ``11.999``
becomes ``"11.99"``.
"""

from __future__ import annotations

import re
from decimal import ROUND_DOWN, Decimal, InvalidOperation, localcontext
from typing import Any

_TWO_PLACES = Decimal("0.01")

# Plain ASCII decimal or scientific notation; no digit separators.
_NUMERIC_RE = re.compile(r"[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?", re.ASCII)


class InvalidInputError(ValueError):
    """Raised when a price is not numeric."""


def to_decimal(value: Any) -> Decimal:
    """Convert an int, float, Decimal or numeric string to a finite Decimal."""
    if isinstance(value, bool) or value is None:
        raise InvalidInputError(f"The price must be numeric, got {value!r}.")
    if isinstance(value, Decimal):
        number = value
    elif isinstance(value, (int, float, str)):
        # str() first so floats keep their shortest repr (10.005, not
        # 10.0049999...)
        text = str(value).strip()
        if isinstance(value, str) and not _NUMERIC_RE.fullmatch(text):
            raise InvalidInputError(f"The price must be numeric, got {value!r}.")
        try:
            number = Decimal(text)
        except InvalidOperation:
            raise InvalidInputError(
                f"The price must be numeric, got {value!r}."
            ) from None
    else:
        raise InvalidInputError(f"The price must be numeric, got {value!r}.")

    if not number.is_finite():
        raise InvalidInputError(f"The price must be finite, got {value!r}.")
    return number


def format_price(price: Any) -> str:
    """Format a price the way Google's Enhanced Ecommerce wants it.

    >>> format_price(11.999)
    '11.99'
    >>> format_price(0)
    '0'
    """
    number = to_decimal(price)
    if number == 0:
        return "0"

    with localcontext() as ctx:
        ctx.prec = max(ctx.prec, number.adjusted() + 3)
        truncated = number.quantize(_TWO_PLACES, rounding=ROUND_DOWN)
        return f"{truncated:.2f}"
