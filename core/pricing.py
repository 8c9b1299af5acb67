"""
JPY -> AUD pricing for imported auctions.

This is a fixed business conversion, not a live exchange rate: the AUD
price is the JPY price divided by ten, rounded to whole dollars.

Rounding is float arithmetic with halves going up (floor(x + 0.5)), the
same results the storefront computes. An override like 19.995 is
1999.4999... cents as a float and rounds to 1999.
"""
import math
from numbers import Real
from typing import Optional

DEFAULT_PRICE_CENTS = 10000  # AUD $100.00
JPY_PER_AUD = 10
CURRENCY_CODE = "aud"


def _is_positive_number(value) -> bool:
    if value is None or isinstance(value, bool) or not isinstance(value, Real):
        return False
    return math.isfinite(value) and value > 0


def _round(value: float) -> int:
    return int(math.floor(value + 0.5))


def jpy_to_aud_cents(jpy: Optional[float]) -> int:
    """
    Convert an auction price in JPY to AUD cents.

    Examples:
        jpy_to_aud_cents(None)  # 10000
        jpy_to_aud_cents(0)     # 10000
        jpy_to_aud_cents(1234)  # 12300
    """
    if not _is_positive_number(jpy):
        return DEFAULT_PRICE_CENTS

    aud = max(1, _round(jpy / JPY_PER_AUD))
    return aud * 100


def resolve_price_cents(price_jpy: Optional[float], override_aud: Optional[float] = None) -> int:
    """An explicit positive AUD override always wins over the JPY conversion."""
    if _is_positive_number(override_aud):
        return _round(override_aud * 100)
    return jpy_to_aud_cents(price_jpy)
