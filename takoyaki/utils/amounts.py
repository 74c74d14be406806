# takoyaki/utils/amounts.py
"""
Utility functions for handling string amounts from the archive.

The archive sends u64/i64 values as decimal strings. Parsing is strict: no
whitespace, underscores or leading '+', and values must fit the target width.
"""

import re
from decimal import Decimal
from typing import Union, Optional, Tuple

from ..types.errors import NumericParseError


UINT64_MAX = 2**64 - 1
INT64_MIN = -(2**63)
INT64_MAX = 2**63 - 1

_UNSIGNED = re.compile(r"[0-9]+")
_SIGNED = re.compile(r"-?[0-9]+")


def _parse(value: Union[str, int, None], pattern: re.Pattern, field: str, **context) -> int:
    if isinstance(value, bool):
        raise NumericParseError(field, value, **context)
    if isinstance(value, int):
        return value
    if not isinstance(value, str) or not pattern.fullmatch(value):
        raise NumericParseError(field, value, **context)
    return int(value)


def parse_uint64(value: Union[str, int, None], field: str = "amount", **context) -> int:
    """Parse an unsigned 64 bit integer string"""
    result = _parse(value, _UNSIGNED, field, **context)
    if result < 0 or result > UINT64_MAX:
        raise NumericParseError(field, value, **context)
    return result


def parse_int64(value: Union[str, int, None], field: str = "amount", **context) -> int:
    """Parse a signed 64 bit integer string"""
    result = _parse(value, _SIGNED, field, **context)
    if result < INT64_MIN or result > INT64_MAX:
        raise NumericParseError(field, value, **context)
    return result


def parse_optional_uint64(value: Union[str, int, None], field: str = "amount", **context) -> Optional[int]:
    if value is None:
        return None
    return parse_uint64(value, field, **context)


def parse_big_uint(value: Union[str, int, None], field: str = "amount", **context) -> int:
    """Unsigned integer of unbounded size (token amounts)"""
    return _parse(value, _UNSIGNED, field, **context)


def scale_token_amount(raw_amount: str, decimals: int, **context) -> Tuple[Decimal, str]:
    """
    Shift a raw token amount left by ``decimals`` places.

    Returns the exact value and its plain decimal string with trailing
    fractional zeros removed, e.g. ("101", 1) -> (Decimal("10.1"), "10.1").
    """
    if raw_amount == "0":
        return Decimal(0), "0"

    amount = parse_big_uint(raw_amount, "token amount", **context)
    if isinstance(decimals, bool) or not isinstance(decimals, int) or decimals < 0:
        raise NumericParseError("token decimals", decimals, **context)

    # Built from the digit tuple so no context precision or rounding applies
    digits = tuple(int(digit) for digit in str(amount))
    value = Decimal((0, digits, -decimals))
    return value, format_decimal(value)


def format_decimal(value: Decimal) -> str:
    """Plain notation, no exponent, no trailing fractional zeros"""
    text = format(value, "f")
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    return text or "0"
