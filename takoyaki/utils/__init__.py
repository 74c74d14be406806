# takoyaki/utils/__init__.py

from .amounts import (
    parse_uint64,
    parse_int64,
    parse_optional_uint64,
    parse_big_uint,
    scale_token_amount,
    format_decimal,
)
