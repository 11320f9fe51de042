"""URL query string codec for FilterState."""

from storefront.querystring.codec import (
    FILTER_KEYS,
    decode,
    encode,
    encode_params,
    strip_filter_keys,
)
from storefront.querystring.parsing import (
    ParseAttempt,
    parse_delimited_list,
    parse_json_list,
    parse_list,
    parse_single_value,
)

__all__ = [
    "FILTER_KEYS",
    "decode",
    "encode",
    "encode_params",
    "strip_filter_keys",
    "ParseAttempt",
    "parse_delimited_list",
    "parse_json_list",
    "parse_list",
    "parse_single_value",
]
