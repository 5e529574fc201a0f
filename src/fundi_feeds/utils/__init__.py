"""Utility functions shared across the fundi_feeds package."""

from fundi_feeds.utils.feed_helpers import (
    matches_params,
    matches_query,
    virtual_record,
    virtual_slice,
)
from fundi_feeds.utils.formatting import (
    format_compact,
    format_currency,
    format_deadline,
)
from fundi_feeds.utils.parsing import (
    parse_bool,
    parse_date,
    parse_float,
    parse_int,
    parse_optional_str,
    parse_str,
    parse_string_list,
)

__all__ = [
    "format_compact",
    "format_currency",
    "format_deadline",
    "matches_params",
    "matches_query",
    "parse_bool",
    "parse_date",
    "parse_float",
    "parse_int",
    "parse_optional_str",
    "parse_str",
    "parse_string_list",
    "virtual_record",
    "virtual_slice",
]
