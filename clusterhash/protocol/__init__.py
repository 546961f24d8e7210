"""Protocol module for cluster-hash."""

from .commands import Entry, ScanIteration, ScanOptions
from .converters import (
    MAX_CURSOR_ID,
    decode_cursor,
    encode_cursor,
    to_boolean,
    to_entry_list,
    to_scan_params,
)

__all__ = [
    "Entry",
    "ScanIteration",
    "ScanOptions",
    "MAX_CURSOR_ID",
    "decode_cursor",
    "encode_cursor",
    "to_boolean",
    "to_entry_list",
    "to_scan_params",
]
