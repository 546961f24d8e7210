"""
Protocol Converters Module

Conversions between store client replies and clusterhash result types:

- Cursor tokens: unsigned 64-bit integers sent as decimal text
- Scan options: converted to HSCAN keyword parameters
- Integer replies: converted to booleans
- WITHVALUES replies: converted to (field, value) entry lists
"""

from typing import Any, Dict, Iterable, List, Optional, Union

from .commands import Entry, ScanOptions

MAX_CURSOR_ID = 2 ** 64 - 1


def _check_cursor_range(cursor_id: int) -> int:
    if not 0 <= cursor_id <= MAX_CURSOR_ID:
        raise ValueError(f"Cursor id out of range: {cursor_id}. Must be 0-{MAX_CURSOR_ID}")
    return cursor_id


def encode_cursor(cursor_id: int) -> bytes:
    """
    Encode a cursor id as the decimal text the store expects.

    Args:
        cursor_id: Unsigned 64-bit cursor id

    Returns:
        ASCII decimal digits, e.g. b"18446744073709551615"

    Raises:
        ValueError: If cursor_id is not an integer in 0..2**64-1
    """
    if isinstance(cursor_id, bool) or not isinstance(cursor_id, int):
        raise ValueError(f"Cursor id must be an integer, got {cursor_id!r}")
    return str(_check_cursor_range(cursor_id)).encode("ascii")


def decode_cursor(raw: Union[bytes, bytearray, str, int]) -> int:
    """
    Decode a cursor reply into an unsigned 64-bit cursor id.

    Accepts the decimal text the store sends as well as an int, since the
    store client may already have parsed the reply.

    Raises:
        ValueError: If the reply is not plain decimal digits or is out of range
    """
    if isinstance(raw, bool):
        raise ValueError(f"Invalid cursor reply: {raw!r}")
    if isinstance(raw, int):
        return _check_cursor_range(raw)
    if isinstance(raw, (bytes, bytearray)):
        try:
            raw = raw.decode("ascii")
        except UnicodeDecodeError:
            raise ValueError(f"Invalid cursor reply: {raw!r}") from None
    if not isinstance(raw, str) or not raw.isascii() or not raw.isdigit():
        raise ValueError(f"Invalid cursor reply: {raw!r}")
    return _check_cursor_range(int(raw))


def to_scan_params(options: Optional[ScanOptions]) -> Dict[str, Any]:
    """
    Convert scan options into HSCAN keyword parameters.

    Unset options are left out so the store applies its own defaults.
    """
    params: Dict[str, Any] = {}
    if options is None:
        return params
    if options.match is not None:
        params["match"] = options.match
    if options.count is not None:
        params["count"] = options.count
    return params


def to_boolean(reply: Any) -> Optional[bool]:
    """Convert an integer (or boolean) reply to a bool. None stays None."""
    if reply is None:
        return None
    return bool(int(reply))


def to_entry_list(reply: Optional[Iterable[Any]]) -> List[Entry]:
    """
    Convert a WITHVALUES reply into a list of (field, value) tuples.

    Handles both reply shapes:
        flat:   [f1, v1, f2, v2, ...]
        nested: [[f1, v1], [f2, v2], ...]
    """
    if not reply:
        return []

    items = list(reply)
    if all(isinstance(item, (list, tuple)) and len(item) == 2 for item in items):
        return [(item[0], item[1]) for item in items]

    if len(items) % 2 != 0:
        raise ValueError(f"Odd number of elements in field/value reply: {len(items)}")
    return [(items[i], items[i + 1]) for i in range(0, len(items), 2)]


def to_scan_iteration_items(reply: Any) -> List[Entry]:
    """Convert the entry part of an HSCAN reply (dict or flat list) into entries."""
    if not reply:
        return []
    if isinstance(reply, dict):
        return list(reply.items())
    return to_entry_list(reply)
