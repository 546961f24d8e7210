"""
Cluster Hash Commands Module

Exposes one method per hash command. Each method validates its arguments,
delegates to the cluster client owned by the connection, converts the reply
into clusterhash result types and routes every failure through the
connection's exception translator.

Commands:
    hset / hsetnx / hmset           -> write fields
    hget / hmget / hstrlen          -> read fields
    hincrby / hincrbyfloat          -> numeric increments
    hrandfield / hrandfield_with_values -> random sampling
    hexists / hdel / hlen           -> membership and size
    hkeys / hvals / hgetall         -> full materialization
    hscan                           -> lazy paged enumeration (ScanCursor)
"""

import logging
from collections.abc import Mapping
from functools import partial
from numbers import Real
from typing import TYPE_CHECKING, Any, Dict, Iterable, List, Optional, Set, Union

from ..exceptions import InvalidArgumentError
from ..protocol.commands import Entry, ScanIteration, ScanOptions
from ..protocol.converters import (
    decode_cursor,
    encode_cursor,
    to_boolean,
    to_entry_list,
    to_scan_iteration_items,
    to_scan_params,
)
from ..scan.cursor import ScanCursor

if TYPE_CHECKING:
    from ..cluster.connection import ClusterConnection

logger = logging.getLogger(__name__)

KeyT = Union[bytes, str]
ValueT = Union[bytes, str, int, float]

INT64_MIN = -(2 ** 63)
INT64_MAX = 2 ** 63 - 1


def _require(value: Any, name: str) -> None:
    """Raise InvalidArgumentError if a required argument is None."""
    if value is None:
        raise InvalidArgumentError(f"{name} must not be None")


def _require_fields(fields: Optional[Iterable[KeyT]]) -> List[KeyT]:
    _require(fields, "Fields")
    if isinstance(fields, (bytes, str)):
        raise InvalidArgumentError("Fields must be a collection, not a single field")
    fields = list(fields)
    if any(f is None for f in fields):
        raise InvalidArgumentError("Fields must not contain None")
    return fields


def _require_int(value: Any, name: str) -> None:
    _require(value, name)
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidArgumentError(f"{name} must be an integer, got {value!r}")
    # The store parses integer arguments as signed 64-bit
    if not INT64_MIN <= value <= INT64_MAX:
        raise InvalidArgumentError(f"{name} must fit in a signed 64-bit integer, got {value!r}")


class ClusterHashCommands:
    """
    Hash commands against a clustered store.

    Instances are cheap and hold no state beyond the connection; the
    connection (and its cluster client) is shared and externally owned.
    """

    def __init__(self, connection: "ClusterConnection"):
        """
        Initialize the command adapter.

        Args:
            connection: The cluster connection owning the client and translator
        """
        self.connection = connection

    def _execute(self, command: str, *args, convert=None, **kwargs):
        """
        Run one store client command, translating any failure.

        Args:
            command: Name of the cluster client method (e.g. "hget")
            convert: Optional function applied to the reply
        """
        try:
            reply = getattr(self.connection.get_cluster(), command)(*args, **kwargs)
            return convert(reply) if convert is not None else reply
        except Exception as exc:
            raise self.connection.translate_exception(exc) from exc

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    def hset(self, key: KeyT, field: KeyT, value: ValueT) -> bool:
        """
        Set a single field.

        Returns:
            True if the field was created, False if an existing field was overwritten
        """
        _require(key, "Key")
        _require(field, "Field")
        _require(value, "Value")

        return self._execute("hset", key, field, value, convert=to_boolean)

    def hsetnx(self, key: KeyT, field: KeyT, value: ValueT) -> bool:
        """
        Set a field only if it does not exist yet.

        Returns:
            True if the field was set, False if it already existed (value untouched)
        """
        _require(key, "Key")
        _require(field, "Field")
        _require(value, "Value")

        return self._execute("hsetnx", key, field, value, convert=to_boolean)

    def hmset(self, key: KeyT, mapping: Dict[KeyT, ValueT]) -> None:
        """
        Set several fields at once.

        An empty mapping is a no-op and does not contact the store.
        """
        _require(key, "Key")
        _require(mapping, "Hashes")
        if not isinstance(mapping, Mapping):
            raise InvalidArgumentError(f"Hashes must be a mapping of field to value, got {type(mapping).__name__}")
        if any(f is None or v is None for f, v in mapping.items()):
            raise InvalidArgumentError("Hashes must not contain None fields or values")

        if not mapping:
            logger.debug(f"HMSET {key!r} with no fields skipped")
            return None

        self._execute("hset", key, mapping=dict(mapping))
        return None

    def hincrby(self, key: KeyT, field: KeyT, delta: int) -> int:
        """
        Increment an integer field by delta (missing fields start at 0).

        Raises:
            TypeMismatchError: If the stored value is not an integer
        """
        _require(key, "Key")
        _require(field, "Field")
        _require_int(delta, "Delta")

        return self._execute("hincrby", key, field, delta, convert=int)

    def hincrbyfloat(self, key: KeyT, field: KeyT, delta: float) -> float:
        """
        Increment a float field by delta (missing fields start at 0).

        Raises:
            TypeMismatchError: If the stored value is not a float
        """
        _require(key, "Key")
        _require(field, "Field")
        _require(delta, "Delta")
        if isinstance(delta, bool) or not isinstance(delta, Real):
            raise InvalidArgumentError(f"Delta must be a number, got {delta!r}")
        try:
            amount = float(delta)
        except OverflowError:
            raise InvalidArgumentError(f"Delta is too large for a float: {delta!r}") from None

        return self._execute("hincrbyfloat", key, field, amount, convert=float)

    def hdel(self, key: KeyT, fields: Iterable[KeyT]) -> int:
        """
        Delete fields.

        Returns:
            Number of fields actually removed. An empty collection returns 0
            without contacting the store.
        """
        _require(key, "Key")
        fields = _require_fields(fields)

        if not fields:
            logger.debug(f"HDEL {key!r} with no fields skipped")
            return 0

        return self._execute("hdel", key, *fields, convert=int)

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def hget(self, key: KeyT, field: KeyT) -> Optional[bytes]:
        """Get a field's value, or None if the key or field is missing."""
        _require(key, "Key")
        _require(field, "Field")

        return self._execute("hget", key, field)

    def hmget(self, key: KeyT, fields: Iterable[KeyT]) -> List[Optional[bytes]]:
        """
        Get several fields.

        Returns:
            Values aligned with the requested fields; None in the slot of any
            missing field. An empty collection returns [] without contacting
            the store.
        """
        _require(key, "Key")
        fields = _require_fields(fields)

        if not fields:
            logger.debug(f"HMGET {key!r} with no fields skipped")
            return []

        return self._execute("hmget", key, fields, convert=list)

    def hstrlen(self, key: KeyT, field: KeyT) -> int:
        """Byte length of a field's value (0 if the key or field is missing)."""
        _require(key, "Key")
        _require(field, "Field")

        return self._execute("hstrlen", key, field, convert=int)

    def hexists(self, key: KeyT, field: KeyT) -> bool:
        _require(key, "Key")
        _require(field, "Field")

        return self._execute("hexists", key, field, convert=to_boolean)

    def hlen(self, key: KeyT) -> int:
        """Number of fields in the hash (0 if the key is missing)."""
        _require(key, "Key")

        return self._execute("hlen", key, convert=int)

    def hkeys(self, key: KeyT) -> Set[bytes]:
        _require(key, "Key")

        return self._execute("hkeys", key, convert=lambda reply: set(reply or ()))

    def hvals(self, key: KeyT) -> List[bytes]:
        _require(key, "Key")

        return self._execute("hvals", key, convert=lambda reply: list(reply or ()))

    def hgetall(self, key: KeyT) -> Dict[bytes, bytes]:
        """
        Get every field and value of the hash.

        The whole hash is materialized in memory; use hscan() for large hashes.
        """
        _require(key, "Key")

        return self._execute("hgetall", key, convert=lambda reply: dict(reply or {}))

    # ------------------------------------------------------------------
    # Random sampling
    # ------------------------------------------------------------------

    def hrandfield(self, key: KeyT, count: Optional[int] = None
                   ) -> Union[Optional[bytes], List[bytes]]:
        """
        Get random field names.

        Args:
            key: The hash key
            count: None for a single field; otherwise passed to the store
                   unchanged (negative values allow repeated fields)

        Returns:
            A single field (or None) when count is None, else a list of fields
        """
        _require(key, "Key")
        if count is None:
            return self._execute("hrandfield", key)

        _require_int(count, "Count")
        return self._execute("hrandfield", key, count,
                             convert=lambda reply: list(reply or ()))

    def hrandfield_with_values(self, key: KeyT, count: Optional[int] = None
                               ) -> Union[Optional[Entry], List[Entry]]:
        """
        Get random (field, value) entries.

        With count None this samples exactly one entry and returns it, or
        None if the hash is missing. Otherwise count is passed through
        unchanged and a list of entries is returned.
        """
        _require(key, "Key")
        if count is None:
            entries = self._execute("hrandfield", key, 1, withvalues=True,
                                    convert=to_entry_list)
            return entries[0] if entries else None

        _require_int(count, "Count")
        return self._execute("hrandfield", key, count, withvalues=True,
                             convert=to_entry_list)

    # ------------------------------------------------------------------
    # Scanning
    # ------------------------------------------------------------------

    def hscan(self, key: KeyT, options: Optional[ScanOptions] = None) -> ScanCursor:
        """
        Enumerate a hash lazily, one store page at a time.

        Args:
            key: The hash key
            options: Match pattern and page-size hint

        Returns:
            A ScanCursor; nothing is fetched until the caller pulls from it
        """
        _require(key, "Key")
        if options is None:
            options = ScanOptions.none()
        elif not isinstance(options, ScanOptions):
            raise InvalidArgumentError(f"Options must be ScanOptions, got {type(options).__name__}")

        return ScanCursor(partial(self._scan_page, key), options, name=key)

    def _scan_page(self, key: KeyT, cursor_id: int, options: ScanOptions) -> ScanIteration:
        """Fetch one HSCAN page starting at cursor_id."""

        def to_iteration(reply) -> ScanIteration:
            next_cursor, items = reply
            return ScanIteration(decode_cursor(next_cursor), to_scan_iteration_items(items))

        return self._execute("hscan", key, cursor=encode_cursor(cursor_id),
                             **to_scan_params(options), convert=to_iteration)
