"""
Pytest Configuration and Fixtures

This module provides shared fixtures and configuration for all tests.
"""

import fnmatch
import random
from typing import Any, Dict, List, Optional, Tuple

import pytest
from redis.exceptions import DataError, ResponseError

from clusterhash.cluster.connection import ClusterConnection
from clusterhash.commands.hash_commands import ClusterHashCommands


def _to_bytes(value: Any) -> bytes:
    """Encode a value the way the store client does before sending it."""
    if isinstance(value, bytes):
        return value
    if isinstance(value, str):
        return value.encode("utf-8")
    if isinstance(value, float):
        return repr(value).encode("ascii")
    if isinstance(value, int):
        return str(value).encode("ascii")
    raise DataError(f"Invalid input of type: '{type(value).__name__}'")


class FakeRedisCluster:
    """
    In-memory stand-in for RedisCluster's hash commands.

    Replies have the same shapes redis-py returns with decode_responses=False.
    HSCAN pages through fields in sorted order, applies MATCH after slicing
    each page (as the store does) and offsets every non-zero cursor by
    cursor_base so tests can exercise tokens above the signed 64-bit range.

    Attributes:
        data: key -> {field -> value}
        calls: (command, args, kwargs) for every call made
        page_size: Fields per HSCAN page when no COUNT hint is given
        fail_with: command -> exception raised instead of running it
    """

    def __init__(self, page_size: int = 10, cursor_base: int = 0):
        self.data: Dict[bytes, Dict[bytes, bytes]] = {}
        self.calls: List[Tuple[str, tuple, dict]] = []
        self.page_size = page_size
        self.cursor_base = cursor_base
        self.fail_with: Dict[str, BaseException] = {}
        self.closed = False

    def _record(self, command: str, *args, **kwargs) -> None:
        self.calls.append((command, args, kwargs))
        if command in self.fail_with:
            raise self.fail_with[command]

    def calls_to(self, command: str) -> List[Tuple[tuple, dict]]:
        return [(args, kwargs) for name, args, kwargs in self.calls if name == command]

    def _hash(self, key: Any, create: bool = False) -> Optional[Dict[bytes, bytes]]:
        key = _to_bytes(key)
        if create:
            return self.data.setdefault(key, {})
        return self.data.get(key)

    def _drop_if_empty(self, key: Any) -> None:
        key = _to_bytes(key)
        if key in self.data and not self.data[key]:
            del self.data[key]

    # Writes

    def hset(self, name, key=None, value=None, mapping=None, items=None):
        self._record("hset", name, key, value, mapping=mapping)
        pairs = []
        if key is not None:
            pairs.append((key, value))
        if mapping:
            pairs.extend(mapping.items())
        if not pairs:
            raise DataError("'hset' with no key value pairs")

        h = self._hash(name, create=True)
        added = 0
        for f, v in pairs:
            f = _to_bytes(f)
            if f not in h:
                added += 1
            h[f] = _to_bytes(v)
        return added

    def hsetnx(self, name, key, value):
        self._record("hsetnx", name, key, value)
        h = self._hash(name, create=True)
        f = _to_bytes(key)
        if f in h:
            return False
        h[f] = _to_bytes(value)
        return True

    def hincrby(self, name, key, amount=1):
        self._record("hincrby", name, key, amount)
        if not -(2 ** 63) <= amount < 2 ** 63:
            raise ResponseError("value is not an integer or out of range")
        h = self._hash(name, create=True)
        f = _to_bytes(key)
        try:
            current = int(h.get(f, b"0"))
        except ValueError:
            self._drop_if_empty(name)
            raise ResponseError("hash value is not an integer") from None
        h[f] = str(current + amount).encode("ascii")
        return current + amount

    def hincrbyfloat(self, name, key, amount=1.0):
        self._record("hincrbyfloat", name, key, amount)
        h = self._hash(name, create=True)
        f = _to_bytes(key)
        try:
            current = float(h.get(f, b"0"))
        except ValueError:
            self._drop_if_empty(name)
            raise ResponseError("hash value is not a float") from None
        result = current + float(amount)
        h[f] = repr(result).encode("ascii")
        return result

    def hdel(self, name, *keys):
        self._record("hdel", name, *keys)
        if not keys:
            raise ResponseError("wrong number of arguments for 'hdel' command")
        h = self._hash(name)
        if not h:
            return 0
        removed = 0
        for f in keys:
            if h.pop(_to_bytes(f), None) is not None:
                removed += 1
        self._drop_if_empty(name)
        return removed

    # Reads

    def hget(self, name, key):
        self._record("hget", name, key)
        h = self._hash(name) or {}
        return h.get(_to_bytes(key))

    def hmget(self, name, keys, *args):
        self._record("hmget", name, keys, *args)
        fields = list(keys) + list(args)
        if not fields:
            raise ResponseError("wrong number of arguments for 'hmget' command")
        h = self._hash(name) or {}
        return [h.get(_to_bytes(f)) for f in fields]

    def hexists(self, name, key):
        self._record("hexists", name, key)
        h = self._hash(name) or {}
        return _to_bytes(key) in h

    def hlen(self, name):
        self._record("hlen", name)
        return len(self._hash(name) or {})

    def hkeys(self, name):
        self._record("hkeys", name)
        return list((self._hash(name) or {}).keys())

    def hvals(self, name):
        self._record("hvals", name)
        return list((self._hash(name) or {}).values())

    def hgetall(self, name):
        self._record("hgetall", name)
        return dict(self._hash(name) or {})

    def hstrlen(self, name, key):
        self._record("hstrlen", name, key)
        h = self._hash(name) or {}
        return len(h.get(_to_bytes(key), b""))

    def hrandfield(self, key, count=None, withvalues=False):
        self._record("hrandfield", key, count, withvalues=withvalues)
        h = self._hash(key)
        if not h:
            return None if count is None else []

        fields = list(h)
        if count is None:
            return random.choice(fields)
        if count >= 0:
            selected = random.sample(fields, min(count, len(fields)))
        else:
            selected = [random.choice(fields) for _ in range(-count)]

        if withvalues:
            flat = []
            for f in selected:
                flat.extend([f, h[f]])
            return flat
        return selected

    def hscan(self, name, cursor=0, match=None, count=None, no_values=None):
        self._record("hscan", name, cursor=cursor, match=match, count=count)
        h = self._hash(name)
        if not h:
            return 0, {}

        token = int(cursor)
        start = 0 if token == 0 else token - self.cursor_base
        fields = sorted(h)
        end = min(start + (count or self.page_size), len(fields))
        page = fields[start:end]

        if match is not None:
            pattern = _to_bytes(match)
            page = [f for f in page if fnmatch.fnmatchcase(f, pattern)]

        next_cursor = 0 if end >= len(fields) else end + self.cursor_base
        return next_cursor, {f: h[f] for f in page}

    def close(self):
        self._record("close")
        self.closed = True


# ============================================================================
# Cluster Fixtures
# ============================================================================

@pytest.fixture
def fake_cluster() -> FakeRedisCluster:
    """Create an empty in-memory cluster client."""
    return FakeRedisCluster()


@pytest.fixture
def connection(fake_cluster: FakeRedisCluster) -> ClusterConnection:
    """Create a connection around the in-memory cluster client."""
    return ClusterConnection(fake_cluster)


@pytest.fixture
def commands(connection: ClusterConnection) -> ClusterHashCommands:
    """Create the hash command adapter for the in-memory cluster."""
    return connection.hash_commands()


@pytest.fixture
def large_hash(fake_cluster: FakeRedisCluster) -> Dict[bytes, bytes]:
    """Populate key b"big" with 1000 fields and return the expected contents."""
    expected = {f"field:{i:04d}".encode(): f"value:{i}".encode() for i in range(1000)}
    fake_cluster.data[b"big"] = dict(expected)
    return expected


# ============================================================================
# Pytest Configuration
# ============================================================================

def pytest_configure(config):
    """Configure custom pytest markers."""
    config.addinivalue_line(
        "markers", "slow: marks tests as slow (deselect with '-m \"not slow\"')"
    )
    config.addinivalue_line(
        "markers", "integration: marks tests as integration tests (need a live cluster)"
    )
