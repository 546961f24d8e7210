"""
Scan Cursor Module

A lazy iterator over one hash's entries that hides the store's
page-at-a-time HSCAN protocol.

State machine:
    READY(cursor=0) -> FETCHING -> HAS_BATCH -> (FETCHING -> HAS_BATCH)* -> EXHAUSTED
                            \
                             -> FAILED   (fetch raised; terminal)

At most one page is buffered. A new page is fetched only when the caller
pulls past the end of the current one and the store has not yet returned
cursor 0. The store keeps no per-scan state, so abandoning a cursor is
always safe.
"""

import logging
from enum import Enum, auto
from typing import Callable, Iterator, List, Optional

from ..exceptions import InvalidArgumentError
from ..protocol.commands import Entry, ScanIteration, ScanOptions

logger = logging.getLogger(__name__)

FetchFn = Callable[[int, ScanOptions], ScanIteration]


class CursorState(Enum):
    """States of a ScanCursor."""
    READY = auto()
    FETCHING = auto()
    HAS_BATCH = auto()
    EXHAUSTED = auto()
    FAILED = auto()


class ScanCursor(Iterator[Entry]):
    """
    Stateful iterator over the pages of a single scan.

    The fetch function is called with (cursor_id, options) and must return a
    ScanIteration. It is expected to raise already-normalized errors.

    Usage:
        with commands.hscan(b"user:1", ScanOptions(count=100)) as cursor:
            for field, value in cursor:
                ...

    Attributes:
        options: The scan options, fixed for the cursor's lifetime
    """

    def __init__(self, fetch: FetchFn, options: Optional[ScanOptions] = None,
                 name: str = ""):
        """
        Initialize the cursor. No fetch happens until the first pull.

        Args:
            fetch: Callable issuing one page request
            options: Scan options (default: no filter, no count hint)
            name: Label used in log messages (typically the key)
        """
        self._fetch = fetch
        self.options = options if options is not None else ScanOptions.none()
        self._name = name

        self._state = CursorState.READY
        self._batch: List[Entry] = []
        self._index = 0
        self._cursor_id = 0
        self._position = 0
        self._fetches = 0
        self._error: Optional[BaseException] = None
        self._closed = False

    @property
    def state(self) -> CursorState:
        return self._state

    @property
    def cursor_id(self) -> int:
        """The last cursor id received from the store (0 before the first fetch)."""
        return self._cursor_id

    @property
    def position(self) -> int:
        """Number of entries handed to the caller so far."""
        return self._position

    @property
    def fetch_count(self) -> int:
        """Number of page requests issued so far."""
        return self._fetches

    @property
    def is_closed(self) -> bool:
        return self._closed

    def pull(self) -> Optional[Entry]:
        """
        Return the next entry, fetching a new page only if needed.

        Returns:
            The next (field, value) entry, or None once the scan is exhausted

        Raises:
            InvalidArgumentError: If the cursor was closed
            DataAccessError: If a fetch failed (now or on an earlier pull)
        """
        if self._closed:
            raise InvalidArgumentError("Cannot access closed cursor")
        if self._state is CursorState.FAILED:
            raise self._error

        while True:
            if self._index < len(self._batch):
                entry = self._batch[self._index]
                self._index += 1
                self._position += 1
                return entry

            if self._state is CursorState.EXHAUSTED:
                return None

            if self._state is CursorState.HAS_BATCH and self._cursor_id == 0:
                self._exhaust()
                return None

            self._fetch_next()

    def _fetch_next(self) -> None:
        """Issue one page request using the last cursor id."""
        self._state = CursorState.FETCHING
        self._batch = []
        self._index = 0

        try:
            iteration = self._fetch(self._cursor_id, self.options)
        except Exception as exc:
            self._state = CursorState.FAILED
            self._error = exc
            raise
        finally:
            self._fetches += 1

        self._cursor_id = iteration.cursor_id
        self._batch = list(iteration.items)
        logger.debug(
            f"Scan {self._name!r}: page {self._fetches} returned {len(self._batch)} "
            f"entries, next cursor {self._cursor_id}"
        )

        if self._cursor_id == 0 and not self._batch:
            self._exhaust()
        else:
            self._state = CursorState.HAS_BATCH

    def _exhaust(self) -> None:
        self._state = CursorState.EXHAUSTED
        logger.debug(f"Scan {self._name!r} exhausted after {self._position} entries")

    def close(self) -> None:
        """Close the cursor and drop the buffered page. Safe to call twice."""
        self._closed = True
        self._batch = []
        self._index = 0

    def __iter__(self) -> "ScanCursor":
        return self

    def __next__(self) -> Entry:
        entry = self.pull()
        if entry is None:
            raise StopIteration
        return entry

    def __enter__(self) -> "ScanCursor":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    def __repr__(self) -> str:
        return (f"ScanCursor(name={self._name!r}, state={self._state.name}, "
                f"cursor_id={self._cursor_id}, position={self._position})")
