"""
Scan Option and Result Definitions

This module defines the data structures exchanged with the store's paged
HSCAN command.
"""

from dataclasses import dataclass, field
from typing import List, Optional, Tuple, Union

from ..exceptions import InvalidArgumentError

Entry = Tuple[bytes, bytes]


@dataclass(frozen=True)
class ScanOptions:
    """
    Options for a paged scan. Immutable once a scan starts.

    Attributes:
        match: Server-side glob filter on field names (None = all fields)
        count: Page-size hint (None = store default). The store may return
               more or fewer entries per page.
    """
    match: Optional[Union[str, bytes]] = None
    count: Optional[int] = None

    def __post_init__(self):
        """Validate options after initialization."""
        if self.count is not None:
            if isinstance(self.count, bool) or not isinstance(self.count, int):
                raise InvalidArgumentError(f"Count must be an integer, got {self.count!r}")
            if self.count <= 0:
                raise InvalidArgumentError(f"Count must be positive, got {self.count}")

    @classmethod
    def none(cls) -> "ScanOptions":
        """Options that apply no filter and no page-size hint."""
        return cls()


@dataclass
class ScanIteration:
    """
    One page of a scan.

    Attributes:
        cursor_id: Cursor to send with the next fetch (0 = scan complete)
        items: Field/value entries of this page, in store order
    """
    cursor_id: int
    items: List[Entry] = field(default_factory=list)

    @property
    def is_final(self) -> bool:
        """True if the store signalled that no pages remain."""
        return self.cursor_id == 0
