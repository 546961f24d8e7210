"""
cluster-hash: Hash commands for a clustered key-value store

A client-side adapter exposing Redis Cluster hash commands with argument
validation, normalized errors and a lazy, resumable HSCAN cursor.
"""

__version__ = "1.0.0"

from .cluster import ClusterConfig, ClusterConnection
from .commands import ClusterHashCommands
from .exceptions import (
    DataAccessError,
    ErrorKind,
    InvalidArgumentError,
    StoreAccessError,
    TypeMismatchError,
    classify,
)
from .protocol import ScanIteration, ScanOptions
from .scan import CursorState, ScanCursor

__all__ = [
    "ClusterConfig",
    "ClusterConnection",
    "ClusterHashCommands",
    "CursorState",
    "DataAccessError",
    "ErrorKind",
    "InvalidArgumentError",
    "ScanCursor",
    "ScanIteration",
    "ScanOptions",
    "StoreAccessError",
    "TypeMismatchError",
    "classify",
    "__version__",
]
