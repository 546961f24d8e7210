"""
Error Taxonomy Module

Every failure that crosses the command adapter or the scan cursor is one of
the types below. Raw store client errors are mapped by classify(), which the
cluster connection calls from a single place.

Hierarchy:
    DataAccessError
    ├── InvalidArgumentError   (also a ValueError)
    └── StoreAccessError
        └── TypeMismatchError
"""

import socket
from enum import Enum
from typing import Optional

from redis import exceptions as redis_exceptions


class ErrorKind(Enum):
    """Tag describing where a normalized error came from."""
    INVALID_ARGUMENT = "invalid_argument"
    TIMEOUT = "timeout"
    CONNECTION = "connection"
    CLUSTER = "cluster"
    TYPE_MISMATCH = "type_mismatch"
    RESPONSE = "response"
    CLIENT = "client"
    UNKNOWN = "unknown"


class DataAccessError(Exception):
    """
    Base class for all errors raised by clusterhash.

    Attributes:
        kind: The ErrorKind tag
        cause: The raw error this one was translated from, if any
    """

    default_kind = ErrorKind.UNKNOWN

    def __init__(self, message: str, kind: Optional[ErrorKind] = None,
                 cause: Optional[BaseException] = None):
        super().__init__(message)
        self.message = message
        self.kind = kind if kind is not None else self.default_kind
        self.cause = cause
        if cause is not None:
            self.__cause__ = cause


class InvalidArgumentError(DataAccessError, ValueError):
    """A required argument was missing or malformed. Raised before any store call."""

    default_kind = ErrorKind.INVALID_ARGUMENT


class StoreAccessError(DataAccessError):
    """The store client failed: timeout, connection loss, redirect exhaustion or an error reply."""


class TypeMismatchError(StoreAccessError):
    """A stored value could not be interpreted as the type the command needs."""

    default_kind = ErrorKind.TYPE_MISMATCH


# Several of these subclass ResponseError, so they are checked first
_CLUSTER_ERRORS = (
    redis_exceptions.ClusterDownError,
    redis_exceptions.ClusterError,
    redis_exceptions.MovedError,
    redis_exceptions.AskError,
    redis_exceptions.TryAgainError,
    redis_exceptions.ClusterCrossSlotError,
    redis_exceptions.SlotNotCoveredError,
    redis_exceptions.RedisClusterException,
)

_TYPE_MISMATCH_MARKERS = ("not an integer", "not a float", "not a valid float")


def _is_type_mismatch(message: str) -> bool:
    lowered = message.lower()
    if lowered.startswith("wrongtype"):
        return True
    return any(marker in lowered for marker in _TYPE_MISMATCH_MARKERS)


def classify(error: BaseException) -> DataAccessError:
    """
    Map a raw failure onto the normalized error taxonomy.

    This function has no side effects; it builds and returns the normalized
    error and leaves raising to the caller.

    Args:
        error: Any exception raised by the store client (or already normalized)

    Returns:
        A DataAccessError whose cause is the original error
    """
    if isinstance(error, DataAccessError):
        return error

    detail = str(error) or type(error).__name__

    if isinstance(error, (redis_exceptions.TimeoutError, socket.timeout)):
        kind = ErrorKind.TIMEOUT
    elif isinstance(error, _CLUSTER_ERRORS):
        kind = ErrorKind.CLUSTER
    elif isinstance(error, redis_exceptions.ConnectionError):
        kind = ErrorKind.CONNECTION
    elif isinstance(error, redis_exceptions.ResponseError):
        kind = ErrorKind.TYPE_MISMATCH if _is_type_mismatch(detail) else ErrorKind.RESPONSE
    elif isinstance(error, redis_exceptions.DataError):
        kind = ErrorKind.CLIENT
    elif isinstance(error, OSError):
        kind = ErrorKind.CONNECTION
    else:
        kind = ErrorKind.UNKNOWN

    message = f"{kind.value}: {detail}"
    if kind is ErrorKind.TYPE_MISMATCH:
        return TypeMismatchError(message, cause=error)
    return StoreAccessError(message, kind=kind, cause=error)
