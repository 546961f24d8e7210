"""Scan module for cluster-hash."""

from .cursor import CursorState, ScanCursor

__all__ = ["CursorState", "ScanCursor"]
