"""Configuration module for cluster-hash."""

from .settings import Settings, settings

__all__ = ["Settings", "settings"]
