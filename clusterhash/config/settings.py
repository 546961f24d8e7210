"""
cluster-hash Configuration Settings

This module contains the configuration constants for the cluster hash client.
Every value can be overridden through an environment variable.
"""

import os
from dataclasses import dataclass
from typing import Optional


@dataclass
class Settings:
    """Client configuration settings."""

    # Cluster settings
    STARTUP_NODES: str = os.environ.get("CLUSTER_HASH_NODES", "localhost:7000")
    SOCKET_TIMEOUT: float = float(os.environ.get("CLUSTER_HASH_SOCKET_TIMEOUT", "5.0"))
    PASSWORD: Optional[str] = os.environ.get("CLUSTER_HASH_PASSWORD") or None

    # Scan settings
    DEFAULT_SCAN_COUNT: int = int(os.environ.get("CLUSTER_HASH_SCAN_COUNT", "10"))

    # Logging settings
    DEBUG: bool = os.environ.get("CLUSTER_HASH_DEBUG", "false").lower() == "true"
    LOG_LEVEL: str = os.environ.get("CLUSTER_HASH_LOG_LEVEL", "INFO")


# Global settings instance
settings = Settings()
