"""
Cluster Connection Module

Owns the shared cluster client and the exception translator that every
command routes its failures through. Slot routing, redirects, retries and
connection pooling all happen inside the client.
"""

import logging
from typing import Any, Optional

from redis.cluster import RedisCluster

from ..commands.hash_commands import ClusterHashCommands
from ..exceptions import DataAccessError, classify
from .config import ClusterConfig

logger = logging.getLogger(__name__)


class ClusterConnection:
    """
    A connection to a clustered store.

    Responsibilities:
    - Hold the cluster client shared by all command adapters
    - Translate raw client failures into DataAccessError subtypes
    - Hand out command adapters (hash_commands)
    """

    def __init__(self, cluster: Any, config: Optional[ClusterConfig] = None):
        """
        Initialize the connection around an existing cluster client.

        Args:
            cluster: A RedisCluster (or compatible) client
            config: The config the client was built from, if known
        """
        if cluster is None:
            raise ValueError("Cluster client must not be None")

        self._cluster = cluster
        self.config = config
        self._hash_commands: Optional[ClusterHashCommands] = None
        self._closed = False

    @classmethod
    def from_config(cls, config: ClusterConfig) -> "ClusterConnection":
        """
        Connect to the cluster described by config.

        Raises:
            StoreAccessError: If no startup node could be reached
        """
        logger.info(f"Connecting to cluster via {config}")
        try:
            cluster = RedisCluster(**config.client_kwargs())
        except Exception as exc:
            raise classify(exc) from exc
        return cls(cluster, config=config)

    def get_cluster(self) -> Any:
        """Get the underlying cluster client."""
        return self._cluster

    def translate_exception(self, exc: BaseException) -> DataAccessError:
        """
        Translate a raw client failure into the normalized error taxonomy.

        Args:
            exc: The exception raised by the cluster client

        Returns:
            The normalized error (not raised)
        """
        error = classify(exc)
        if error is not exc:
            logger.debug(f"Translated {type(exc).__name__} to {type(error).__name__} ({error.kind.value})")
        return error

    def hash_commands(self) -> ClusterHashCommands:
        """Get the hash command adapter bound to this connection."""
        if self._hash_commands is None:
            self._hash_commands = ClusterHashCommands(self)
        return self._hash_commands

    @property
    def is_closed(self) -> bool:
        return self._closed

    def close(self) -> None:
        """Close the cluster client. Safe to call twice."""
        if self._closed:
            return
        self._closed = True
        try:
            self._cluster.close()
        except Exception as exc:
            raise self.translate_exception(exc) from exc
        logger.debug("Cluster connection closed")

    def __enter__(self) -> "ClusterConnection":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    def __repr__(self) -> str:
        return f"ClusterConnection(config={self.config!r}, closed={self._closed})"
