"""
Cluster Configuration Module

Describes how to reach the cluster: the startup nodes the store client
bootstraps from, plus the connection options handed to it. Slot ownership
and topology discovery are left to the store client, which learns them from
any reachable startup node.

Startup node format (CLUSTER_HASH_NODES):
    host:port[,host:port...]

Example:
    localhost:7000,localhost:7001,localhost:7002
"""

from typing import Any, Dict, List, Optional, Tuple

from redis.cluster import ClusterNode

from ..config.settings import settings


def parse_nodes(spec: str) -> List[Tuple[str, int]]:
    """
    Parse a comma-separated startup node list.

    Args:
        spec: Node list such as "localhost:7000,localhost:7001"

    Returns:
        List of (host, port) tuples, in the order given

    Raises:
        ValueError: If the list is empty or an entry is malformed
    """
    nodes = []
    for entry in spec.split(","):
        entry = entry.strip()
        if not entry:
            continue

        host, sep, port_text = entry.rpartition(":")
        if not sep or not host:
            raise ValueError(f"Invalid startup node: {entry!r}. Expected host:port")

        try:
            port = int(port_text)
        except ValueError:
            raise ValueError(f"Invalid port in startup node: {entry!r}") from None
        if port not in range(1, 65536):
            raise ValueError(f"Invalid port in startup node: {entry!r}. Must be 1-65535")

        nodes.append((host, port))

    if not nodes:
        raise ValueError("At least one startup node is required")
    return nodes


class ClusterConfig:
    """
    Connection configuration for a cluster client.

    Attributes:
        nodes: Startup nodes as (host, port) tuples
        socket_timeout: Per-request socket timeout in seconds
        password: Optional AUTH password
    """

    def __init__(self, nodes: List[Tuple[str, int]], socket_timeout: float = 5.0,
                 password: Optional[str] = None):
        """
        Initialize the cluster config.

        Args:
            nodes: At least one (host, port) startup node
            socket_timeout: Socket timeout in seconds (must be positive)
            password: Optional password for AUTH
        """
        if not nodes:
            raise ValueError("At least one startup node is required")
        if socket_timeout <= 0:
            raise ValueError(f"Invalid socket_timeout: {socket_timeout}. Must be positive")

        self.nodes = list(nodes)
        self.socket_timeout = socket_timeout
        self.password = password

    @classmethod
    def from_string(cls, spec: str, **kwargs) -> "ClusterConfig":
        """Build a config from a "host:port,host:port" string."""
        return cls(parse_nodes(spec), **kwargs)

    @classmethod
    def from_settings(cls) -> "ClusterConfig":
        """Build a config from the global settings (environment variables)."""
        return cls(
            parse_nodes(settings.STARTUP_NODES),
            socket_timeout=settings.SOCKET_TIMEOUT,
            password=settings.PASSWORD,
        )

    def to_cluster_nodes(self) -> List[ClusterNode]:
        """Get the startup nodes as store client node objects."""
        return [ClusterNode(host, port) for host, port in self.nodes]

    def client_kwargs(self) -> Dict[str, Any]:
        """
        Get keyword arguments for constructing the store client.

        Replies are kept as raw bytes; fields and values are opaque.
        """
        kwargs: Dict[str, Any] = {
            "startup_nodes": self.to_cluster_nodes(),
            "socket_timeout": self.socket_timeout,
            "decode_responses": False,
        }
        if self.password:
            kwargs["password"] = self.password
        return kwargs

    def __repr__(self) -> str:
        nodes = ",".join(f"{host}:{port}" for host, port in self.nodes)
        return f"ClusterConfig(nodes={nodes}, socket_timeout={self.socket_timeout})"
