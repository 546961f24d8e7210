"""Commands module for cluster-hash."""

from .hash_commands import ClusterHashCommands

__all__ = ["ClusterHashCommands"]
