"""
Cluster module for cluster-hash.

This module provides:
- Startup node configuration for the cluster client
- The connection that owns the client and the exception translator
"""

from .config import ClusterConfig, parse_nodes
from .connection import ClusterConnection

__all__ = ['ClusterConfig', 'parse_nodes', 'ClusterConnection']
