"""Pool management package.

Provides PoolRegistry for tracked pools, allowlist membership and
factory-style lookup across exchange contexts.
"""

from .registry import PoolRegistry

__all__ = ["PoolRegistry"]
