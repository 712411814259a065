"""Adapters — tool bindings for the bootstrap's side effects.

Public re-exports for convenient access.
"""

from devstrap.adapters.base import Adapter, ExecutionContext
from devstrap.adapters.mock import MockAdapter
from devstrap.adapters.registry import AdapterRegistry

__all__ = [
    "Adapter",
    "AdapterRegistry",
    "ExecutionContext",
    "MockAdapter",
]
