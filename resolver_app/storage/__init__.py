"""
Resolution store module.

Implements the Strategy Pattern so the resolver service works the same
against the in-memory store or a SQL database.
"""

from .models import ResolvedUrl
from .strategies import ResolutionStore, InMemoryResolutionStore, SQLResolutionStore
from .factory import ResolutionStoreFactory, StoreBackend

__all__ = [
    "ResolvedUrl",
    "ResolutionStore",
    "InMemoryResolutionStore",
    "SQLResolutionStore",
    "ResolutionStoreFactory",
    "StoreBackend",
]
