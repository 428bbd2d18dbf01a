"""
Factory for creating resolution store instances.
Simple, clean factory with singleton caching.
"""

from enum import Enum
from .strategies import ResolutionStore, InMemoryResolutionStore, SQLResolutionStore
from resolver_app.config import settings


class StoreBackend(Enum):
    """Available resolution store backends"""
    MEMORY = "memory"
    SQL = "sql"


class ResolutionStoreFactory:
    """
    Simple factory for creating resolution store instances.

    The store lives as long as the process, so one instance is created
    and reused. Gets configuration from settings (not passed as parameters).
    """

    _instance: ResolutionStore = None  # Single cached instance

    @classmethod
    def create(cls, backend: StoreBackend) -> ResolutionStore:
        """
        Create or return cached store instance.

        Args:
            backend: Type of store backend (from enum)

        Returns:
            Singleton store instance
        """
        # Return cached instance if exists
        if cls._instance is not None:
            return cls._instance

        # Create new instance based on backend type
        if backend == StoreBackend.MEMORY:
            cls._instance = InMemoryResolutionStore()
            print("✅ In-memory resolution store initialized")

        elif backend == StoreBackend.SQL:
            cls._instance = SQLResolutionStore(database_url=settings.database_url)
            print(f"✅ SQL resolution store initialized ({settings.database_url})")

        else:
            raise ValueError(f"Unknown store backend: {backend}")

        return cls._instance

    @classmethod
    def clear_instance(cls):
        """Clear cached instance (for testing)"""
        cls._instance = None
