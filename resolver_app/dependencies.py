"""
FastAPI dependencies for dependency injection.

This module provides singleton instances of the resolution store and the
redirect resolver that are injected into services and routes.

Pattern: Dependency Injection
- Loose coupling between components
- Easy to test (override with fakes)
- Flexible (swap the store backend via config)
"""

from functools import lru_cache

from fastapi import Depends

from resolver_app.config import settings
from resolver_app.services.redirect_resolver import RedirectResolver
from resolver_app.services.resolution_service import ResolutionService
from resolver_app.storage.factory import ResolutionStoreFactory, StoreBackend
from resolver_app.storage.strategies import ResolutionStore


@lru_cache()
def get_store() -> ResolutionStore:
    """
    Get resolution store instance (singleton).

    Factory gets config from settings internally.
    @lru_cache ensures this is called only once.

    Returns:
        ResolutionStore instance based on settings
    """
    backend = StoreBackend(settings.store_backend)
    return ResolutionStoreFactory.create(backend)


@lru_cache()
def get_resolver() -> RedirectResolver:
    """
    Get redirect resolver instance (singleton).

    The resolver is stateless between calls (each resolve() opens its
    own requests.Session), so one instance can serve every request.
    """
    return RedirectResolver()


def get_resolution_service(
    store: ResolutionStore = Depends(get_store),
    resolver: RedirectResolver = Depends(get_resolver)
) -> ResolutionService:
    """Get ResolutionService with store and resolver injected"""
    return ResolutionService(store=store, resolver=resolver)
