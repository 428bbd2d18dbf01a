import asyncio
from typing import List

from resolver_app.services.errors import DuplicateResolvedUrl, ResolutionError
from resolver_app.services.redirect_resolver import RedirectResolver, validate_url
from resolver_app.storage.models import ResolvedUrl
from resolver_app.storage.strategies import ResolutionStore


class ResolutionService:
    """
    Resolution service with dependency injection for store and resolver.

    Flow for a new URL:
    1. Validate syntax (no network)
    2. Follow redirects (blocking I/O, runs in a worker thread)
    3. Reject if the destination is already stored
    4. Insert and return the new record

    Steps 3 and 4 are separate store operations, so the duplicate check is
    best-effort: two concurrent requests for the same destination can
    both pass step 3.
    """

    def __init__(self, store: ResolutionStore, resolver: RedirectResolver):
        """
        Initialize resolution service with dependencies.

        Args:
            store: Resolution store strategy
            resolver: Redirect resolver (owns the HTTP transport)
        """
        self.store = store
        self.resolver = resolver

    async def resolve_and_store(self, raw_url: str) -> ResolvedUrl:
        """
        Resolve raw_url and store the result.

        Raises:
            InvalidUrlFormat: before any network activity
            TransportFailure, TooManyRedirects: from the resolver
            DuplicateResolvedUrl: destination already stored
        """
        url = validate_url(raw_url)

        try:
            # requests is blocking; keep the event loop free
            resolved_url = await asyncio.to_thread(self.resolver.resolve, url)
        except ResolutionError as e:
            print(f"❌ Resolution failed for {raw_url!r} ({e.kind.value}): {e.message}")
            raise

        if await self.store.exists(resolved_url):
            raise DuplicateResolvedUrl(resolved_url)

        return await self.store.insert(raw_url, resolved_url)

    async def list_resolutions(self) -> List[ResolvedUrl]:
        """All stored resolutions, most recent first"""
        return await self.store.list_all()

    async def clear_resolutions(self) -> None:
        await self.store.clear()

    async def export_text(self, clear: bool = False) -> str:
        """
        Resolved URLs joined by newlines, most recent first.

        With clear=True the store is emptied afterwards. Records inserted
        between the two steps are cleared without being exported.
        """
        records = await self.store.list_all()
        content = "\n".join(record.resolved_url for record in records)
        if clear:
            await self.store.clear()
        return content
