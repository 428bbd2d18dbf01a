"""
Resolution store strategies using Strategy Pattern.

Allows switching where resolved URLs are kept:
- In-memory: default, lost on restart
- SQL (SQLAlchemy): survives restarts, any SQLAlchemy database URL
"""

from abc import ABC, abstractmethod
from datetime import datetime, timezone
from typing import Dict, List
import asyncio

from sqlalchemy import func

from resolver_app.database.connection import Base, create_db_engine, create_session_factory
from resolver_app.models.resolved_url import ResolvedUrlRecord
from resolver_app.storage.models import ResolvedUrl


def _newest_first(records: List[ResolvedUrl]) -> List[ResolvedUrl]:
    """Order by timestamp descending, higher id first on ties"""
    return sorted(records, key=lambda r: (r.timestamp, r.id), reverse=True)


class ResolutionStore(ABC):
    """
    Abstract base class for resolution stores.

    Contract shared by every backend:
    - ids are assigned monotonically and never reused, not even after clear()
    - records are immutable once inserted
    - operations are mutually exclusive (one lock per store)
    - no uniqueness enforcement: duplicate rejection belongs to the caller

    All methods are async for interface consistency with I/O backends.
    """

    @abstractmethod
    async def insert(self, original_url: str, resolved_url: str) -> ResolvedUrl:
        """
        Store a new record.

        Args:
            original_url: URL as submitted
            resolved_url: Final destination

        Returns:
            The new record with its id and timestamp
        """
        pass

    @abstractmethod
    async def list_all(self) -> List[ResolvedUrl]:
        """All records, most recent first"""
        pass

    @abstractmethod
    async def exists(self, resolved_url: str) -> bool:
        """True if a record's resolved URL equals resolved_url exactly"""
        pass

    @abstractmethod
    async def clear(self) -> None:
        """Remove all records. The id counter keeps moving forward."""
        pass

    @abstractmethod
    async def count(self) -> int:
        """Number of stored records"""
        pass


class InMemoryResolutionStore(ResolutionStore):
    """
    In-memory store using a Python dict.

    Pros:
    - No setup, no external services
    - Fast

    Cons:
    - Lost on restart
    - Not shared between worker processes

    Default backend.
    """

    def __init__(self):
        """Initialize empty store"""
        self._records: Dict[int, ResolvedUrl] = {}
        self._next_id = 1
        self._lock = asyncio.Lock()

    async def insert(self, original_url: str, resolved_url: str) -> ResolvedUrl:
        async with self._lock:
            record = ResolvedUrl(
                id=self._next_id,
                original_url=original_url,
                resolved_url=resolved_url,
                timestamp=datetime.now(timezone.utc),
            )
            self._records[record.id] = record
            self._next_id += 1
            return record

    async def list_all(self) -> List[ResolvedUrl]:
        async with self._lock:
            return _newest_first(list(self._records.values()))

    async def exists(self, resolved_url: str) -> bool:
        async with self._lock:
            return any(r.resolved_url == resolved_url for r in self._records.values())

    async def clear(self) -> None:
        async with self._lock:
            # _next_id is left alone so ids are never reused
            self._records.clear()

    async def count(self) -> int:
        async with self._lock:
            return len(self._records)


class SQLResolutionStore(ResolutionStore):
    """
    SQLAlchemy-backed store.

    Pros:
    - Survives restarts (file or server database)
    - Same table layout as the resolved_urls schema

    Cons:
    - Slower than memory
    - Sync DB calls inside async methods (fine for this working set)

    On SQLite the table uses AUTOINCREMENT, so ids stay unique across
    clears and restarts.
    """

    def __init__(self, database_url: str = "sqlite:///./resolved_urls.db"):
        """
        Initialize SQL store and create the table if needed.

        Args:
            database_url: SQLAlchemy database URL
        """
        self.database_url = database_url
        self.engine = create_db_engine(database_url)
        self.session_factory = create_session_factory(self.engine)
        self._lock = asyncio.Lock()
        Base.metadata.create_all(bind=self.engine)

    @staticmethod
    def _to_model(row: ResolvedUrlRecord) -> ResolvedUrl:
        timestamp = row.timestamp
        if timestamp.tzinfo is None:
            # SQLite drops tzinfo; values are always written in UTC
            timestamp = timestamp.replace(tzinfo=timezone.utc)
        return ResolvedUrl(
            id=row.id,
            original_url=row.original_url,
            resolved_url=row.resolved_url,
            timestamp=timestamp,
        )

    async def insert(self, original_url: str, resolved_url: str) -> ResolvedUrl:
        async with self._lock:
            db = self.session_factory()
            try:
                row = ResolvedUrlRecord(
                    original_url=original_url,
                    resolved_url=resolved_url,
                    timestamp=datetime.now(timezone.utc),
                )
                db.add(row)
                db.commit()
                db.refresh(row)
                return self._to_model(row)
            except Exception:
                db.rollback()
                raise
            finally:
                db.close()

    async def list_all(self) -> List[ResolvedUrl]:
        async with self._lock:
            db = self.session_factory()
            try:
                rows = (
                    db.query(ResolvedUrlRecord)
                    .order_by(ResolvedUrlRecord.timestamp.desc(), ResolvedUrlRecord.id.desc())
                    .all()
                )
                return [self._to_model(row) for row in rows]
            finally:
                db.close()

    async def exists(self, resolved_url: str) -> bool:
        async with self._lock:
            db = self.session_factory()
            try:
                row = (
                    db.query(ResolvedUrlRecord.id)
                    .filter(ResolvedUrlRecord.resolved_url == resolved_url)
                    .first()
                )
                return row is not None
            finally:
                db.close()

    async def clear(self) -> None:
        async with self._lock:
            db = self.session_factory()
            try:
                db.query(ResolvedUrlRecord).delete()
                db.commit()
            except Exception:
                db.rollback()
                raise
            finally:
                db.close()

    async def count(self) -> int:
        async with self._lock:
            db = self.session_factory()
            try:
                return db.query(func.count(ResolvedUrlRecord.id)).scalar()
            finally:
                db.close()
