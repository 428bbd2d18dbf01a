"""
Database models for the URL resolver.

Only the SQL store backend uses these; the default in-memory store
keeps plain ResolvedUrl records.
"""

from .resolved_url import ResolvedUrlRecord

__all__ = ["ResolvedUrlRecord"]
