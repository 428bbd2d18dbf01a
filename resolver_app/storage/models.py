"""
Data models for the resolution store.
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class ResolvedUrl(BaseModel):
    """
    One stored resolution.

    Records are immutable: the store only inserts and deletes them,
    never updates.
    """

    id: int = Field(..., description="Store-assigned identifier, never reused")
    original_url: str = Field(..., description="URL as submitted")
    resolved_url: str = Field(..., description="Final destination after redirects")
    timestamp: datetime = Field(..., description="When the record was created (UTC)")

    model_config = ConfigDict(
        frozen=True,
        json_schema_extra={
            "example": {
                "id": 1,
                "original_url": "bit.ly/3xyz",
                "resolved_url": "https://www.example.com/landing",
                "timestamp": "2025-10-29T10:30:00Z",
            }
        },
    )
