from pydantic import BaseModel, Field, ConfigDict
from datetime import datetime


class ResolveRequest(BaseModel):
    url: str = Field(..., min_length=1, description="URL to resolve (scheme optional)")


class ResolvedUrlResponse(BaseModel):
    """Response schema that serializes a stored ResolvedUrl record

    - from_attributes=True reads straight from the record's attributes
    """
    id: int
    original_url: str
    resolved_url: str
    timestamp: datetime

    # Pydantic V2 style configuration
    model_config = ConfigDict(from_attributes=True)


class MessageResponse(BaseModel):
    message: str
