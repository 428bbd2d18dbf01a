from typing import List

from pydantic import BaseModel, Field


class AnalyzeRequest(BaseModel):
    content: str = Field(..., min_length=1, description="Raw text, one URL per line")
    sort: bool = Field(False, description="Sort unique lines alphabetically")


class MergeRequest(BaseModel):
    files: List[str] = Field(..., min_length=1, description="Raw text of each file")
    sort: bool = Field(False, description="Sort unique lines alphabetically")


class DownloadRequest(MergeRequest):
    filename: str = Field("cleaned-links.txt", min_length=1, description="Attachment file name")


class LineSetSummary(BaseModel):
    """Result of the split/trim/dedup transform"""
    total_lines: int
    unique_count: int
    duplicate_count: int
    lines: List[str]
