"""Fetch log model definitions."""
from enum import Enum
from typing import List, Optional
from datetime import datetime
from pydantic import BaseModel, Field


class FetchStatusEnum(str, Enum):
    """Fetch log status enumeration."""
    RUNNING = "RUNNING"
    SUCCESS = "SUCCESS"
    PARTIAL = "PARTIAL"
    FAILED = "FAILED"


class FetchLogModel(BaseModel):
    """Fetch log model for database representation."""
    id: str = Field(alias="_id")
    source_id: str
    status: FetchStatusEnum
    started_at: datetime
    completed_at: Optional[datetime] = None
    articles_found: int = 0
    articles_new: int = 0
    errors: List[str] = Field(default_factory=list)

    class Config:
        populate_by_name = True


class FetchResult(BaseModel):
    """Outcome of fetching one source."""
    source_id: str
    source_name: str
    status: str = Field(..., description="success, partial or failed")
    articles_found: int
    articles_new: int
    errors: List[str] = Field(default_factory=list)
    duration_ms: int
