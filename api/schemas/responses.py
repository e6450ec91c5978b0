"""Response schemas for API endpoints."""
import math
from typing import List, Optional
from datetime import datetime
from pydantic import BaseModel, Field

from api.models.alert import NotificationChannelEnum, NotificationStatusEnum
from api.models.fetch_log import FetchResult, FetchStatusEnum


class FetchResponse(BaseModel):
    """Response schema for a fetch trigger."""
    results: List[FetchResult] = Field(default_factory=list, description="Per-source outcomes")


class FetchLogResponse(BaseModel):
    """Schema for a single fetch log entry."""
    id: str = Field(..., description="Fetch log identifier")
    source_id: str = Field(..., description="Fetched source")
    status: FetchStatusEnum = Field(..., description="Fetch status")
    started_at: datetime = Field(..., description="Fetch start timestamp")
    completed_at: Optional[datetime] = Field(None, description="Fetch completion timestamp")
    articles_found: int = Field(..., description="Items returned by the adapter")
    articles_new: int = Field(..., description="Items stored as new articles")
    errors: List[str] = Field(default_factory=list, description="Error messages")


class NotificationResponse(BaseModel):
    """Schema for a single notification."""
    id: str = Field(..., description="Notification identifier")
    channel: NotificationChannelEnum = Field(..., description="Delivery channel")
    status: NotificationStatusEnum = Field(..., description="Delivery status")
    article_id: str = Field(..., description="Matched article")
    alert_rule_id: str = Field(..., description="Matching alert rule")
    created_at: datetime = Field(..., description="Creation timestamp")


class PaginatedResponse(BaseModel):
    """Pagination envelope fields."""
    total: int = Field(..., description="Total matching records")
    page: int = Field(..., description="Current page (1-based)")
    limit: int = Field(..., description="Page size")
    total_pages: int = Field(..., description="Number of pages")

    @staticmethod
    def pages(total: int, limit: int) -> int:
        return math.ceil(total / limit) if limit else 0


class FetchLogListResponse(PaginatedResponse):
    """Response schema for fetch log listing."""
    data: List[FetchLogResponse] = Field(default_factory=list)


class NotificationListResponse(PaginatedResponse):
    """Response schema for notification listing."""
    data: List[NotificationResponse] = Field(default_factory=list)


class ErrorResponse(BaseModel):
    """Schema for error responses."""
    error: str = Field(..., description="Error message")
    code: Optional[str] = Field(None, description="Machine-readable error code")
