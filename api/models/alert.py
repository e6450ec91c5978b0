"""Alert rule and notification model definitions."""
from enum import Enum
from typing import List
from datetime import datetime
from pydantic import BaseModel, Field


class NotificationChannelEnum(str, Enum):
    """Notification channel enumeration."""
    IN_APP = "IN_APP"
    EMAIL = "EMAIL"
    PUSH = "PUSH"


class NotificationStatusEnum(str, Enum):
    """Notification status enumeration."""
    PENDING = "PENDING"
    SENT = "SENT"
    FAILED = "FAILED"
    READ = "READ"


class AlertRuleModel(BaseModel):
    """User-owned alert rule. Read-only to the ingestion worker."""
    id: str = Field(alias="_id")
    user_id: str
    name: str
    keywords: List[str] = Field(default_factory=list)
    min_breaking_score: int = Field(default=0, ge=0, le=100)
    channels: List[NotificationChannelEnum] = Field(default_factory=list)
    category_ids: List[str] = Field(default_factory=list)
    enabled: bool = True

    class Config:
        populate_by_name = True


class NotificationModel(BaseModel):
    """Notification model for database representation."""
    id: str = Field(alias="_id")
    channel: NotificationChannelEnum
    status: NotificationStatusEnum
    user_id: str
    article_id: str
    alert_rule_id: str
    created_at: datetime

    class Config:
        populate_by_name = True
