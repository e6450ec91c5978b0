"""Source model definitions."""
from enum import Enum
from typing import Any, Optional
from datetime import datetime
from pydantic import BaseModel, Field, field_validator


class SourceTypeEnum(str, Enum):
    """Source type enumeration."""
    RSS = "RSS"
    API = "API"
    SCRAPE = "SCRAPE"


class SourceStatusEnum(str, Enum):
    """Source status enumeration."""
    ACTIVE = "ACTIVE"
    PAUSED = "PAUSED"
    ERROR = "ERROR"
    DISABLED = "DISABLED"


class SourceConfig(BaseModel):
    """Per-source settings maintained by admins."""
    tier: Optional[int] = None
    note: Optional[str] = None

    @field_validator("tier", mode="before")
    @classmethod
    def coerce_tier(cls, v: Any) -> Optional[int]:
        """Integers and whole-number floats are tiers; anything else means no tier."""
        if isinstance(v, bool):
            return None
        if isinstance(v, float) and v.is_integer():
            # numbers written from JavaScript are stored as BSON doubles
            return int(v)
        if not isinstance(v, int):
            return None
        return v

    @field_validator("note", mode="before")
    @classmethod
    def coerce_note(cls, v: Any) -> Optional[str]:
        return v if isinstance(v, str) else None


class SourceModel(BaseModel):
    """Source model for database representation."""
    id: str = Field(alias="_id")
    name: str
    slug: str
    url: str
    feed_url: Optional[str] = None
    type: SourceTypeEnum
    region: Optional[str] = None
    language: str = "en"
    category_hint: Optional[str] = None
    config: SourceConfig = Field(default_factory=SourceConfig)
    enabled: bool = True
    status: SourceStatusEnum = SourceStatusEnum.ACTIVE
    last_fetched_at: Optional[datetime] = None

    class Config:
        populate_by_name = True

    @field_validator("config", mode="before")
    @classmethod
    def default_config(cls, v: Any) -> Any:
        return v if isinstance(v, (dict, SourceConfig)) else {}
