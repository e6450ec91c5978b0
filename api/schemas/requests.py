"""Request schemas for API endpoints."""
from typing import Optional
from pydantic import BaseModel, Field, field_validator


class FetchRequest(BaseModel):
    """Request schema for triggering a fetch."""
    source_id: Optional[str] = Field(
        default=None,
        description="Fetch only this source; omit to fetch all enabled sources"
    )

    @field_validator('source_id')
    @classmethod
    def blank_to_none(cls, v: Optional[str]) -> Optional[str]:
        """Treat a blank source id as fetch-all."""
        if v is not None and not v.strip():
            return None
        return v
