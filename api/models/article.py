"""Article model definitions."""
from typing import List, Optional
from datetime import datetime
from dataclasses import dataclass, field
from pydantic import BaseModel, Field


@dataclass
class RawArticle:
    """Item produced by an adapter before ingestion. Never persisted."""
    title: str
    source_url: str
    summary: Optional[str] = None
    content: Optional[str] = None
    author: Optional[str] = None
    published_at: Optional[datetime] = None
    image_url: Optional[str] = None
    tags: Optional[List[str]] = field(default=None)


class ArticleModel(BaseModel):
    """Article model for database representation."""
    id: str = Field(alias="_id")
    title: str
    summary: Optional[str] = None
    content: Optional[str] = None
    author: Optional[str] = None
    published_at: Optional[datetime] = None
    source_url: str
    image_url: Optional[str] = None
    language: str
    country: Optional[str] = None
    tags: List[str] = Field(default_factory=list)
    breaking_score: int = Field(default=0, ge=0, le=100)
    dedup_hash: str
    source_id: str
    category_id: Optional[str] = None
    created_at: datetime

    class Config:
        populate_by_name = True


class CategoryModel(BaseModel):
    """Category model for database representation."""
    id: str = Field(alias="_id")
    slug: str
    name: str

    class Config:
        populate_by_name = True
