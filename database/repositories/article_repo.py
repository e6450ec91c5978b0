"""Article repository for CRUD operations on Articles collection."""
import logging
from typing import Optional, List, Dict, Any
from datetime import datetime
from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo.errors import DuplicateKeyError
from pydantic import ValidationError

from api.models.article import ArticleModel
from shared.utils import generate_article_id, get_utc_now

logger = logging.getLogger(__name__)


class ArticleRepository:
    """Repository for Article CRUD operations."""

    def __init__(self, db: AsyncIOMotorDatabase):
        self.collection = db.articles

    async def create_article(self, fields: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        """
        Insert a new article record.

        Returns None when another writer already stored the same dedup hash;
        the unique index on dedup_hash is what enforces this.
        """
        article = {
            "_id": generate_article_id(),
            **fields,
            "created_at": get_utc_now()
        }

        try:
            await self.collection.insert_one(article)
        except DuplicateKeyError:
            logger.info(f"Article with hash {fields.get('dedup_hash')} already stored")
            return None
        return article

    async def get_article_by_dedup_hash(self, dedup_hash: str) -> Optional[Dict[str, Any]]:
        """Get an article by its dedup hash."""
        return await self.collection.find_one({"dedup_hash": dedup_hash}, {"_id": 1})

    async def get_articles_created_since(self, since: datetime) -> List[ArticleModel]:
        """Get articles created at or after the given timestamp, skipping invalid documents."""
        cursor = self.collection.find({"created_at": {"$gte": since}})
        articles = []
        async for doc in cursor:
            try:
                articles.append(ArticleModel(**doc))
            except ValidationError as e:
                logger.error(f"Skipping invalid article {doc.get('_id')}: {e}")
        return articles
