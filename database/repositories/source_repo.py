"""Source repository. Sources are administered elsewhere; this only reads and tracks status."""
import logging
from typing import Optional, List
from datetime import datetime
from motor.motor_asyncio import AsyncIOMotorDatabase
from pydantic import ValidationError

from api.models.source import SourceModel, SourceStatusEnum
from shared.utils import get_utc_now

logger = logging.getLogger(__name__)


class SourceRepository:
    """Repository for Source reads and status transitions."""

    def __init__(self, db: AsyncIOMotorDatabase):
        self.collection = db.sources

    async def find_enabled_sources(self) -> List[SourceModel]:
        """List enabled sources ordered by name. Invalid documents are logged and skipped."""
        cursor = self.collection.find({"enabled": True}).sort("name", 1)
        sources = []
        async for doc in cursor:
            try:
                sources.append(SourceModel(**doc))
            except ValidationError as e:
                logger.error(f"Skipping invalid source {doc.get('_id')}: {e}")
        return sources

    async def find_source_by_id(self, source_id: str) -> Optional[SourceModel]:
        """Get a source by ID."""
        doc = await self.collection.find_one({"_id": source_id})
        return SourceModel(**doc) if doc else None

    async def update_source_status(
        self,
        source_id: str,
        status: SourceStatusEnum,
        last_fetched_at: Optional[datetime] = None
    ) -> bool:
        """Update source status and, optionally, its last fetch time."""
        update = {"status": status.value}
        if last_fetched_at is not None:
            update["last_fetched_at"] = last_fetched_at

        result = await self.collection.update_one(
            {"_id": source_id},
            {"$set": update}
        )
        return result.modified_count > 0

    async def mark_fetched(self, source_id: str) -> bool:
        """Mark a source as successfully fetched."""
        return await self.update_source_status(
            source_id, SourceStatusEnum.ACTIVE, last_fetched_at=get_utc_now()
        )

    async def mark_error(self, source_id: str) -> bool:
        """Mark a source as failing. last_fetched_at is left untouched."""
        return await self.update_source_status(source_id, SourceStatusEnum.ERROR)
