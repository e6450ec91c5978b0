"""Fetch log repository for CRUD operations on FetchLogs collection."""
from typing import Optional, List, Dict, Any, Tuple
from datetime import datetime
from motor.motor_asyncio import AsyncIOMotorDatabase

from api.models.fetch_log import FetchStatusEnum
from shared.utils import generate_fetch_log_id, get_utc_now


class FetchLogRepository:
    """Repository for FetchLog CRUD operations."""

    def __init__(self, db: AsyncIOMotorDatabase):
        self.collection = db.fetch_logs

    async def create_fetch_log(self, source_id: str) -> Dict[str, Any]:
        """Create a RUNNING fetch log for a source."""
        fetch_log = {
            "_id": generate_fetch_log_id(),
            "source_id": source_id,
            "status": FetchStatusEnum.RUNNING.value,
            "started_at": get_utc_now(),
            "completed_at": None,
            "articles_found": 0,
            "articles_new": 0,
            "errors": []
        }

        await self.collection.insert_one(fetch_log)
        return fetch_log

    async def complete_fetch_log(
        self,
        fetch_log_id: str,
        status: FetchStatusEnum,
        articles_found: int,
        articles_new: int,
        errors: List[str]
    ) -> bool:
        """
        Record the outcome of a fetch.

        Only a RUNNING log is updated, so a completed log never changes again.
        """
        result = await self.collection.update_one(
            {"_id": fetch_log_id, "status": FetchStatusEnum.RUNNING.value},
            {
                "$set": {
                    "status": status.value,
                    "completed_at": get_utc_now(),
                    "articles_found": articles_found,
                    "articles_new": articles_new,
                    "errors": list(errors)
                }
            }
        )
        return result.modified_count > 0

    async def list_fetch_logs(
        self,
        source_id: Optional[str] = None,
        status: Optional[str] = None,
        page: int = 1,
        limit: int = 20
    ) -> Tuple[List[Dict[str, Any]], int]:
        """List fetch logs newest first. Returns (logs, total)."""
        query = {}
        if source_id:
            query["source_id"] = source_id
        if status:
            query["status"] = status

        skip = (page - 1) * limit
        cursor = self.collection.find(query).sort("started_at", -1).skip(skip).limit(limit)
        logs = await cursor.to_list(length=limit)
        total = await self.collection.count_documents(query)
        return logs, total

    async def delete_fetch_logs_before(self, cutoff: datetime) -> int:
        """Delete fetch logs started before the cutoff."""
        result = await self.collection.delete_many({"started_at": {"$lt": cutoff}})
        return result.deleted_count
