"""Notification repository for CRUD operations on Notifications collection."""
import logging
from typing import Optional, List, Dict, Any, Tuple
from datetime import datetime
from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo.errors import DuplicateKeyError

from api.models.alert import NotificationChannelEnum, NotificationStatusEnum
from shared.utils import generate_notification_id, get_utc_now

logger = logging.getLogger(__name__)


class NotificationRepository:
    """Repository for Notification CRUD operations."""

    def __init__(self, db: AsyncIOMotorDatabase):
        self.collection = db.notifications

    async def find_notification(
        self,
        article_id: str,
        alert_rule_id: str,
        user_id: str
    ) -> Optional[Dict[str, Any]]:
        """Find the notification for an (article, rule, user) triple."""
        return await self.collection.find_one(
            {
                "article_id": article_id,
                "alert_rule_id": alert_rule_id,
                "user_id": user_id
            },
            {"_id": 1}
        )

    async def create_notification(
        self,
        article_id: str,
        alert_rule_id: str,
        user_id: str,
        channel: NotificationChannelEnum = NotificationChannelEnum.IN_APP
    ) -> Optional[Dict[str, Any]]:
        """Create a PENDING notification. Returns None if the triple already exists."""
        notification = {
            "_id": generate_notification_id(),
            "channel": channel.value,
            "status": NotificationStatusEnum.PENDING.value,
            "user_id": user_id,
            "article_id": article_id,
            "alert_rule_id": alert_rule_id,
            "created_at": get_utc_now()
        }

        try:
            await self.collection.insert_one(notification)
        except DuplicateKeyError:
            logger.info(f"Notification for article {article_id} and rule {alert_rule_id} already exists")
            return None
        return notification

    async def get_notification(self, notification_id: str) -> Optional[Dict[str, Any]]:
        """Get a notification by ID."""
        return await self.collection.find_one({"_id": notification_id})

    async def list_user_notifications(
        self,
        user_id: str,
        page: int = 1,
        limit: int = 20
    ) -> Tuple[List[Dict[str, Any]], int]:
        """List a user's notifications newest first. Returns (notifications, total)."""
        query = {"user_id": user_id}
        skip = (page - 1) * limit
        cursor = self.collection.find(query).sort("created_at", -1).skip(skip).limit(limit)
        notifications = await cursor.to_list(length=limit)
        total = await self.collection.count_documents(query)
        return notifications, total

    async def mark_notification_read(self, notification_id: str) -> Optional[Dict[str, Any]]:
        """Set a notification's status to READ and return it."""
        return await self.collection.find_one_and_update(
            {"_id": notification_id},
            {"$set": {"status": NotificationStatusEnum.READ.value}},
            return_document=True
        )

    async def delete_read_notifications_before(self, cutoff: datetime) -> int:
        """Delete READ notifications created before the cutoff."""
        result = await self.collection.delete_many({
            "status": NotificationStatusEnum.READ.value,
            "created_at": {"$lt": cutoff}
        })
        return result.deleted_count
