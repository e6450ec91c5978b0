"""Housekeeping for fetch history and read notifications."""
import logging
from datetime import datetime, timedelta
from typing import Dict, Optional
from motor.motor_asyncio import AsyncIOMotorDatabase

from database.repositories.fetch_log_repo import FetchLogRepository
from database.repositories.notification_repo import NotificationRepository
from shared.config import settings
from shared.utils import get_utc_now

logger = logging.getLogger(__name__)


async def prune_history(
    db: AsyncIOMotorDatabase,
    retention_days: Optional[int] = None,
    now: Optional[datetime] = None
) -> Dict[str, int]:
    """Delete fetch logs and read notifications older than the retention period."""
    days = retention_days or settings.history_retention_days
    cutoff = (now or get_utc_now()) - timedelta(days=days)

    deleted_logs = await FetchLogRepository(db).delete_fetch_logs_before(cutoff)
    deleted_notifications = await NotificationRepository(db).delete_read_notifications_before(cutoff)

    logger.info(
        f"Cleanup: {deleted_logs} logs, {deleted_notifications} notifications removed"
    )
    return {"fetch_logs": deleted_logs, "notifications": deleted_notifications}
