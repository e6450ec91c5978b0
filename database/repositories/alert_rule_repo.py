"""Alert rule repository. Rules are owned by user-facing CRUD; read-only here."""
import logging
from typing import List
from motor.motor_asyncio import AsyncIOMotorDatabase
from pydantic import ValidationError

from api.models.alert import AlertRuleModel

logger = logging.getLogger(__name__)


class AlertRuleRepository:
    """Repository for AlertRule reads."""

    def __init__(self, db: AsyncIOMotorDatabase):
        self.collection = db.alert_rules

    async def find_enabled_alert_rules(self) -> List[AlertRuleModel]:
        """
        List enabled alert rules with their owner and category ids.

        A rule that fails validation is logged and skipped so the others still fire.
        """
        cursor = self.collection.find({"enabled": True})
        rules = []
        async for doc in cursor:
            try:
                rules.append(AlertRuleModel(**doc))
            except ValidationError as e:
                logger.error(f"Skipping invalid alert rule {doc.get('_id')}: {e}")
        return rules
