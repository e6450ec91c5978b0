"""Alert rule evaluation for freshly ingested articles."""
import logging
from datetime import datetime, timedelta
from typing import Optional
from motor.motor_asyncio import AsyncIOMotorDatabase

from api.models.alert import AlertRuleModel
from api.models.article import ArticleModel
from database.repositories.article_repo import ArticleRepository
from database.repositories.alert_rule_repo import AlertRuleRepository
from database.repositories.notification_repo import NotificationRepository
from shared.config import settings
from shared.utils import get_utc_now

logger = logging.getLogger(__name__)


def article_matches_rule(article: ArticleModel, rule: AlertRuleModel) -> bool:
    """
    Check every predicate the rule configures.

    A rule without a score threshold, categories or keywords matches
    every article.
    """
    if rule.min_breaking_score > 0 and article.breaking_score < rule.min_breaking_score:
        return False

    if rule.category_ids:
        if not article.category_id or article.category_id not in rule.category_ids:
            return False

    if rule.keywords:
        text = f"{article.title} {article.summary or ''}".lower()
        if not any(keyword.lower() in text for keyword in rule.keywords):
            return False

    return True


class AlertMatcher:
    """Creates in-app notifications for articles matching user alert rules."""

    def __init__(self, db: AsyncIOMotorDatabase, window_minutes: Optional[int] = None):
        self.article_repo = ArticleRepository(db)
        self.alert_rule_repo = AlertRuleRepository(db)
        self.notification_repo = NotificationRepository(db)
        self.window = timedelta(minutes=window_minutes or settings.alert_window_minutes)

    async def evaluate_new_articles(self, now: Optional[datetime] = None) -> int:
        """
        Match articles created within the trailing window against enabled rules.

        Returns the number of notifications created. Running it again over the
        same articles creates nothing new.
        """
        since = (now or get_utc_now()) - self.window

        articles = await self.article_repo.get_articles_created_since(since)
        if not articles:
            return 0

        rules = await self.alert_rule_repo.find_enabled_alert_rules()
        if not rules:
            return 0

        created = 0
        for article in articles:
            for rule in rules:
                if not article_matches_rule(article, rule):
                    continue

                existing = await self.notification_repo.find_notification(
                    article.id, rule.id, rule.user_id
                )
                if existing:
                    continue

                notification = await self.notification_repo.create_notification(
                    article_id=article.id,
                    alert_rule_id=rule.id,
                    user_id=rule.user_id
                )
                if notification:
                    created += 1

        logger.info(
            f"Evaluated {len(articles)} articles against {len(rules)} rules, "
            f"created {created} notifications"
        )
        return created
