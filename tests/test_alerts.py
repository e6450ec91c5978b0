"""Alert rule matching tests."""
import pytest
from datetime import datetime, timezone
from unittest.mock import AsyncMock

from api.models.alert import AlertRuleModel
from api.models.article import ArticleModel
from ingestion.alerts import AlertMatcher, article_matches_rule

NOW = datetime(2025, 1, 6, 12, 0, tzinfo=timezone.utc)


def make_article(**overrides):
    data = {
        "_id": "art_001",
        "title": "Senate approves new tariff package",
        "summary": "The vote passed narrowly.",
        "source_url": "https://wire.example.com/tariffs",
        "language": "en",
        "breaking_score": 40,
        "dedup_hash": "abc123",
        "source_id": "src_wire",
        "category_id": "cat_politics",
        "created_at": NOW
    }
    data.update(overrides)
    return ArticleModel(**data)


def make_rule(**overrides):
    data = {
        "_id": "rule_001",
        "user_id": "user_001",
        "name": "Trade watch",
        "channels": ["IN_APP"]
    }
    data.update(overrides)
    return AlertRuleModel(**data)


class TestArticleMatchesRule:
    """Tests for the rule predicates."""

    def test_rule_without_predicates_matches_everything(self):
        assert article_matches_rule(make_article(), make_rule())

    def test_score_threshold(self):
        article = make_article(breaking_score=40)

        assert article_matches_rule(article, make_rule(min_breaking_score=40))
        assert not article_matches_rule(article, make_rule(min_breaking_score=41))

    def test_category_filter(self):
        rule = make_rule(category_ids=["cat_politics", "cat_business"])

        assert article_matches_rule(make_article(), rule)
        assert not article_matches_rule(make_article(category_id="cat_sports"), rule)
        assert not article_matches_rule(make_article(category_id=None), rule)

    def test_keyword_is_case_insensitive_substring(self):
        assert article_matches_rule(make_article(), make_rule(keywords=["TARIFF"]))

    def test_keyword_matches_summary(self):
        assert article_matches_rule(make_article(), make_rule(keywords=["narrowly"]))

    def test_any_keyword_is_enough(self):
        assert article_matches_rule(make_article(), make_rule(keywords=["earthquake", "vote"]))

    def test_keyword_miss(self):
        assert not article_matches_rule(make_article(summary=None), make_rule(keywords=["vote"]))

    def test_all_predicates_must_hold(self):
        rule = make_rule(keywords=["tariff"], min_breaking_score=50, category_ids=["cat_politics"])

        assert not article_matches_rule(make_article(breaking_score=45), rule)
        assert article_matches_rule(make_article(breaking_score=55), rule)


class TestAlertMatcher:
    """Tests for AlertMatcher class."""

    @pytest.fixture
    def matcher(self, mock_mongo_db):
        """Create matcher backed by an in-memory notification store."""
        matcher = AlertMatcher(mock_mongo_db, window_minutes=15)
        store = {}

        async def find(article_id, alert_rule_id, user_id):
            return store.get((article_id, alert_rule_id, user_id))

        async def create(article_id, alert_rule_id, user_id):
            key = (article_id, alert_rule_id, user_id)
            if key in store:
                return None
            store[key] = {"_id": f"ntf_{len(store) + 1}"}
            return store[key]

        matcher.notification_repo.find_notification = AsyncMock(side_effect=find)
        matcher.notification_repo.create_notification = AsyncMock(side_effect=create)
        matcher.store = store
        return matcher

    @pytest.mark.asyncio
    async def test_creates_one_notification_per_match(self, matcher):
        matcher.article_repo.get_articles_created_since = AsyncMock(return_value=[
            make_article(),
            make_article(_id="art_002", title="Local bakery opens", summary=None)
        ])
        matcher.alert_rule_repo.find_enabled_alert_rules = AsyncMock(return_value=[
            make_rule(keywords=["tariff"]),
            make_rule(_id="rule_002", user_id="user_002", min_breaking_score=90)
        ])

        created = await matcher.evaluate_new_articles(now=NOW)

        assert created == 1
        assert set(matcher.store) == {("art_001", "rule_001", "user_001")}

    @pytest.mark.asyncio
    async def test_second_evaluation_creates_nothing(self, matcher):
        matcher.article_repo.get_articles_created_since = AsyncMock(return_value=[make_article()])
        matcher.alert_rule_repo.find_enabled_alert_rules = AsyncMock(return_value=[make_rule()])

        first = await matcher.evaluate_new_articles(now=NOW)
        second = await matcher.evaluate_new_articles(now=NOW)

        assert first == 1
        assert second == 0
        assert len(matcher.store) == 1

    @pytest.mark.asyncio
    async def test_window_is_trailing_fifteen_minutes(self, matcher):
        matcher.article_repo.get_articles_created_since = AsyncMock(return_value=[])

        await matcher.evaluate_new_articles(now=NOW)

        matcher.article_repo.get_articles_created_since.assert_awaited_once_with(
            datetime(2025, 1, 6, 11, 45, tzinfo=timezone.utc)
        )

    @pytest.mark.asyncio
    async def test_no_recent_articles(self, matcher):
        matcher.article_repo.get_articles_created_since = AsyncMock(return_value=[])
        matcher.alert_rule_repo.find_enabled_alert_rules = AsyncMock(return_value=[make_rule()])

        assert await matcher.evaluate_new_articles(now=NOW) == 0
        matcher.alert_rule_repo.find_enabled_alert_rules.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_no_enabled_rules(self, matcher):
        matcher.article_repo.get_articles_created_since = AsyncMock(return_value=[make_article()])
        matcher.alert_rule_repo.find_enabled_alert_rules = AsyncMock(return_value=[])

        assert await matcher.evaluate_new_articles(now=NOW) == 0
        matcher.notification_repo.create_notification.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_lost_race_is_not_counted(self, matcher):
        """A concurrent writer inserted the triple between check and insert."""
        matcher.article_repo.get_articles_created_since = AsyncMock(return_value=[make_article()])
        matcher.alert_rule_repo.find_enabled_alert_rules = AsyncMock(return_value=[make_rule()])
        matcher.notification_repo.find_notification = AsyncMock(return_value=None)
        matcher.notification_repo.create_notification = AsyncMock(return_value=None)

        assert await matcher.evaluate_new_articles(now=NOW) == 0
