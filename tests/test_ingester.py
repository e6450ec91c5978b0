"""Article ingestion tests."""
import asyncio
import pytest
from dataclasses import replace
from unittest.mock import AsyncMock
from pymongo.errors import ServerSelectionTimeoutError

from api.models.article import CategoryModel
from ingestion.ingester import ArticleIngester, classify_text
from shared.exceptions import ArticleProcessingError
from shared.utils import dedup_hash


def category_for(slug):
    return CategoryModel(_id=f"cat_{slug}", slug=slug, name=slug.title())


def in_memory_article_store(ingester):
    """Back the article repository with a dict that enforces unique hashes."""
    stored = {}

    async def find(article_hash):
        return stored.get(article_hash)

    async def create(fields):
        if fields["dedup_hash"] in stored:
            return None
        article = {"_id": f"art_{len(stored) + 1}", **fields}
        stored[fields["dedup_hash"]] = article
        return article

    ingester.article_repo.get_article_by_dedup_hash = AsyncMock(side_effect=find)
    ingester.article_repo.create_article = AsyncMock(side_effect=create)
    return stored


class TestClassifyText:
    """Tests for keyword-based classification."""

    def test_single_hit_is_below_threshold(self):
        assert classify_text("Senate debates", None) is None

    def test_two_hits_assign_category(self):
        assert classify_text("Senate passes election bill", None) == "politics"

    def test_summary_counts_toward_hits(self):
        assert classify_text("Senate debates", "Election looms") == "politics"

    def test_tie_goes_to_first_category(self):
        # technology: startup, software / business: startup, investment
        assert classify_text("Startup software investment", None) == "technology"

    def test_matching_is_case_insensitive(self):
        assert classify_text("NASA SCIENTIST", None) == "science"


class TestArticleIngester:
    """Tests for ArticleIngester class."""

    @pytest.fixture
    def ingester(self, mock_mongo_db):
        """Create ingester with mock db."""
        ingester = ArticleIngester(mock_mongo_db)
        ingester.category_repo.get_category_by_slug = AsyncMock(
            side_effect=category_for
        )
        return ingester

    @pytest.mark.asyncio
    async def test_process_stores_new_article(self, ingester, sample_raw_article, sample_source):
        stored = in_memory_article_store(ingester)

        is_new = await ingester.process(sample_raw_article, sample_source)

        assert is_new
        article = stored[dedup_hash(sample_raw_article.source_url)]
        assert article["title"] == "Central bank holds rates"
        assert article["source_id"] == "src_wire"
        assert article["language"] == "en"
        assert article["country"] == "global"
        assert article["tags"] == ["Economy"]
        assert 0 <= article["breaking_score"] <= 100

    @pytest.mark.asyncio
    async def test_process_same_url_twice_stores_once(self, ingester, sample_raw_article, sample_source):
        stored = in_memory_article_store(ingester)

        first = await ingester.process(sample_raw_article, sample_source)
        second = await ingester.process(sample_raw_article, sample_source)

        assert first is True
        assert second is False
        assert len(stored) == 1
        assert ingester.article_repo.create_article.await_count == 1

    @pytest.mark.asyncio
    async def test_equivalent_urls_are_duplicates(self, ingester, sample_raw_article, sample_source):
        stored = in_memory_article_store(ingester)
        variant = replace(sample_raw_article, source_url="HTTPS://WIRE.example.com/economy/rates/#comments")

        await ingester.process(sample_raw_article, sample_source)
        assert await ingester.process(variant, sample_source) is False
        assert len(stored) == 1

    @pytest.mark.asyncio
    async def test_concurrent_duplicates_rely_on_unique_index(self, ingester, sample_raw_article, sample_source):
        """Both calls pass the existence check; the storage constraint keeps one."""
        stored = in_memory_article_store(ingester)
        ingester.article_repo.get_article_by_dedup_hash = AsyncMock(return_value=None)

        results = await asyncio.gather(
            ingester.process(sample_raw_article, sample_source),
            ingester.process(sample_raw_article, sample_source)
        )

        assert sorted(results) == [False, True]
        assert len(stored) == 1

    @pytest.mark.asyncio
    async def test_storage_failure_raises_processing_error(self, ingester, sample_raw_article, sample_source):
        ingester.article_repo.get_article_by_dedup_hash = AsyncMock(return_value=None)
        ingester.article_repo.create_article = AsyncMock(
            side_effect=ServerSelectionTimeoutError("no primary")
        )

        with pytest.raises(ArticleProcessingError, match='Article "Central bank holds rates": no primary'):
            await ingester.process(sample_raw_article, sample_source)

    @pytest.mark.asyncio
    async def test_source_hint_wins_over_keywords(self, ingester, sample_raw_article, make_source):
        stored = in_memory_article_store(ingester)
        source = make_source(category_hint="world")
        article = replace(sample_raw_article, title="Senate passes election bill")

        await ingester.process(article, source)

        assert stored[dedup_hash(article.source_url)]["category_id"] == "cat_world"

    @pytest.mark.asyncio
    async def test_unknown_hint_falls_back_to_keywords(self, ingester, sample_raw_article, make_source):
        ingester.category_repo.get_category_by_slug = AsyncMock(
            side_effect=lambda slug: None if slug == "opinion" else category_for(slug)
        )
        article = replace(sample_raw_article, title="Senate passes election bill", summary=None)

        category_id = await ingester.classify(article, make_source(category_hint="opinion"))

        assert category_id == "cat_politics"

    @pytest.mark.asyncio
    async def test_single_keyword_hit_leaves_article_uncategorized(self, ingester, sample_raw_article, sample_source):
        article = replace(sample_raw_article, title="Senate debates", summary=None)

        assert await ingester.classify(article, sample_source) is None

    @pytest.mark.asyncio
    async def test_missing_category_document_yields_none(self, ingester, sample_raw_article, sample_source):
        ingester.category_repo.get_category_by_slug = AsyncMock(return_value=None)
        article = replace(sample_raw_article, title="Senate passes election bill", summary=None)

        assert await ingester.classify(article, sample_source) is None
