"""Pytest configuration and fixtures."""
import pytest
from datetime import datetime, timezone
from unittest.mock import MagicMock, AsyncMock

from api.models.article import RawArticle
from api.models.source import SourceModel


class FakeCursor:
    """Async cursor stand-in supporting the chained calls repositories use."""

    def __init__(self, docs):
        self.docs = list(docs)

    def sort(self, *args, **kwargs):
        return self

    def skip(self, *args, **kwargs):
        return self

    def limit(self, *args, **kwargs):
        return self

    async def to_list(self, length=None):
        return self.docs[:length] if length else list(self.docs)

    def __aiter__(self):
        self._iter = iter(self.docs)
        return self

    async def __anext__(self):
        try:
            return next(self._iter)
        except StopIteration:
            raise StopAsyncIteration


@pytest.fixture
def fake_cursor():
    """Cursor class for stubbing collection.find results."""
    return FakeCursor


@pytest.fixture
def mock_mongo_db():
    """Create mock MongoDB database."""
    db = MagicMock()

    for name in ("sources", "articles", "categories", "fetch_logs", "alert_rules", "notifications"):
        collection = getattr(db, name)
        collection.find_one = AsyncMock(return_value=None)
        collection.insert_one = AsyncMock()
        collection.update_one = AsyncMock(return_value=MagicMock(modified_count=1, upserted_id=None))
        collection.find_one_and_update = AsyncMock()
        collection.delete_many = AsyncMock(return_value=MagicMock(deleted_count=0))
        collection.count_documents = AsyncMock(return_value=0)
        collection.find = MagicMock(return_value=FakeCursor([]))

    return db


@pytest.fixture
def mock_redis_client():
    """Create mock Redis client."""
    redis = AsyncMock()
    redis.publish = AsyncMock(return_value=1)
    return redis


@pytest.fixture
def make_source():
    """Factory for source models."""
    def _make(**overrides):
        data = {
            "_id": "src_wire",
            "name": "Wire Service",
            "slug": "wire-service",
            "url": "https://wire.example.com",
            "feed_url": "https://wire.example.com/rss.xml",
            "type": "RSS",
            "region": "global",
            "language": "en",
            "category_hint": None,
            "config": {"tier": 1},
            "enabled": True,
            "status": "ACTIVE",
        }
        data.update(overrides)
        return SourceModel(**data)
    return _make


@pytest.fixture
def sample_source(make_source):
    """Create sample tier-1 RSS source."""
    return make_source()


@pytest.fixture
def sample_raw_article():
    """Create sample raw article."""
    return RawArticle(
        title="Central bank holds rates",
        source_url="https://wire.example.com/economy/rates?utm_source=rss",
        summary="Policy makers kept borrowing costs unchanged.",
        content="<p>Policy makers kept borrowing costs unchanged.</p>",
        author="Jane Reporter",
        published_at=datetime(2025, 1, 6, 10, 0, tzinfo=timezone.utc),
        image_url="https://img.example.com/rates.jpg",
        tags=["Economy"]
    )


@pytest.fixture
def sample_feed():
    """RSS document exercising the fields the feed adapter extracts."""
    return b"""<?xml version="1.0" encoding="UTF-8"?>
<rss version="2.0"
     xmlns:media="http://search.yahoo.com/mrss/"
     xmlns:content="http://purl.org/rss/1.0/modules/content/"
     xmlns:dc="http://purl.org/dc/elements/1.1/">
  <channel>
    <title>Wire Service</title>
    <link>https://wire.example.com</link>
    <description>Latest headlines</description>
    <item>
      <title>  Markets rally on rate cut  </title>
      <link>https://wire.example.com/markets-rally</link>
      <description>&lt;p&gt;Stocks &lt;b&gt;surged&lt;/b&gt; today.&lt;/p&gt;</description>
      <content:encoded><![CDATA[<p>Full story of the rally.</p>]]></content:encoded>
      <dc:creator>Jane Reporter</dc:creator>
      <pubDate>Mon, 06 Jan 2025 10:00:00 GMT</pubDate>
      <category>Markets</category>
      <media:thumbnail url="https://img.example.com/thumb.jpg"/>
      <media:content url="https://img.example.com/full.jpg" medium="image"/>
      <enclosure url="https://img.example.com/enclosure.jpg" type="image/jpeg" length="100"/>
    </item>
    <item>
      <title>Item without a link</title>
      <description>Should be skipped</description>
    </item>
    <item>
      <title>   </title>
      <link>https://wire.example.com/blank-title</link>
    </item>
    <item>
      <title>Storm update</title>
      <link>https://wire.example.com/storm</link>
      <pubDate>not a date</pubDate>
      <enclosure url="https://img.example.com/storm.jpg" type="image/jpeg" length="100"/>
    </item>
  </channel>
</rss>
"""
