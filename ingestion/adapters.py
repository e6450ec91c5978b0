"""Source adapters: fetch raw items from one kind of external source."""
import asyncio
import logging
from datetime import datetime, timezone, timedelta
from typing import Dict, List, Optional, Protocol, Union

import aiohttp
import feedparser
from bs4 import BeautifulSoup
from dateutil.parser import parse as parse_date

from api.models.article import RawArticle
from api.models.source import SourceModel, SourceTypeEnum
from shared.config import settings
from shared.exceptions import AdapterFailure, ConfigurationError

logger = logging.getLogger(__name__)

# Timezone abbreviations for date parsing
TZINFOS = {
    "EST": timezone(timedelta(hours=-5)),
    "EDT": timezone(timedelta(hours=-4)),
    "CST": timezone(timedelta(hours=-6)),
    "CDT": timezone(timedelta(hours=-5)),
    "MST": timezone(timedelta(hours=-7)),
    "MDT": timezone(timedelta(hours=-6)),
    "PST": timezone(timedelta(hours=-8)),
    "PDT": timezone(timedelta(hours=-7)),
    "GMT": timezone.utc,
    "UTC": timezone.utc,
    "BST": timezone(timedelta(hours=1)),
}


class Adapter(Protocol):
    """Fetch capability shared by every source type."""

    async def fetch(self, source: SourceModel) -> List[RawArticle]:
        ...


class FeedAdapter:
    """Adapter for RSS and Atom feeds."""

    def __init__(
        self,
        timeout: Optional[int] = None,
        user_agent: Optional[str] = None,
        max_content_length: Optional[int] = None
    ):
        self.timeout = timeout or settings.feed_timeout
        self.max_content_length = max_content_length or settings.feed_max_content_length
        self.headers = {
            "User-Agent": user_agent or settings.feed_user_agent,
            "Accept": "application/rss+xml, application/xml, text/xml, */*",
        }

    async def fetch(self, source: SourceModel) -> List[RawArticle]:
        """Download and parse the source's feed."""
        feed_url = source.feed_url or source.url
        document = await self._download(feed_url)
        return self.parse_feed(document, feed_url)

    async def _download(self, url: str) -> bytes:
        try:
            async with aiohttp.ClientSession(
                timeout=aiohttp.ClientTimeout(total=self.timeout),
                headers=self.headers
            ) as session:
                async with session.get(url) as response:
                    if response.status >= 400:
                        raise AdapterFailure(f"HTTP Error {response.status} fetching {url}")
                    return await response.read()

        except asyncio.TimeoutError as e:
            raise AdapterFailure(f"Timeout after {self.timeout} seconds fetching {url}") from e
        except aiohttp.ClientError as e:
            raise AdapterFailure(f"Network error fetching {url}: {e}") from e

    def parse_feed(self, document: Union[bytes, str], feed_url: str = "") -> List[RawArticle]:
        """
        Parse a feed document into raw articles.

        Items without a link or a non-empty title are skipped.
        """
        feed = feedparser.parse(document)

        if feed.bozo and not feed.entries:
            raise AdapterFailure(f"Failed to parse feed {feed_url}: {feed.get('bozo_exception')}")

        articles = []
        for entry in feed.entries:
            article = self._parse_entry(entry)
            if article is not None:
                articles.append(article)

        logger.debug(f"Parsed {len(articles)} of {len(feed.entries)} entries from {feed_url}")
        return articles

    def _parse_entry(self, entry) -> Optional[RawArticle]:
        link = entry.get("link")
        title = (entry.get("title") or "").strip()
        if not link or not title:
            return None

        return RawArticle(
            title=title,
            source_url=link,
            summary=self._to_plain_text(entry.get("summary")),
            content=self._extract_content(entry),
            author=(entry.get("author") or "").strip() or None,
            published_at=self._parse_published_date(entry),
            image_url=self._extract_image(entry),
            tags=self._extract_tags(entry)
        )

    def _extract_content(self, entry) -> Optional[str]:
        """Prefer content:encoded, fall back to the item description."""
        content = None
        for item in entry.get("content") or []:
            value = (item.get("value") or "").strip()
            if value:
                content = value
                break

        if content is None:
            content = (entry.get("summary") or "").strip() or None

        if content and len(content) > self.max_content_length:
            content = content[:self.max_content_length]
        return content

    def _extract_image(self, entry) -> Optional[str]:
        """Checks media:content, media:thumbnail and enclosure in that order."""
        for media in entry.get("media_content") or []:
            if media.get("url"):
                return media["url"]

        for thumbnail in entry.get("media_thumbnail") or []:
            if thumbnail.get("url"):
                return thumbnail["url"]

        for enclosure in entry.get("enclosures") or []:
            if enclosure.get("href"):
                return enclosure["href"]

        return None

    def _extract_tags(self, entry) -> Optional[List[str]]:
        tags = []
        for tag in entry.get("tags") or []:
            term = str(tag.get("term") or "").strip()
            if term:
                tags.append(term)
        return tags or None

    def _parse_published_date(self, entry) -> Optional[datetime]:
        """Invalid or missing dates yield None rather than failing the item."""
        published = entry.get("published") or entry.get("updated")
        if not published:
            return None

        try:
            dt = parse_date(published, tzinfos=TZINFOS)
        except (ValueError, OverflowError):
            return None

        if dt.tzinfo is None:
            dt = dt.replace(tzinfo=timezone.utc)
        return dt

    def _to_plain_text(self, html: Optional[str]) -> Optional[str]:
        if not html:
            return None
        text = BeautifulSoup(html, "html.parser").get_text(separator=" ", strip=True)
        return text or None


class ApiAdapter:
    """Placeholder for sources that need a direct API integration."""

    async def fetch(self, source: SourceModel) -> List[RawArticle]:
        raise ConfigurationError(
            f"API adapter not configured for source {source.name} ({source.slug}). "
            f"Please add the required API credentials and endpoint mapping in the source config."
        )


class ScrapeAdapter:
    """Placeholder for sources that need per-site scraping rules."""

    async def fetch(self, source: SourceModel) -> List[RawArticle]:
        raise ConfigurationError(
            f"Scrape adapter not implemented. Source {source.name} ({source.slug}) "
            f"requires manual configuration."
        )


def default_adapters() -> Dict[SourceTypeEnum, Adapter]:
    """Adapter registry keyed by source type."""
    return {
        SourceTypeEnum.RSS: FeedAdapter(),
        SourceTypeEnum.API: ApiAdapter(),
        SourceTypeEnum.SCRAPE: ScrapeAdapter(),
    }
