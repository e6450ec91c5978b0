"""Article ingestion: dedup, classify, score and persist one raw article."""
import logging
from typing import Optional
from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo.errors import PyMongoError

from api.models.article import RawArticle
from api.models.source import SourceModel
from database.repositories.article_repo import ArticleRepository
from database.repositories.category_repo import CategoryRepository
from ingestion.scoring import calculate_breaking_score
from shared.constants import CATEGORY_KEYWORDS, MIN_CATEGORY_KEYWORD_HITS
from shared.exceptions import ArticleProcessingError
from shared.utils import dedup_hash

logger = logging.getLogger(__name__)


def classify_text(title: str, summary: Optional[str]) -> Optional[str]:
    """
    Pick the category slug whose keywords hit the text most often.

    Needs at least two hits. Ties go to the category listed first.
    """
    text = f"{title} {summary or ''}".lower()
    best_slug = None
    best_count = 0

    for slug, keywords in CATEGORY_KEYWORDS.items():
        count = sum(1 for keyword in keywords if keyword in text)
        if count > best_count:
            best_slug, best_count = slug, count

    if best_count >= MIN_CATEGORY_KEYWORD_HITS:
        return best_slug
    return None


class ArticleIngester:
    """Turns raw articles into stored Article records."""

    def __init__(self, db: AsyncIOMotorDatabase):
        self.article_repo = ArticleRepository(db)
        self.category_repo = CategoryRepository(db)

    async def process(self, raw: RawArticle, source: SourceModel) -> bool:
        """
        Store a raw article unless its URL was already ingested.

        Returns True when a new article was stored. Storage failures are
        raised as ArticleProcessingError.
        """
        article_hash = dedup_hash(raw.source_url)

        try:
            if await self.article_repo.get_article_by_dedup_hash(article_hash):
                return False

            category_id = await self.classify(raw, source)
            breaking_score = calculate_breaking_score(raw, source)

            article = await self.article_repo.create_article({
                "title": raw.title,
                "summary": raw.summary,
                "content": raw.content,
                "author": raw.author,
                "published_at": raw.published_at,
                "source_url": raw.source_url,
                "image_url": raw.image_url,
                "language": source.language,
                "country": source.region,
                "tags": raw.tags or [],
                "breaking_score": breaking_score,
                "dedup_hash": article_hash,
                "source_id": source.id,
                "category_id": category_id
            })
        except PyMongoError as e:
            raise ArticleProcessingError(raw.title, str(e)) from e

        # None means a concurrent writer stored the same hash first
        return article is not None

    async def classify(self, raw: RawArticle, source: SourceModel) -> Optional[str]:
        """Resolve a category id from the source hint or the article text."""
        if source.category_hint:
            category = await self.category_repo.get_category_by_slug(source.category_hint)
            if category:
                return category.id

        slug = classify_text(raw.title, raw.summary)
        if slug is None:
            return None

        category = await self.category_repo.get_category_by_slug(slug)
        if category is None:
            logger.warning(f"Category {slug} matched but is missing from the catalogue")
            return None
        return category.id
