"""Fetch orchestration: run adapters for every enabled source and record outcomes."""
import asyncio
import json
import logging
import time
from typing import Dict, List, Optional, Tuple
import redis.asyncio as redis
from motor.motor_asyncio import AsyncIOMotorDatabase

from api.models.article import RawArticle
from api.models.fetch_log import FetchResult, FetchStatusEnum
from api.models.source import SourceModel, SourceTypeEnum
from database.repositories.fetch_log_repo import FetchLogRepository
from database.repositories.source_repo import SourceRepository
from ingestion.adapters import Adapter, default_adapters
from ingestion.alerts import AlertMatcher
from ingestion.ingester import ArticleIngester
from shared.config import settings
from shared.exceptions import ArticleProcessingError, ConfigurationError, NotFoundError

logger = logging.getLogger(__name__)


def derive_status(error_count: int, articles_found: int) -> FetchStatusEnum:
    """SUCCESS without errors, PARTIAL while some items succeeded, FAILED otherwise."""
    if error_count == 0:
        return FetchStatusEnum.SUCCESS
    if error_count < articles_found:
        return FetchStatusEnum.PARTIAL
    return FetchStatusEnum.FAILED


def _error_message(exc: Exception) -> str:
    return str(exc) or exc.__class__.__name__


class FetchOrchestrator:
    """Drives adapters and ingestion across sources in bounded batches."""

    def __init__(
        self,
        db: AsyncIOMotorDatabase,
        redis_client: Optional[redis.Redis] = None,
        adapters: Optional[Dict[SourceTypeEnum, Adapter]] = None,
        batch_size: Optional[int] = None
    ):
        self.redis = redis_client
        self.source_repo = SourceRepository(db)
        self.fetch_log_repo = FetchLogRepository(db)
        self.ingester = ArticleIngester(db)
        self.alert_matcher = AlertMatcher(db)
        self.adapters = adapters if adapters is not None else default_adapters()
        self.batch_size = batch_size or settings.fetch_batch_size

    async def fetch_all(self) -> List[FetchResult]:
        """
        Fetch every enabled source, at most batch_size at a time.

        Batches run one after another. Alert rules are evaluated once after
        all sources finished; a failure there is logged and does not affect
        the returned results.
        """
        sources = await self.source_repo.find_enabled_sources()
        results = []

        for i in range(0, len(sources), self.batch_size):
            batch = sources[i:i + self.batch_size]
            outcomes = await asyncio.gather(
                *(self.fetch_source(source.id) for source in batch),
                return_exceptions=True
            )

            for source, outcome in zip(batch, outcomes):
                if isinstance(outcome, BaseException):
                    logger.error(f"Fetch of source {source.slug} aborted: {outcome!r}")
                    continue
                results.append(outcome)

        try:
            await self.alert_matcher.evaluate_new_articles()
        except Exception as e:
            logger.error(f"Failed to evaluate notifications: {e}")

        return results

    async def fetch_source(self, source_id: str) -> FetchResult:
        """
        Fetch a single source and record the outcome.

        Raises NotFoundError for an unknown id. Adapter and per-article
        failures never propagate; they end up in the result's errors.
        """
        start = time.monotonic()

        source = await self.source_repo.find_source_by_id(source_id)
        if source is None:
            raise NotFoundError(f"Source not found: {source_id}")

        fetch_log = await self.fetch_log_repo.create_fetch_log(source.id)

        articles_found = 0
        articles_new = 0

        try:
            adapter = self._get_adapter(source.type)
            raw_articles = await adapter.fetch(source)
        except Exception as e:
            logger.error(f"Adapter failed for source {source.slug}: {e}")
            errors = [_error_message(e)]
        else:
            articles_found = len(raw_articles)
            articles_new, errors = await self._ingest(raw_articles, source)

        status = derive_status(len(errors), articles_found)

        await self.fetch_log_repo.complete_fetch_log(
            fetch_log["_id"],
            status=status,
            articles_found=articles_found,
            articles_new=articles_new,
            errors=errors
        )

        if status == FetchStatusEnum.FAILED:
            await self.source_repo.mark_error(source.id)
        else:
            await self.source_repo.mark_fetched(source.id)

        result = FetchResult(
            source_id=source.id,
            source_name=source.name,
            status=status.value.lower(),
            articles_found=articles_found,
            articles_new=articles_new,
            errors=errors,
            duration_ms=int((time.monotonic() - start) * 1000)
        )

        logger.info(
            f"Fetched {source.slug}: {result.status}, "
            f"{articles_found} found, {articles_new} new, {len(errors)} errors"
        )

        await self._publish_update(result)
        return result

    def _get_adapter(self, source_type: SourceTypeEnum) -> Adapter:
        adapter = self.adapters.get(source_type)
        if adapter is None:
            raise ConfigurationError(f"No adapter registered for source type {source_type}")
        return adapter

    async def _ingest(
        self,
        raw_articles: List[RawArticle],
        source: SourceModel
    ) -> Tuple[int, List[str]]:
        """Process items one by one. Returns (new count, error messages)."""
        articles_new = 0
        errors = []

        for raw in raw_articles:
            try:
                if await self.ingester.process(raw, source):
                    articles_new += 1
            except ArticleProcessingError as e:
                logger.warning(f"Source {source.slug}: {e}")
                errors.append(str(e))
            except Exception as e:
                logger.warning(f"Source {source.slug}: unexpected error on {raw.source_url}: {e!r}")
                errors.append(f'Article "{raw.title}": {_error_message(e)}')

        return articles_new, errors

    async def _publish_update(self, result: FetchResult):
        """Publish the fetch result for WebSocket listeners."""
        if self.redis is None:
            return

        update = {"type": "fetch_update", **result.model_dump()}
        try:
            await self.redis.publish(settings.redis_fetch_channel, json.dumps(update))
        except redis.RedisError as e:
            logger.warning(f"Failed to publish fetch update for {result.source_id}: {e}")
