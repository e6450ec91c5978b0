"""Periodic worker that triggers fetch cycles and housekeeping."""
import asyncio
import logging
from datetime import timedelta
from typing import List, Optional
from motor.motor_asyncio import AsyncIOMotorDatabase

from api.models.fetch_log import FetchResult
from ingestion.maintenance import prune_history
from ingestion.orchestrator import FetchOrchestrator
from shared.config import settings
from shared.utils import get_utc_now

logger = logging.getLogger(__name__)


class FetchWorker:
    """Runs a fetch cycle every interval and prunes history once per cleanup period."""

    def __init__(
        self,
        db: AsyncIOMotorDatabase,
        orchestrator: FetchOrchestrator,
        worker_id: str = "worker-1",
        interval: Optional[float] = None
    ):
        self.db = db
        self.orchestrator = orchestrator
        self.worker_id = worker_id
        self.interval = interval if interval is not None else settings.fetch_interval_seconds
        self.cleanup_every = timedelta(hours=settings.cleanup_interval_hours)
        self.last_cleanup = None
        self._stop_event = asyncio.Event()

    async def start(self):
        """Start the worker loop."""
        logger.info(f"Worker {self.worker_id} starting, fetching every {self.interval}s")

        while not self._stop_event.is_set():
            await self.run_cycle()
            await self._maybe_cleanup()

            try:
                await asyncio.wait_for(self._stop_event.wait(), timeout=self.interval)
            except asyncio.TimeoutError:
                pass

    async def stop(self):
        """Stop the worker gracefully."""
        logger.info(f"Worker {self.worker_id} stopping...")
        self._stop_event.set()

    async def run_cycle(self) -> List[FetchResult]:
        """Run one fetch cycle and log its totals."""
        cycle_id = f"fetch-{int(get_utc_now().timestamp())}"
        logger.info(f"[{cycle_id}] Starting scheduled fetch...")

        try:
            results = await self.orchestrator.fetch_all()
        except Exception as e:
            logger.error(f"[{cycle_id}] Fetch failed: {e}")
            return []

        total_found = sum(r.articles_found for r in results)
        total_new = sum(r.articles_new for r in results)
        failures = sum(1 for r in results if r.status == "failed")

        logger.info(
            f"[{cycle_id}] Fetch complete: {len(results)} sources, "
            f"{total_found} found, {total_new} new, {failures} failures"
        )
        return results

    async def _maybe_cleanup(self):
        now = get_utc_now()
        if self.last_cleanup is not None and now - self.last_cleanup < self.cleanup_every:
            return

        try:
            await prune_history(self.db, now=now)
        except Exception as e:
            logger.error(f"Cleanup failed: {e}")
        self.last_cleanup = now
