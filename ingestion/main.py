"""Main worker entry point."""
import asyncio
import signal
import os
import logging

from database.connection import DatabaseConnection
from database.repositories.category_repo import CategoryRepository
from ingestion.orchestrator import FetchOrchestrator
from ingestion.worker import FetchWorker
from shared.constants import DEFAULT_CATEGORIES

logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)


async def main():
    """Main entry point for the fetch worker."""
    worker_id = os.getenv("WORKER_ID", f"worker-{os.getpid()}")

    logger.info(f"Starting fetch worker with ID: {worker_id}")

    # Initialize database connections
    db = await DatabaseConnection.init_mongo()
    redis_client = await DatabaseConnection.init_redis()

    created = await CategoryRepository(db).ensure_categories(DEFAULT_CATEGORIES)
    if created:
        logger.info(f"Seeded {created} categories")

    orchestrator = FetchOrchestrator(db, redis_client)
    worker = FetchWorker(db, orchestrator, worker_id)

    # Setup signal handlers for graceful shutdown
    loop = asyncio.get_running_loop()

    def signal_handler():
        logger.info("Received shutdown signal")
        asyncio.create_task(worker.stop())

    for sig in (signal.SIGTERM, signal.SIGINT):
        loop.add_signal_handler(sig, signal_handler)

    try:
        await worker.start()
    except Exception as e:
        logger.error(f"Worker error: {e}")
    finally:
        await DatabaseConnection.close_connections()
        logger.info("Worker shutdown complete")


if __name__ == "__main__":
    asyncio.run(main())
