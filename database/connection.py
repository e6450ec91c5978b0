"""MongoDB and Redis connection management."""
import logging
from typing import Dict, Optional
from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorDatabase
from pymongo.errors import PyMongoError
import redis.asyncio as redis
from shared.config import settings

logger = logging.getLogger(__name__)

# (collection, keys, unique)
INDEXES = (
    ("sources", "slug", True),
    ("sources", "enabled", False),
    # Concurrent ingestion of the same URL is only safe because of this index
    ("articles", "dedup_hash", True),
    ("articles", "created_at", False),
    ("categories", "slug", True),
    ("fetch_logs", "source_id", False),
    ("fetch_logs", "started_at", False),
    ("alert_rules", "enabled", False),
    ("notifications", [("article_id", 1), ("alert_rule_id", 1), ("user_id", 1)], True),
    ("notifications", [("user_id", 1), ("created_at", -1)], False),
)


class DatabaseConnection:
    """Shared MongoDB database handle and Redis client."""

    _mongo_client: Optional[AsyncIOMotorClient] = None
    _redis_client: Optional[redis.Redis] = None
    _db: Optional[AsyncIOMotorDatabase] = None

    @classmethod
    async def init_mongo(cls) -> AsyncIOMotorDatabase:
        """Connect to MongoDB and make sure every index exists."""
        if cls._mongo_client is None:
            # tz_aware so stored timestamps come back as UTC datetimes
            cls._mongo_client = AsyncIOMotorClient(settings.mongo_url, tz_aware=True)
            cls._db = cls._mongo_client[settings.mongo_db_name]
            await cls.ensure_indexes(cls._db)
        return cls._db

    @staticmethod
    async def ensure_indexes(db: AsyncIOMotorDatabase):
        for collection, keys, unique in INDEXES:
            await db[collection].create_index(keys, unique=unique)
        logger.info(f"Ensured {len(INDEXES)} indexes on {db.name}")

    @classmethod
    async def get_mongo_db(cls) -> AsyncIOMotorDatabase:
        if cls._db is None:
            await cls.init_mongo()
        return cls._db

    @classmethod
    async def init_redis(cls) -> redis.Redis:
        """Create the Redis client used for fetch update pub/sub."""
        if cls._redis_client is None:
            cls._redis_client = redis.from_url(settings.redis_url, decode_responses=True)
        return cls._redis_client

    @classmethod
    async def get_redis(cls) -> redis.Redis:
        if cls._redis_client is None:
            await cls.init_redis()
        return cls._redis_client

    @classmethod
    async def check_health(cls) -> Dict[str, bool]:
        """Ping both backends. Never raises."""
        status = {"mongo": False, "redis": False}

        if cls._mongo_client is not None:
            try:
                await cls._mongo_client.admin.command("ping")
                status["mongo"] = True
            except PyMongoError as e:
                logger.warning(f"MongoDB ping failed: {e}")

        if cls._redis_client is not None:
            try:
                status["redis"] = bool(await cls._redis_client.ping())
            except redis.RedisError as e:
                logger.warning(f"Redis ping failed: {e}")

        return status

    @classmethod
    async def close_connections(cls):
        if cls._mongo_client:
            cls._mongo_client.close()
            cls._mongo_client = None
            cls._db = None
        if cls._redis_client:
            await cls._redis_client.aclose()
            cls._redis_client = None


async def get_db() -> AsyncIOMotorDatabase:
    """FastAPI dependency for the MongoDB database."""
    return await DatabaseConnection.get_mongo_db()


async def get_redis() -> redis.Redis:
    """FastAPI dependency for the Redis client."""
    return await DatabaseConnection.get_redis()
