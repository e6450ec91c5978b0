"""Shared FastAPI dependencies for route handlers."""
from fastapi import Depends, Header
from motor.motor_asyncio import AsyncIOMotorDatabase
import redis.asyncio as redis

from database.connection import get_db, get_redis
from ingestion.orchestrator import FetchOrchestrator


async def get_orchestrator(
    db: AsyncIOMotorDatabase = Depends(get_db),
    redis_client: redis.Redis = Depends(get_redis)
) -> FetchOrchestrator:
    """Build a fetch orchestrator bound to the shared connections."""
    return FetchOrchestrator(db, redis_client)


async def get_user_id(x_user_id: str = Header(..., description="Authenticated user id")) -> str:
    """User identity as forwarded by the authenticating gateway."""
    return x_user_id


def clamp_pagination(page: int, limit: int, max_limit: int = 100) -> tuple[int, int]:
    """Clamp page to >= 1 and limit to 1..max_limit."""
    return max(page, 1), min(max(limit, 1), max_limit)
