"""FastAPI application: admin fetch triggers, notifications and live fetch updates."""
import asyncio
import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI, WebSocket, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from api.routes import admin_router, notifications_router
from api.websocket import redis_subscriber, websocket_endpoint
from database.connection import DatabaseConnection
from database.repositories.category_repo import CategoryRepository
from shared.config import settings
from shared.constants import DEFAULT_CATEGORIES
from shared.exceptions import IngestError

logger = logging.getLogger(__name__)

SERVICE_NAME = "News Ingestion Service"
SERVICE_VERSION = "1.0.0"


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Open connections, seed the category catalogue and relay fetch updates."""
    db = await DatabaseConnection.init_mongo()
    redis_client = await DatabaseConnection.init_redis()

    await CategoryRepository(db).ensure_categories(DEFAULT_CATEGORIES)

    app.state.subscriber = asyncio.create_task(redis_subscriber(redis_client))

    yield

    app.state.subscriber.cancel()
    try:
        await app.state.subscriber
    except asyncio.CancelledError:
        pass

    await DatabaseConnection.close_connections()


app = FastAPI(
    title=SERVICE_NAME,
    description="Feed ingestion, breaking-news scoring and alert notifications",
    version=SERVICE_VERSION,
    lifespan=lifespan
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(admin_router)
app.include_router(notifications_router)


@app.exception_handler(IngestError)
async def ingest_error_handler(request: Request, exc: IngestError):
    """Translate domain errors into their status codes."""
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.message, "code": exc.code}
    )


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    logger.exception(f"Unhandled error on {request.url.path}")
    return JSONResponse(
        status_code=500,
        content={"error": "Internal server error", "code": "INTERNAL_ERROR"}
    )


@app.websocket("/ws/fetch")
async def fetch_updates_all(websocket: WebSocket):
    """Fetch results for every source as they complete."""
    await websocket_endpoint(websocket)


@app.websocket("/ws/fetch/{source_id}")
async def fetch_updates_for_source(websocket: WebSocket, source_id: str):
    """Fetch results for a single source."""
    await websocket_endpoint(websocket, source_id)


@app.get("/health")
async def health_check():
    """Report reachability of MongoDB and Redis."""
    backends = await DatabaseConnection.check_health()
    healthy = all(backends.values())
    return JSONResponse(
        status_code=200 if healthy else 503,
        content={"status": "healthy" if healthy else "degraded", **backends}
    )


@app.get("/")
async def root():
    return {
        "name": SERVICE_NAME,
        "version": SERVICE_VERSION,
        "docs": "/docs",
        "health": "/health"
    }


if __name__ == "__main__":
    import uvicorn

    logging.basicConfig(
        level=logging.INFO,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )
    uvicorn.run(
        "api.main:app",
        host=settings.api_host,
        port=settings.api_port,
        reload=settings.api_debug
    )
