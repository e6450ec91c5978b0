"""WebSocket handler for live fetch updates."""
import asyncio
import json
import logging
from typing import Set, Dict
from fastapi import WebSocket, WebSocketDisconnect
import redis.asyncio as redis
from shared.config import settings

logger = logging.getLogger(__name__)


class ConnectionManager:
    """Manages WebSocket connections for fetch updates."""

    def __init__(self):
        # Map of source_id to set of WebSocket connections
        self.source_connections: Dict[str, Set[WebSocket]] = {}
        # Connections interested in every source
        self.all_connections: Set[WebSocket] = set()

    async def connect(self, websocket: WebSocket, source_id: str = None):
        """Accept a new WebSocket connection."""
        await websocket.accept()

        if source_id:
            self.source_connections.setdefault(source_id, set()).add(websocket)
        else:
            self.all_connections.add(websocket)

    def disconnect(self, websocket: WebSocket, source_id: str = None):
        """Remove a WebSocket connection."""
        self.all_connections.discard(websocket)

        if source_id and source_id in self.source_connections:
            self.source_connections[source_id].discard(websocket)
            if not self.source_connections[source_id]:
                del self.source_connections[source_id]

    async def dispatch(self, message: dict):
        """Send an update to global listeners and to listeners of its source."""
        source_id = message.get("source_id")
        targets = [(conn, None) for conn in self.all_connections]
        if source_id:
            targets += [(conn, source_id) for conn in self.source_connections.get(source_id, ())]

        for connection, scope in targets:
            try:
                await connection.send_json(message)
            except Exception as e:
                logger.debug(f"Dropping websocket after send failure: {e}")
                self.disconnect(connection, scope)


# Global connection manager
manager = ConnectionManager()


async def redis_subscriber(redis_client: redis.Redis):
    """Subscribe to the fetch channel and forward updates to WebSocket clients."""
    pubsub = redis_client.pubsub()

    try:
        await pubsub.subscribe(settings.redis_fetch_channel)
        async for message in pubsub.listen():
            if message["type"] != "message":
                continue
            try:
                data = json.loads(message["data"])
            except json.JSONDecodeError:
                logger.warning(f"Ignoring malformed fetch update: {message['data']!r}")
                continue
            await manager.dispatch(data)
    except asyncio.CancelledError:
        pass
    except redis.RedisError as e:
        logger.error(f"Fetch update relay stopped: {e}")
    finally:
        await pubsub.aclose()


async def websocket_endpoint(websocket: WebSocket, source_id: str = None):
    """Stream fetch updates, optionally for one source, with periodic heartbeats."""
    await manager.connect(websocket, source_id)
    await websocket.send_json({"type": "subscribed", "source_id": source_id})

    try:
        while True:
            try:
                data = await asyncio.wait_for(
                    websocket.receive_text(),
                    timeout=settings.ws_heartbeat_interval
                )
            except asyncio.TimeoutError:
                await websocket.send_json({"type": "heartbeat"})
                continue

            if data == "ping":
                await websocket.send_text("pong")
    except WebSocketDisconnect:
        logger.debug(f"Fetch update listener left (source={source_id or '*'})")
    finally:
        manager.disconnect(websocket, source_id)
