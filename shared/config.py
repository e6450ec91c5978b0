"""Shared configuration for all services."""
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # MongoDB Configuration
    mongo_url: str = "mongodb://localhost:27017"
    mongo_db_name: str = "news_ingest"

    # Redis Configuration
    redis_url: str = "redis://localhost:6379"
    redis_fetch_channel: str = "fetch_updates"

    # API Configuration
    api_host: str = "0.0.0.0"
    api_port: int = 8000
    api_debug: bool = False

    # Fetch Configuration
    fetch_batch_size: int = 5
    feed_timeout: int = 15
    feed_user_agent: str = "NewsIngest/1.0"
    feed_max_content_length: int = 1000

    # Alerting
    alert_window_minutes: int = 15

    # Worker Configuration
    fetch_interval_seconds: int = 600
    cleanup_interval_hours: int = 24
    history_retention_days: int = 30

    # WebSocket Configuration
    ws_heartbeat_interval: int = 30

    class Config:
        env_file = ".env"
        case_sensitive = False


settings = Settings()
