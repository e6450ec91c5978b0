"""Shared utility functions."""
import uuid
import hashlib
from datetime import datetime, timezone
from typing import Optional
from urllib.parse import urlsplit


def generate_article_id() -> str:
    """Generate a unique article ID."""
    return f"art_{uuid.uuid4().hex[:12]}"


def generate_fetch_log_id() -> str:
    """Generate a unique fetch log ID."""
    return f"log_{uuid.uuid4().hex[:12]}"


def generate_notification_id() -> str:
    """Generate a unique notification ID."""
    return f"ntf_{uuid.uuid4().hex[:12]}"


def get_utc_now() -> datetime:
    """Get current UTC datetime."""
    return datetime.now(timezone.utc)


def normalize_url(url: str) -> str:
    """
    Normalize URL for deduplication.

    Keeps scheme, host and path only, lowercased, without trailing slashes.
    Falls back to plain string splitting when the URL cannot be parsed.
    """
    try:
        parsed = urlsplit(url)
        if not parsed.scheme or not parsed.netloc:
            raise ValueError(f"Not an absolute URL: {url}")
        normalized = f"{parsed.scheme}://{parsed.netloc}{parsed.path}"
    except ValueError:
        normalized = url.split("?")[0].split("#")[0]
    return normalized.rstrip("/").lower()


def dedup_hash(url: str) -> str:
    """SHA-256 hex digest of the normalized URL."""
    return hashlib.sha256(normalize_url(url).encode()).hexdigest()


def ensure_utc(dt: Optional[datetime]) -> Optional[datetime]:
    """Attach UTC to naive datetimes coming back from storage."""
    if dt is None or dt.tzinfo is not None:
        return dt
    return dt.replace(tzinfo=timezone.utc)
