# Schemas module
from .requests import FetchRequest
from .responses import (
    FetchResponse,
    FetchLogResponse,
    FetchLogListResponse,
    NotificationResponse,
    NotificationListResponse,
    ErrorResponse
)

__all__ = [
    "FetchRequest",
    "FetchResponse",
    "FetchLogResponse",
    "FetchLogListResponse",
    "NotificationResponse",
    "NotificationListResponse",
    "ErrorResponse"
]
