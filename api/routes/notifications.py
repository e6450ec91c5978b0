"""Notification routes for the current user."""
from fastapi import APIRouter, Depends, HTTPException, status
from motor.motor_asyncio import AsyncIOMotorDatabase

from api.models.alert import NotificationModel
from api.routes.dependencies import clamp_pagination, get_user_id
from api.schemas.responses import NotificationListResponse, NotificationResponse
from database.connection import get_db
from database.repositories.notification_repo import NotificationRepository


router = APIRouter(prefix="/notifications", tags=["notifications"])


def _to_response(notification: dict) -> NotificationResponse:
    return NotificationResponse(**NotificationModel(**notification).model_dump())


@router.get("", response_model=NotificationListResponse)
async def list_notifications(
    page: int = 1,
    limit: int = 20,
    user_id: str = Depends(get_user_id),
    db: AsyncIOMotorDatabase = Depends(get_db)
):
    """List the current user's notifications, newest first."""
    notification_repo = NotificationRepository(db)
    page, limit = clamp_pagination(page, limit)

    notifications, total = await notification_repo.list_user_notifications(
        user_id, page=page, limit=limit
    )

    return NotificationListResponse(
        data=[_to_response(n) for n in notifications],
        total=total,
        page=page,
        limit=limit,
        total_pages=NotificationListResponse.pages(total, limit)
    )


@router.post("/{notification_id}/read", response_model=NotificationResponse)
async def mark_notification_read(
    notification_id: str,
    user_id: str = Depends(get_user_id),
    db: AsyncIOMotorDatabase = Depends(get_db)
):
    """Mark one of the current user's notifications as read."""
    notification_repo = NotificationRepository(db)

    notification = await notification_repo.get_notification(notification_id)

    if not notification:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Notification {notification_id} not found"
        )

    if notification["user_id"] != user_id:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Not authorized to update this notification"
        )

    updated = await notification_repo.mark_notification_read(notification_id)
    return _to_response(updated)
