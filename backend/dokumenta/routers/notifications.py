"""End user notification feed router."""
from typing import List

from fastapi import APIRouter, Depends, Query

from dokumenta.dependencies import get_notification_service
from dokumenta.routers.auth import require_user
from dokumenta.schemas.notification import NotificationRead, UnreadCount
from dokumenta.services.authorization import Principal
from dokumenta.services.notifications import NotificationService

router = APIRouter(prefix="/notifications", tags=["notifications"])


@router.get("", response_model=List[NotificationRead])
async def list_notifications(
    unread: bool | None = Query(None),
    limit: int = Query(50, ge=1, le=200),
    principal: Principal = Depends(require_user),
    notifications: NotificationService = Depends(get_notification_service),
):
    """Notifications for the current user, newest first."""
    return notifications.list_for_user(principal.id, unread=unread, limit=limit)


@router.get("/unread-count", response_model=UnreadCount)
async def unread_count(
    principal: Principal = Depends(require_user),
    notifications: NotificationService = Depends(get_notification_service),
):
    return UnreadCount(unread=notifications.unread_count(principal.id))


@router.put("/read-all")
async def mark_all_read(
    principal: Principal = Depends(require_user),
    notifications: NotificationService = Depends(get_notification_service),
):
    """Acknowledge every notification of the current user."""
    updated = notifications.mark_all_read(principal.id)
    return {"success": True, "updated": updated}


@router.put("/{notification_id}/read", response_model=NotificationRead)
async def mark_read(
    notification_id: int,
    principal: Principal = Depends(require_user),
    notifications: NotificationService = Depends(get_notification_service),
):
    """Acknowledge one notification."""
    return notifications.mark_read(principal.id, notification_id)
