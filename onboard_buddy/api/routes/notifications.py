"""Notification center API endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Response
from pydantic import BaseModel

from onboard_buddy.api.dependencies import get_workspace
from onboard_buddy.notifications import Notification
from onboard_buddy.workspace import Workspace

router = APIRouter(prefix="/api/notifications", tags=["notifications"])


class NotificationListResponse(BaseModel):
    notifications: list[Notification]
    unread_count: int


class SweepResponse(BaseModel):
    created: int


def _listing(workspace: Workspace) -> NotificationListResponse:
    center = workspace.notifications
    return NotificationListResponse(notifications=center.notifications, unread_count=center.unread_count)


@router.get("", response_model=NotificationListResponse)
async def list_notifications(workspace: Workspace = Depends(get_workspace)) -> NotificationListResponse:
    """Newest first, with the unread count."""
    return _listing(workspace)


@router.post("/read-all", response_model=NotificationListResponse)
async def mark_all_read(workspace: Workspace = Depends(get_workspace)) -> NotificationListResponse:
    workspace.notifications.mark_all_as_read()
    return _listing(workspace)


@router.post("/check-due-dates", response_model=SweepResponse)
async def check_due_dates(workspace: Workspace = Depends(get_workspace)) -> SweepResponse:
    return SweepResponse(created=workspace.check_due_dates())


@router.post("/{notification_id}/read", response_model=NotificationListResponse)
async def mark_read(notification_id: str, workspace: Workspace = Depends(get_workspace)) -> NotificationListResponse:
    workspace.notifications.mark_as_read(notification_id)
    return _listing(workspace)


@router.delete("/{notification_id}", status_code=204)
async def remove_notification(notification_id: str, workspace: Workspace = Depends(get_workspace)) -> Response:
    workspace.notifications.remove_notification(notification_id)
    return Response(status_code=204)


@router.delete("", status_code=204)
async def clear_notifications(workspace: Workspace = Depends(get_workspace)) -> Response:
    workspace.notifications.clear_all()
    return Response(status_code=204)
