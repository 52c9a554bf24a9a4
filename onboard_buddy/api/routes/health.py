"""Health check endpoint (liveness probe)."""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Any

from fastapi import APIRouter, Depends

from onboard_buddy.api.dependencies import get_workspace
from onboard_buddy.config import APP_VERSION, ENV
from onboard_buddy.workspace import Workspace

router = APIRouter(tags=["health"])


@router.get("/health")
async def health_check(workspace: Workspace = Depends(get_workspace)) -> dict[str, Any]:
    """Service status plus which optional collaborators are attached."""
    return {
        "status": "healthy",
        "service": "Onboard Buddy API",
        "version": APP_VERSION,
        "environment": ENV,
        "timestamp": datetime.now(UTC).isoformat(),
        "collaborators": {
            "database": workspace.database is not None,
            "image_storage": workspace.storage is not None,
            "auth": workspace.auth is not None,
        },
    }
