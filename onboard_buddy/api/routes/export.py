"""Export API endpoint."""

from __future__ import annotations

from enum import Enum

from fastapi import APIRouter, Depends, Query
from fastapi.responses import JSONResponse, PlainTextResponse, Response

from onboard_buddy.api.dependencies import get_workspace
from onboard_buddy.export import ExportOptions, mailto_link
from onboard_buddy.workspace import Workspace

router = APIRouter(prefix="/api/export", tags=["export"])


class ExportFormat(str, Enum):
    TEXT = "text"
    EMAIL = "email"


@router.get("")
async def export_journey(
    format: ExportFormat = Query(ExportFormat.TEXT),
    tasks: bool = Query(True),
    missions: bool = Query(True),
    notes: bool = Query(True),
    photos: bool = Query(True),
    workspace: Workspace = Depends(get_workspace),
) -> Response:
    """Plain-text journey summary, as a download or as a mailto link."""
    content = workspace.export_summary(
        ExportOptions(tasks=tasks, missions=missions, notes=notes, photos=photos)
    )
    if format == ExportFormat.EMAIL:
        return JSONResponse({"mailto": mailto_link(content)})
    return PlainTextResponse(
        content,
        headers={"Content-Disposition": 'attachment; filename="onboarding-journey.txt"'},
    )
