"""
Missions API endpoints.

Validation failures come back as 422 with every violated rule listed.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Response

from onboard_buddy.api.dependencies import get_workspace
from onboard_buddy.errors import MissionValidationError
from onboard_buddy.missions import Mission, MissionDraft, MissionUpdate
from onboard_buddy.observability.logging import get_logger
from onboard_buddy.workspace import Workspace

router = APIRouter(prefix="/api/missions", tags=["missions"])
logger = get_logger(__name__)


def _validation_failed(e: MissionValidationError) -> HTTPException:
    return HTTPException(status_code=422, detail={"message": str(e), "errors": e.errors})


@router.get("", response_model=list[Mission])
async def list_missions(workspace: Workspace = Depends(get_workspace)) -> list[Mission]:
    return workspace.missions.missions


@router.post("", response_model=Mission, status_code=201)
async def create_mission(draft: MissionDraft, workspace: Workspace = Depends(get_workspace)) -> Mission:
    try:
        return workspace.missions.add_mission(draft)
    except MissionValidationError as e:
        raise _validation_failed(e) from None


@router.get("/{mission_id}", response_model=Mission)
async def get_mission(mission_id: str, workspace: Workspace = Depends(get_workspace)) -> Mission:
    mission = workspace.missions.get_mission(mission_id)
    if mission is None:
        raise HTTPException(status_code=404, detail="Mission not found")
    return mission


@router.patch("/{mission_id}", response_model=Mission)
async def update_mission(
    mission_id: str,
    patch: MissionUpdate,
    workspace: Workspace = Depends(get_workspace),
) -> Mission:
    try:
        mission = workspace.missions.update_mission(mission_id, patch)
    except MissionValidationError as e:
        raise _validation_failed(e) from None
    if mission is None:
        raise HTTPException(status_code=404, detail="Mission not found")
    return mission


@router.delete("/{mission_id}", status_code=204)
async def delete_mission(mission_id: str, workspace: Workspace = Depends(get_workspace)) -> Response:
    if not workspace.missions.delete_mission(mission_id):
        raise HTTPException(status_code=404, detail="Mission not found")
    return Response(status_code=204)


@router.post("/{mission_id}/recompute", response_model=Mission)
async def recompute_mission(mission_id: str, workspace: Workspace = Depends(get_workspace)) -> Mission:
    """Recount one mission against the current gallery."""
    mission = workspace.missions.update_mission_progress(mission_id)
    if mission is None:
        raise HTTPException(status_code=404, detail="Mission not found")
    return mission
