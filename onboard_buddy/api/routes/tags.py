"""Tag catalog API endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Query, Response
from pydantic import BaseModel, Field

from onboard_buddy.api.dependencies import get_workspace
from onboard_buddy.tags import Tag
from onboard_buddy.workspace import Workspace

router = APIRouter(prefix="/api/tags", tags=["tags"])


class CreateTagRequest(BaseModel):
    name: str = Field(..., min_length=1)
    color: str = "#6B7280"
    category: str | None = None
    description: str | None = None


class UpdateTagRequest(BaseModel):
    name: str | None = None
    color: str | None = None
    category: str | None = None
    description: str | None = None


def _require_tag(workspace: Workspace, tag_id: str) -> Tag:
    tag = workspace.tags.get_tag(tag_id)
    if tag is None:
        raise HTTPException(status_code=404, detail="Tag not found")
    return tag


@router.get("", response_model=list[Tag])
async def list_tags(
    q: str | None = Query(None, description="Search name, description and category"),
    category: str | None = Query(None),
    workspace: Workspace = Depends(get_workspace),
) -> list[Tag]:
    if q:
        tags = workspace.tags.search(q)
    else:
        tags = workspace.tags.tags
    if category:
        tags = [t for t in tags if t.category == category]
    return tags


@router.get("/popular", response_model=list[Tag])
async def most_used_tags(
    limit: int = Query(5, ge=1, le=50),
    workspace: Workspace = Depends(get_workspace),
) -> list[Tag]:
    return workspace.tags.most_used(limit)


@router.post("", response_model=Tag, status_code=201)
async def create_tag(request: CreateTagRequest, workspace: Workspace = Depends(get_workspace)) -> Tag:
    """Create a catalog tag; 409 if one with the same name (any case) exists."""
    if workspace.tags.find_by_name(request.name) is not None:
        raise HTTPException(status_code=409, detail="Tag already exists")
    tag_id = workspace.tags.add_tag(**request.model_dump())
    return _require_tag(workspace, tag_id)


@router.patch("/{tag_id}", response_model=Tag)
async def update_tag(
    tag_id: str,
    request: UpdateTagRequest,
    workspace: Workspace = Depends(get_workspace),
) -> Tag:
    """
    Patch a catalog tag.

    A new name is applied through the workspace so gallery items and mission
    requirements carrying the old name (in any case) follow it.
    """
    existing = _require_tag(workspace, tag_id)
    changes = request.model_dump(exclude_unset=True)
    new_name = (changes.pop("name", None) or "").strip()
    if request.name is not None and not new_name:
        raise HTTPException(status_code=422, detail="Tag name cannot be empty")

    if new_name and new_name != existing.name:
        clash = workspace.tags.find_by_name(new_name)
        if clash is not None and clash.id != existing.id:
            raise HTTPException(status_code=409, detail="Tag already exists")
        workspace.rename_tag(existing.name, new_name, ignore_case=True)

    if changes:
        workspace.tags.update_tag(tag_id, **changes)
    return _require_tag(workspace, tag_id)


@router.post("/{tag_id}/usage", response_model=Tag)
async def record_usage(
    tag_id: str,
    delta: int = Query(1, description="+1 to increment, -1 to decrement"),
    workspace: Workspace = Depends(get_workspace),
) -> Tag:
    _require_tag(workspace, tag_id)
    if delta < 0:
        workspace.tags.decrement_usage(tag_id)
    else:
        workspace.tags.increment_usage(tag_id)
    return _require_tag(workspace, tag_id)


@router.delete("/{tag_id}", status_code=204)
async def delete_tag(tag_id: str, workspace: Workspace = Depends(get_workspace)) -> Response:
    """Delete a catalog tag and strip it (in any case) from gallery items."""
    tag = _require_tag(workspace, tag_id)
    workspace.delete_tag(tag.name, ignore_case=True)
    return Response(status_code=204)
