"""Task checklist API endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Response

from onboard_buddy.api.dependencies import get_workspace
from onboard_buddy.errors import InvalidDueDateError
from onboard_buddy.tasks import Task, TaskCreate, TaskUpdate
from onboard_buddy.utils.error_sanitizer import sanitize_error_message
from onboard_buddy.workspace import Workspace

router = APIRouter(prefix="/api/tasks", tags=["tasks"])


@router.get("", response_model=list[Task])
async def list_tasks(workspace: Workspace = Depends(get_workspace)) -> list[Task]:
    return workspace.tasks.tasks


@router.post("", response_model=Task, status_code=201)
async def create_task(draft: TaskCreate, workspace: Workspace = Depends(get_workspace)) -> Task:
    """Create a task; its due date is computed from the start date."""
    try:
        return workspace.tasks.add_task(draft)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=sanitize_error_message(str(e), 400)) from None


@router.get("/{task_id}", response_model=Task)
async def get_task(task_id: int, workspace: Workspace = Depends(get_workspace)) -> Task:
    task = workspace.tasks.get_task(task_id)
    if task is None:
        raise HTTPException(status_code=404, detail="Task not found")
    return task


@router.patch("/{task_id}", response_model=Task)
async def update_task(
    task_id: int,
    patch: TaskUpdate,
    workspace: Workspace = Depends(get_workspace),
) -> Task:
    try:
        task = workspace.tasks.update_task(task_id, patch)
    except InvalidDueDateError as e:
        raise HTTPException(status_code=400, detail=str(e)) from None
    if task is None:
        raise HTTPException(status_code=404, detail="Task not found")
    return task


@router.post("/{task_id}/toggle", response_model=Task)
async def toggle_task(task_id: int, workspace: Workspace = Depends(get_workspace)) -> Task:
    task = workspace.tasks.toggle_task_completion(task_id)
    if task is None:
        raise HTTPException(status_code=404, detail="Task not found")
    return task


@router.delete("/{task_id}", status_code=204)
async def delete_task(task_id: int, workspace: Workspace = Depends(get_workspace)) -> Response:
    if not workspace.tasks.delete_task(task_id):
        raise HTTPException(status_code=404, detail="Task not found")
    return Response(status_code=204)
