"""
Gallery API endpoints: items, the tag vocabulary and image upload.

Tag rename/delete go through the workspace so mission requirements follow.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Query, Request, Response
from pydantic import BaseModel, Field

from onboard_buddy.api.dependencies import get_workspace
from onboard_buddy.gallery import GalleryItem, GalleryItemCreate, GalleryItemUpdate
from onboard_buddy.observability.logging import get_logger
from onboard_buddy.workspace import Workspace

router = APIRouter(prefix="/api/gallery", tags=["gallery"])
logger = get_logger(__name__)


# ============================================================================
# Request/Response Models
# ============================================================================


class ReorderRequest(BaseModel):
    item_ids: list[str]


class TagRequest(BaseModel):
    tag: str = Field(..., min_length=1)


class RenameTagRequest(BaseModel):
    new_name: str = Field(..., min_length=1)


class TagVocabularyResponse(BaseModel):
    tags: list[str]
    counts: dict[str, int]


class RenameTagResponse(BaseModel):
    renamed_missions: list[str]


class DeleteTagResponse(BaseModel):
    orphaned_missions: list[str]


class UploadResponse(BaseModel):
    url: str
    path: str


# ============================================================================
# Items
# ============================================================================


@router.get("", response_model=list[GalleryItem])
async def list_items(
    tag: str | None = Query(None, description="Only items carrying this tag"),
    workspace: Workspace = Depends(get_workspace),
) -> list[GalleryItem]:
    items = workspace.gallery.items
    if tag:
        items = [i for i in items if tag in i.tags]
    return items


@router.post("", response_model=GalleryItem, status_code=201)
async def create_item(draft: GalleryItemCreate, workspace: Workspace = Depends(get_workspace)) -> GalleryItem:
    return workspace.gallery.add_item(draft)


@router.post("/reorder", status_code=204)
async def reorder_items(request: ReorderRequest, workspace: Workspace = Depends(get_workspace)) -> Response:
    workspace.gallery.reorder_items(request.item_ids)
    return Response(status_code=204)


@router.post("/images", response_model=UploadResponse, status_code=201)
async def upload_image(
    request: Request,
    filename: str = Query(..., min_length=1),
    folder: str = Query("gallery"),
    owner_id: str | None = Query(None),
    workspace: Workspace = Depends(get_workspace),
) -> UploadResponse:
    """
    Upload raw image bytes (request body) to object storage.

    The Content-Type header must be the image type; HEIC must be converted
    to JPEG first.
    """
    if workspace.storage is None:
        raise HTTPException(status_code=503, detail="Image storage is not configured")

    data = await request.body()
    content_type = request.headers.get("content-type", "")
    result = workspace.storage.upload(data, filename, content_type, folder=folder, owner_id=owner_id)
    if not result.ok:
        raise HTTPException(status_code=400, detail=result.error)
    return UploadResponse(url=result.url or "", path=result.path or "")


# ============================================================================
# Tag vocabulary
# ============================================================================


@router.get("/tags", response_model=TagVocabularyResponse)
async def list_tags(workspace: Workspace = Depends(get_workspace)) -> TagVocabularyResponse:
    return TagVocabularyResponse(tags=workspace.gallery.tags, counts=workspace.gallery.tag_counts())


@router.post("/tags", status_code=204)
async def add_tag(request: TagRequest, workspace: Workspace = Depends(get_workspace)) -> Response:
    workspace.gallery.add_tag(request.tag)
    return Response(status_code=204)


@router.put("/tags/{tag}", response_model=RenameTagResponse)
async def rename_tag(
    tag: str,
    request: RenameTagRequest,
    workspace: Workspace = Depends(get_workspace),
) -> RenameTagResponse:
    return RenameTagResponse(renamed_missions=workspace.rename_tag(tag, request.new_name))


@router.delete("/tags/{tag}", response_model=DeleteTagResponse)
async def delete_tag(tag: str, workspace: Workspace = Depends(get_workspace)) -> DeleteTagResponse:
    return DeleteTagResponse(orphaned_missions=workspace.delete_tag(tag))


# ============================================================================
# Single item (after /tags and /images so those paths win)
# ============================================================================


@router.get("/{item_id}", response_model=GalleryItem)
async def get_item(item_id: str, workspace: Workspace = Depends(get_workspace)) -> GalleryItem:
    item = workspace.gallery.get_item(item_id)
    if item is None:
        raise HTTPException(status_code=404, detail="Gallery item not found")
    return item


@router.patch("/{item_id}", response_model=GalleryItem)
async def update_item(
    item_id: str,
    patch: GalleryItemUpdate,
    workspace: Workspace = Depends(get_workspace),
) -> GalleryItem:
    item = workspace.gallery.update_item(item_id, patch)
    if item is None:
        raise HTTPException(status_code=404, detail="Gallery item not found")
    return item


@router.delete("/{item_id}", status_code=204)
async def delete_item(item_id: str, workspace: Workspace = Depends(get_workspace)) -> Response:
    if not workspace.gallery.delete_item(item_id):
        raise HTTPException(status_code=404, detail="Gallery item not found")
    return Response(status_code=204)
