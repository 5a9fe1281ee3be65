from typing import List, Optional

from fastapi import APIRouter, Depends, File, Form, HTTPException, Request, UploadFile, status
from fastapi.responses import Response

from schemas.inventory import (
    InventoryItemOut,
    InventoryItemUpdate,
    ItemDeleted,
    PhotoUpdated,
    SearchResult,
)
from services.inventory_service import InventoryService
from storage import StagedUpload, stage_upload

router = APIRouter()

TRUTHY_FORM_VALUES = {"true", "on", "1", "yes"}


def get_inventory_service(request: Request) -> InventoryService:
    return request.app.state.store.service


def _stage(photo: Optional[UploadFile]) -> Optional[StagedUpload]:
    # Browsers submit an empty file part when no file was chosen
    if photo is None or not photo.filename:
        return None
    return stage_upload(photo.file, filename=photo.filename, content_type=photo.content_type)


@router.post("/register", response_model=InventoryItemOut, status_code=status.HTTP_201_CREATED)
async def register_item(
    inventory_name: Optional[str] = Form(None),
    description: Optional[str] = Form(None),
    item_description: Optional[str] = Form(None),
    photo: Optional[UploadFile] = File(None),
    service: InventoryService = Depends(get_inventory_service),
):
    """
    Register a new inventory item. ``inventory_name`` is required; the photo
    is optional and is stored before the row is written.
    """
    upload = _stage(photo)
    if description is None:
        description = item_description
    return await service.register(inventory_name, description, upload=upload)


@router.get("/inventory", response_model=List[InventoryItemOut])
async def list_items(service: InventoryService = Depends(get_inventory_service)):
    return await service.list_items()


@router.get("/inventory/{item_id}", response_model=InventoryItemOut)
async def get_item(item_id: int, service: InventoryService = Depends(get_inventory_service)):
    return await service.get_item(item_id)


@router.put("/inventory/{item_id}", response_model=InventoryItemOut)
async def update_item(
    item_id: int,
    payload: Optional[InventoryItemUpdate] = None,
    service: InventoryService = Depends(get_inventory_service),
):
    # The body is optional; no body means no fields to change
    payload = payload or InventoryItemUpdate()
    return await service.update_item(item_id, name=payload.name, description=payload.description)


@router.get("/inventory/{item_id}/photo", response_class=Response)
async def get_photo(item_id: int, service: InventoryService = Depends(get_inventory_service)):
    photo = await service.get_photo(item_id)
    return Response(content=photo.data, media_type=photo.media_type)


@router.put("/inventory/{item_id}/photo", response_model=PhotoUpdated)
async def replace_photo(
    item_id: int,
    photo: Optional[UploadFile] = File(None),
    service: InventoryService = Depends(get_inventory_service),
):
    upload = _stage(photo)
    if upload is None:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Photo file not provided")
    item = await service.replace_photo(item_id, upload)
    return {"message": "Photo updated", "photo": item.attachment_ref}


@router.delete("/inventory/{item_id}", response_model=ItemDeleted)
async def delete_item(item_id: int, service: InventoryService = Depends(get_inventory_service)):
    item = await service.delete_item(item_id)
    deleted = InventoryItemOut.model_validate(item)
    # The photo went with the item
    deleted.photo_url = None
    return {"message": "Item deleted", "item": deleted}


@router.post("/search", response_model=SearchResult)
async def search_item(
    id: Optional[str] = Form(None),
    has_photo: Optional[str] = Form(None),
    service: InventoryService = Depends(get_inventory_service),
):
    if id is None or not id.strip():
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="id is required")
    try:
        item_id = int(id)
    except ValueError:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="id must be an integer")
    wants_photo = (has_photo or "").strip().lower() in TRUTHY_FORM_VALUES
    return await service.search(item_id, has_photo=wants_photo)
