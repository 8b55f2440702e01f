"""
Item management routes
"""

from fastapi import APIRouter

from plm_gateway.models.item import ItemCreate, ItemUpdate
from plm_gateway.utils.dependencies import ItemServiceDep

router = APIRouter()


@router.get("/uid/{uid}")
async def get_item_by_uid(uid: str, item_service: ItemServiceDep):
    item = await item_service.get_item_by_uid(uid)
    return {"success": True, "data": item.model_dump(mode="json")}


@router.get("/{item_id}/revisions")
async def get_item_revisions(item_id: str, item_service: ItemServiceDep):
    revisions = await item_service.get_item_revisions(item_id)
    return {
        "success": True,
        "data": [revision.model_dump(mode="json") for revision in revisions],
        "count": len(revisions),
    }


@router.get("/{item_id}")
async def get_item(item_id: str, item_service: ItemServiceDep):
    """Get an Item by its business id"""
    item = await item_service.get_item(item_id)
    return {"success": True, "data": item.model_dump(mode="json")}


@router.post("", status_code=201)
async def create_item(item_data: ItemCreate, item_service: ItemServiceDep):
    """Create a new Item"""
    item = await item_service.create_item(item_data)
    return {
        "success": True,
        "message": "Item created successfully",
        "data": item.model_dump(mode="json"),
    }


@router.put("/{item_id}")
async def update_item(item_id: str, updates: ItemUpdate, item_service: ItemServiceDep):
    item = await item_service.update_item(item_id, updates)
    return {
        "success": True,
        "message": "Item updated successfully",
        "data": item.model_dump(mode="json"),
    }


@router.delete("/{item_id}")
async def delete_item(item_id: str, item_service: ItemServiceDep):
    await item_service.delete_item(item_id)
    return {"success": True, "message": "Item deleted successfully"}
