"""
Item repository
CRUD operations for Items against the remote PLM REST API
"""

from typing import Any, Dict, List, Optional
from urllib.parse import quote

import structlog

from plm_gateway.models.item import Item, ItemCreate, ItemRevision, ItemUpdate
from plm_gateway.utils import property_codec as codec
from plm_gateway.utils.teamcenter_client import TeamcenterClient

logger = structlog.get_logger(__name__)


def _text(props, name: str) -> Optional[str]:
    """Scalar property as text; stored values may be numeric"""
    value = codec.extract_scalar(props, name)
    return None if value is None else str(value)


def to_item_revision(data: Dict[str, Any]) -> ItemRevision:
    """Map a remote revision object to an ItemRevision"""
    props = data.get("properties")
    return ItemRevision(
        id=str(data.get("uid") or ""),
        revision_id=_text(props, "item_revision_id") or "",
        name=_text(props, "object_name") or "",
        description=_text(props, "object_desc"),
        properties=codec.extract_all_scalars(props),
        created_date=codec.extract_date(props, "creation_date"),
        last_modified_date=codec.extract_date(props, "last_mod_date"),
    )


def to_item(data: Dict[str, Any]) -> Item:
    """Map a remote item object to an Item"""
    props = data.get("properties")
    return Item(
        id=str(data.get("uid") or ""),
        item_id=_text(props, "item_id") or "",
        name=_text(props, "object_name") or "",
        description=_text(props, "object_desc"),
        type=data.get("type"),
        revisions=[to_item_revision(rev) for rev in data.get("revisions") or []],
        properties=codec.extract_all_scalars(props),
        created_date=codec.extract_date(props, "creation_date"),
        last_modified_date=codec.extract_date(props, "last_mod_date"),
        owning_user=_text(props, "owning_user"),
    )


class ItemRepository:
    """Item operations bound to one remote client"""

    def __init__(self, client: TeamcenterClient):
        self.client = client
        self.endpoint = client.endpoints.items

    def _item_path(self, item_id: str) -> str:
        return f"{self.endpoint}/{quote(item_id, safe='')}"

    async def get_item_by_id(self, item_id: str) -> Item:
        data = await self.client.get(self._item_path(item_id))
        return to_item(data or {})

    async def get_item_by_uid(self, uid: str) -> Item:
        data = await self.client.get(self.endpoint, params={"uid": uid})
        return to_item(data or {})

    async def create_item(self, item: ItemCreate) -> Item:
        payload = codec.to_create_payload(item)
        data = await self.client.post(self.endpoint, json=payload) or {}
        if not data.get("properties"):
            # Create responses may carry only uid/type
            data = {**data, "properties": codec.to_property_bag(payload)}
        return to_item(data)

    async def update_item(self, item_id: str, updates: ItemUpdate) -> Item:
        payload = codec.to_update_payload(updates)
        data = await self.client.put(self._item_path(item_id), json=payload)
        return to_item(data or {})

    async def delete_item(self, item_id: str) -> None:
        await self.client.delete(self._item_path(item_id))
        logger.info("Item deleted in Teamcenter", item_id=item_id)

    async def get_item_revisions(self, item_id: str) -> List[ItemRevision]:
        data = await self.client.get(f"{self._item_path(item_id)}/revisions")
        return [to_item_revision(rev) for rev in data or []]
