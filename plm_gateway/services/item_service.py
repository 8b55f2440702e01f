"""
Item Service
Business rules and validation for Item operations
"""

import re
from typing import List

import structlog

from plm_gateway.models.item import ITEM_ID_PATTERN, Item, ItemCreate, ItemRevision, ItemUpdate
from plm_gateway.repositories.item_repository import ItemRepository
from plm_gateway.utils import property_codec as codec
from plm_gateway.utils.errors import GatewayError, NotFound, NotFoundDomain, ValidationError


def _require(value: str, message: str) -> None:
    if not value or not value.strip():
        raise ValidationError(message)


class ItemService:
    """High-level Item business logic service"""

    def __init__(self, repository: ItemRepository, logger=None):
        self.repository = repository
        self.logger = logger or structlog.get_logger(__name__)

    async def get_item(self, item_id: str) -> Item:
        _require(item_id, "Item ID is required")
        try:
            item = await self.repository.get_item_by_id(item_id)
        except NotFound as e:
            self.logger.warning("Item not found", item_id=item_id)
            raise NotFoundDomain(f"Item {item_id} not found", details={"item_id": item_id}) from e
        except GatewayError as e:
            self.logger.error("Failed to get Item", item_id=item_id, kind=e.kind.value, error=e.message)
            raise

        self.logger.info("Item retrieved", item_id=item_id)
        return item

    async def get_item_by_uid(self, uid: str) -> Item:
        _require(uid, "UID is required")
        try:
            item = await self.repository.get_item_by_uid(uid)
        except NotFound as e:
            self.logger.warning("Item not found by UID", uid=uid)
            raise NotFoundDomain(f"Item with UID {uid} not found", details={"uid": uid}) from e
        except GatewayError as e:
            self.logger.error("Failed to get Item by UID", uid=uid, kind=e.kind.value, error=e.message)
            raise

        self.logger.info("Item retrieved by UID", uid=uid)
        return item

    def validate_create_data(self, item_data: ItemCreate) -> None:
        """Collect every create-rule violation and raise them together"""
        errors = []

        if not item_data.item_id or not item_data.item_id.strip():
            errors.append("Item ID is required")
        elif not re.match(ITEM_ID_PATTERN, item_data.item_id):
            errors.append("Item ID may only contain letters, digits, hyphens and underscores")

        if not item_data.name or not item_data.name.strip():
            errors.append("Item name is required")

        if errors:
            raise ValidationError(
                "Invalid data:\n" + "\n".join(f"  - {e}" for e in errors),
                errors=errors,
            )

    async def create_item(self, item_data: ItemCreate) -> Item:
        self.validate_create_data(item_data)
        try:
            item = await self.repository.create_item(item_data)
        except GatewayError as e:
            self.logger.error("Failed to create Item", item_id=item_data.item_id, kind=e.kind.value, error=e.message)
            raise

        self.logger.info("Item created", item_id=item.item_id, uid=item.id)
        return item

    async def update_item(self, item_id: str, updates: ItemUpdate) -> Item:
        """
        Update an existing Item

        Raises:
            ValidationError: blank id or nothing to update (checked before any remote call)
            NotFoundDomain: the Item does not exist
        """
        _require(item_id, "Item ID is required")
        if not codec.to_update_payload(updates):
            raise ValidationError("No data to update")

        await self.get_item(item_id)
        try:
            item = await self.repository.update_item(item_id, updates)
        except GatewayError as e:
            self.logger.error("Failed to update Item", item_id=item_id, kind=e.kind.value, error=e.message)
            raise

        self.logger.info("Item updated", item_id=item_id)
        return item

    async def delete_item(self, item_id: str) -> None:
        _require(item_id, "Item ID is required")

        await self.get_item(item_id)
        try:
            await self.repository.delete_item(item_id)
        except GatewayError as e:
            self.logger.error("Failed to delete Item", item_id=item_id, kind=e.kind.value, error=e.message)
            raise

        self.logger.info("Item deleted", item_id=item_id)

    async def get_item_revisions(self, item_id: str) -> List[ItemRevision]:
        _require(item_id, "Item ID is required")
        try:
            revisions = await self.repository.get_item_revisions(item_id)
        except NotFound as e:
            raise NotFoundDomain(f"Item {item_id} not found", details={"item_id": item_id}) from e
        except GatewayError as e:
            self.logger.error("Failed to get revisions", item_id=item_id, kind=e.kind.value, error=e.message)
            raise

        self.logger.info("Revisions retrieved", item_id=item_id, count=len(revisions))
        return revisions
