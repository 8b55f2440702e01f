"""
Tests for the Item service and repository
"""

from unittest.mock import AsyncMock, MagicMock

import httpx
import pytest

from plm_gateway.models.item import Item, ItemCreate, ItemUpdate
from plm_gateway.repositories.item_repository import ItemRepository
from plm_gateway.services.item_service import ItemService
from plm_gateway.utils.errors import (
    ErrorKind, Forbidden, NotFound, NotFoundDomain, Unauthenticated, ValidationError
)
from tests.conftest import prop


@pytest.fixture
def mock_repository():
    repository = MagicMock()
    repository.get_item_by_id = AsyncMock(return_value=Item(id="UID1", item_id="000123", name="Bracket"))
    repository.get_item_by_uid = AsyncMock(return_value=Item(id="UID1", item_id="000123", name="Bracket"))
    repository.create_item = AsyncMock(return_value=Item(id="UID2", item_id="000124", name="New"))
    repository.update_item = AsyncMock(return_value=Item(id="UID1", item_id="000123", name="Renamed"))
    repository.delete_item = AsyncMock(return_value=None)
    repository.get_item_revisions = AsyncMock(return_value=[])
    return repository


@pytest.fixture
def item_service(mock_repository):
    return ItemService(mock_repository)


class TestItemService:
    """Item business rules"""

    async def test_get_item(self, item_service, mock_repository):
        item = await item_service.get_item("000123")
        assert item.name == "Bracket"
        mock_repository.get_item_by_id.assert_awaited_once_with("000123")

    @pytest.mark.parametrize("item_id", ["", "   "])
    async def test_blank_id_rejected(self, item_service, mock_repository, item_id):
        with pytest.raises(ValidationError):
            await item_service.get_item(item_id)
        with pytest.raises(ValidationError):
            await item_service.delete_item(item_id)
        mock_repository.get_item_by_id.assert_not_awaited()

    async def test_get_item_not_found_is_domain_error(self, item_service, mock_repository):
        mock_repository.get_item_by_id.side_effect = NotFound()
        with pytest.raises(NotFoundDomain) as exc_info:
            await item_service.get_item("MISSING")
        assert exc_info.value.kind == ErrorKind.NOT_FOUND_DOMAIN

    async def test_get_item_by_uid_not_found(self, item_service, mock_repository):
        mock_repository.get_item_by_uid.side_effect = NotFound()
        with pytest.raises(NotFoundDomain):
            await item_service.get_item_by_uid("NOPE")

    async def test_other_errors_propagate_unchanged(self, item_service, mock_repository):
        mock_repository.get_item_by_id.side_effect = Forbidden()
        with pytest.raises(Forbidden):
            await item_service.get_item("000123")

    async def test_create_item(self, item_service, mock_repository):
        data = ItemCreate(item_id="000124", name="New")
        item = await item_service.create_item(data)
        assert item.id == "UID2"
        mock_repository.create_item.assert_awaited_once_with(data)

    async def test_create_validation_collects_all_errors(self, item_service, mock_repository):
        data = ItemCreate.model_construct(item_id="bad id!", name="  ", description=None,
                                          type="Item", properties=None)
        with pytest.raises(ValidationError) as exc_info:
            await item_service.create_item(data)
        assert len(exc_info.value.errors) == 2
        mock_repository.create_item.assert_not_awaited()

    async def test_empty_update_rejected_without_remote_call(self, item_service, mock_repository):
        with pytest.raises(ValidationError):
            await item_service.update_item("000123", ItemUpdate())
        mock_repository.get_item_by_id.assert_not_awaited()
        mock_repository.update_item.assert_not_awaited()

    async def test_update_item(self, item_service, mock_repository):
        item = await item_service.update_item("000123", ItemUpdate(name="Renamed"))
        assert item.name == "Renamed"
        mock_repository.get_item_by_id.assert_awaited_once_with("000123")

    async def test_update_missing_item(self, item_service, mock_repository):
        mock_repository.get_item_by_id.side_effect = NotFound()
        with pytest.raises(NotFoundDomain):
            await item_service.update_item("MISSING", ItemUpdate(name="X"))
        mock_repository.update_item.assert_not_awaited()

    async def test_delete_missing_item(self, item_service, mock_repository):
        mock_repository.get_item_by_id.side_effect = NotFound()
        with pytest.raises(NotFoundDomain):
            await item_service.delete_item("MISSING")
        mock_repository.delete_item.assert_not_awaited()

    async def test_delete_expired_session_propagates(self, item_service, mock_repository):
        mock_repository.delete_item.side_effect = Unauthenticated()
        with pytest.raises(Unauthenticated):
            await item_service.delete_item("000123")


class TestItemRepository:
    """Item repository over a mock transport"""

    async def test_get_item_maps_properties(self, make_client, sample_item_data):
        client, recorder = make_client(lambda request: httpx.Response(200, json=sample_item_data))
        async with client:
            item = await ItemRepository(client).get_item_by_id("000123")

        assert recorder.requests[0].url.path == "/tc/rest/items/000123"
        assert item.id == "QWERTY123"
        assert item.item_id == "000123"
        assert item.description == "Steel bracket"
        assert item.owning_user == "jdoe"
        assert item.created_date.year == 2024
        assert item.revisions[0].revision_id == "A"

    async def test_get_item_by_uid_uses_query_param(self, make_client, sample_item_data):
        client, recorder = make_client(lambda request: httpx.Response(200, json=sample_item_data))
        async with client:
            await ItemRepository(client).get_item_by_uid("QWERTY123")
        assert recorder.requests[0].url.params["uid"] == "QWERTY123"

    async def test_create_sends_remote_names(self, make_client):
        client, recorder = make_client(lambda request: httpx.Response(201, json={"uid": "NEW1", "type": "Item"}))
        async with client:
            item = await ItemRepository(client).create_item(ItemCreate(item_id="000999", name="Plate"))

        assert recorder.json_body() == {
            "item_id": "000999",
            "object_name": "Plate",
            "object_desc": "",
            "item_type": "Item",
        }
        assert item.id == "NEW1"
        assert item.item_id == "000999"
        assert item.name == "Plate"

    async def test_update_sends_partial_body(self, make_client, sample_item_data):
        client, recorder = make_client(lambda request: httpx.Response(200, json=sample_item_data))
        async with client:
            await ItemRepository(client).update_item("000123", ItemUpdate(description="New desc"))
        assert recorder.requests[0].method == "PUT"
        assert recorder.json_body() == {"object_desc": "New desc"}

    async def test_revisions(self, make_client, sample_item_data):
        client, recorder = make_client(lambda request: httpx.Response(200, json=sample_item_data["revisions"]))
        async with client:
            revisions = await ItemRepository(client).get_item_revisions("000123")
        assert recorder.requests[0].url.path == "/tc/rest/items/000123/revisions"
        assert [r.id for r in revisions] == ["REV001"]

    async def test_numeric_stored_values_map_to_text(self, make_client):
        data = {
            "uid": "U1",
            "properties": {
                "item_id": prop(123),
                "object_name": prop(4567),
                "owning_user": prop(42),
            },
            "revisions": [{"uid": "R1", "properties": {"item_revision_id": prop(1)}}],
        }
        client, _ = make_client(lambda request: httpx.Response(200, json=data))
        async with client:
            item = await ItemRepository(client).get_item_by_id("123")

        assert item.item_id == "123"
        assert item.name == "4567"
        assert item.owning_user == "42"
        assert item.properties["item_id"] == 123
        assert item.revisions[0].revision_id == "1"

    async def test_expired_session_on_write_is_unauthenticated(self, make_client):
        client, recorder = make_client(lambda request: httpx.Response(401, json={"message": "session expired"}))
        async with client:
            client.set_session_token("STALE")
            repository = ItemRepository(client)
            with pytest.raises(Unauthenticated):
                await repository.create_item(ItemCreate(item_id="000999", name="Plate"))
            with pytest.raises(Unauthenticated):
                await repository.update_item("000123", ItemUpdate(name="Renamed"))
            with pytest.raises(Unauthenticated):
                await repository.get_item_by_id("000123")
        assert [r.method for r in recorder.requests] == ["POST", "PUT", "GET"]
