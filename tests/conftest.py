"""
Pytest fixtures for PLM gateway tests
"""

import json
from typing import Any, Callable, Dict, List

import httpx
import pytest

from plm_gateway.config import Settings
from plm_gateway.utils.security import TokenManager
from plm_gateway.utils.teamcenter_client import TeamcenterClient

TEST_SECRET = "unit-test-secret-with-enough-length-0123456789"
TC_BASE_URL = "http://tc.example.test"


class RemoteRecorder:
    """MockTransport handler that records every outbound request"""

    def __init__(self, handler: Callable[[httpx.Request], httpx.Response]):
        self.handler = handler
        self.requests: List[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return self.handler(request)

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self)

    def json_body(self, index: int = -1) -> Any:
        return json.loads(self.requests[index].content)


def prop(*values: Any) -> Dict[str, Any]:
    """Build one property-bag entry"""
    return {"dbValues": list(values), "uiValues": [str(v) for v in values], "type": "String"}


@pytest.fixture
def settings() -> Settings:
    return Settings(
        _env_file=None,
        environment="test",
        tc_base_url=TC_BASE_URL,
        tc_username="svc_gateway",
        tc_password="svc-password",
        tc_timeout=5.0,
        jwt_secret=TEST_SECRET,
        jwt_expiration=3600,
        cors_origins="http://localhost:3000",
    )


@pytest.fixture
def token_manager(settings) -> TokenManager:
    return TokenManager.from_settings(settings)


@pytest.fixture
def make_client(settings):
    """Build a TeamcenterClient talking to a recorded mock transport"""
    clients = []

    def _make(handler: Callable[[httpx.Request], httpx.Response]):
        recorder = RemoteRecorder(handler)
        client = TeamcenterClient(settings, transport=recorder.transport)
        clients.append(client)
        return client, recorder

    return _make


@pytest.fixture
def sample_item_data() -> Dict[str, Any]:
    """Remote representation of an Item"""
    return {
        "uid": "QWERTY123",
        "type": "Item",
        "properties": {
            "item_id": prop("000123"),
            "object_name": prop("Bracket"),
            "object_desc": prop("Steel bracket"),
            "creation_date": prop("2024-01-15T10:30:00Z"),
            "last_mod_date": prop(1705314600000),
            "owning_user": prop("jdoe"),
        },
        "revisions": [
            {
                "uid": "REV001",
                "properties": {
                    "item_revision_id": prop("A"),
                    "object_name": prop("Bracket"),
                },
            }
        ],
    }
