"""
Tests for local tokens and the authentication service
"""

import base64
import json
from datetime import datetime, timedelta, timezone

import httpx
import jwt
import pytest

from plm_gateway.config import DEFAULT_JWT_SECRET
from plm_gateway.services.auth_service import AuthService
from plm_gateway.utils.errors import (
    AuthenticationFailed, ConfigurationError, ErrorKind, InvalidToken, ValidationError
)
from plm_gateway.utils.security import TokenManager
from plm_gateway.utils.teamcenter_client import TeamcenterClient
from tests.conftest import TEST_SECRET, RemoteRecorder


def _auth_service(settings, token_manager, handler):
    recorder = RemoteRecorder(handler)

    def factory():
        return TeamcenterClient(settings, transport=recorder.transport)

    return AuthService(factory, token_manager), recorder


def _login_ok(request):
    if request.method == "POST":
        return httpx.Response(200, json={
            "sessionId": "TC-SESSION-9",
            "user": {"userId": "jdoe", "groupId": "Engineering", "role": "Designer"},
        })
    return httpx.Response(204)


class TestTokenManager:
    """Local token signing and verification"""

    @pytest.mark.parametrize("secret", ["", DEFAULT_JWT_SECRET])
    def test_refuses_insecure_secret(self, secret):
        with pytest.raises(ConfigurationError):
            TokenManager(secret)

    def test_issue_then_decode(self, token_manager):
        auth = token_manager.issue("jdoe", "TC-1")
        payload = token_manager.decode(auth.token)

        assert auth.token_type == "Bearer"
        assert auth.expires_in == 3600
        assert payload.username == "jdoe"
        assert payload.remote_session_id == "TC-1"
        assert payload.exp - payload.iat == 3600

    def test_expired_token_rejected(self, token_manager):
        issued = datetime.now(timezone.utc) - timedelta(hours=2)
        auth = token_manager.issue("jdoe", "TC-1", now=issued)
        with pytest.raises(InvalidToken):
            token_manager.decode(auth.token)

    def test_tampered_token_rejected(self, token_manager):
        auth = token_manager.issue("jdoe", "TC-1")
        header, _, signature = auth.token.split(".")
        forged_body = base64.urlsafe_b64encode(
            json.dumps({"username": "admin", "remote_session_id": "TC-1", "iat": 1, "exp": 9999999999}).encode()
        ).rstrip(b"=").decode()
        tampered = ".".join([header, forged_body, signature])
        with pytest.raises(InvalidToken):
            token_manager.decode(tampered)

    def test_foreign_secret_rejected(self, token_manager):
        other = TokenManager("another-secret-that-is-also-long-enough-42")
        with pytest.raises(InvalidToken):
            token_manager.decode(other.issue("jdoe", "TC-1").token)

    def test_missing_claim_rejected(self, token_manager):
        now = datetime.now(timezone.utc)
        token = jwt.encode(
            {"username": "jdoe", "iat": now, "exp": now + timedelta(hours=1)},
            TEST_SECRET,
            algorithm="HS256",
        )
        with pytest.raises(InvalidToken):
            token_manager.decode(token)

    def test_malformed_token_rejected(self, token_manager):
        with pytest.raises(InvalidToken) as exc_info:
            token_manager.decode("not-a-jwt")
        assert exc_info.value.kind == ErrorKind.INVALID_TOKEN


class TestAuthService:
    """Session bridge behaviour"""

    async def test_login_then_validate(self, settings, token_manager):
        service, recorder = _auth_service(settings, token_manager, _login_ok)

        response = await service.login("jdoe", "secret1")
        payload = service.validate_token(response.auth.token)

        assert response.success is True
        assert response.user.username == "jdoe"
        assert response.user.group_id == "Engineering"
        assert response.user.role == "Designer"
        assert payload.username == "jdoe"
        assert payload.remote_session_id == "TC-SESSION-9"
        assert len(recorder.requests) == 1

    @pytest.mark.parametrize("username,password", [("", "secret1"), ("jdoe", "")])
    async def test_login_requires_credentials(self, settings, token_manager, username, password):
        service, recorder = _auth_service(settings, token_manager, _login_ok)
        with pytest.raises(ValidationError):
            await service.login(username, password)
        assert recorder.requests == []

    @pytest.mark.parametrize("handler", [
        lambda request: httpx.Response(401, json={"message": "Invalid user"}),
        lambda request: httpx.Response(503),
        lambda request: httpx.Response(200, json={}),
    ])
    async def test_login_failures_are_generic(self, settings, token_manager, handler):
        service, _ = _auth_service(settings, token_manager, handler)
        with pytest.raises(AuthenticationFailed) as exc_info:
            await service.login("jdoe", "secret1")
        assert exc_info.value.message == AuthenticationFailed.default_message
        assert exc_info.value.remote_message is None

    async def test_refresh_keeps_claims(self, settings, token_manager):
        service, recorder = _auth_service(settings, token_manager, _login_ok)
        old_issued = datetime.now(timezone.utc) - timedelta(minutes=10)
        old = token_manager.issue("jdoe", "TC-SESSION-9", now=old_issued)

        new = service.refresh_token(old.token)
        old_payload = token_manager.decode(old.token)
        new_payload = token_manager.decode(new.token)

        assert new_payload.username == old_payload.username
        assert new_payload.remote_session_id == old_payload.remote_session_id
        assert new_payload.exp >= old_payload.exp
        assert recorder.requests == []

    def test_refresh_rejects_invalid_token(self, settings, token_manager):
        service, _ = _auth_service(settings, token_manager, _login_ok)
        with pytest.raises(InvalidToken):
            service.refresh_token("garbage")

    async def test_logout_calls_remote_with_session(self, settings, token_manager):
        service, recorder = _auth_service(settings, token_manager, _login_ok)
        await service.logout("TC-SESSION-9")

        request = recorder.requests[0]
        assert request.method == "DELETE"
        assert request.headers["Authorization"] == "Bearer TC-SESSION-9"

    async def test_logout_never_raises(self, settings, token_manager):
        def handler(request):
            raise httpx.ConnectError("Connection refused", request=request)

        service, _ = _auth_service(settings, token_manager, handler)
        await service.logout("TC-SESSION-9")
