"""
Teamcenter REST API Client
Single point of outbound traffic to the remote PLM system

Each instance owns its own httpx.AsyncClient and its own Authorization
header, so one instance must serve exactly one request/session context.
"""

from typing import Any, Dict, Optional

import httpx
import structlog
from pydantic import ValidationError as PydanticValidationError

from plm_gateway.config import Settings
from plm_gateway.models.auth import RemoteAuthResult
from plm_gateway.utils.errors import (
    AuthenticationFailed, ConnectionRefused, Forbidden, GatewayError, NetworkError,
    NotFound, RemoteInternalError, RemoteUnavailable, Timeout, TransportError,
    Unauthenticated
)
from plm_gateway.utils.logger import redact

AUTHORIZATION_HEADER = "Authorization"


def _remote_message(response: httpx.Response) -> Optional[str]:
    """Best-effort extraction of the remote error message"""
    try:
        body = response.json()
    except ValueError:
        text = response.text.strip()
        return text[:500] if text else None
    if isinstance(body, dict):
        message = body.get("message") or body.get("error")
        return str(message) if message else None
    return None


def _is_connection_refused(exc: BaseException) -> bool:
    current: Optional[BaseException] = exc
    while current is not None:
        if isinstance(current, ConnectionRefusedError):
            return True
        current = current.__cause__ or current.__context__
    return False


def translate_error(exc: httpx.HTTPError) -> GatewayError:
    """
    Map a failed remote call to a gateway error

    Args:
        exc: The httpx exception raised for the call

    Returns:
        GatewayError subclass matching the remote status or transport failure
    """
    if isinstance(exc, httpx.HTTPStatusError):
        status = exc.response.status_code
        remote_message = _remote_message(exc.response)
        details = {"status_code": status}

        if status == 401:
            return Unauthenticated(details=details, remote_message=remote_message)
        if status == 403:
            return Forbidden(details=details, remote_message=remote_message)
        if status == 404:
            return NotFound(details=details, remote_message=remote_message)
        if status == 500:
            return RemoteInternalError(
                f"PLM system internal error: {remote_message or 'unknown error'}",
                details=details,
                remote_message=remote_message,
            )
        if status == 503:
            return RemoteUnavailable(details=details, remote_message=remote_message)
        return TransportError(
            f"PLM system error ({status}): {remote_message or 'unknown error'}",
            details=details,
            remote_message=remote_message,
        )

    details = {"error": str(exc) or exc.__class__.__name__}
    if isinstance(exc, httpx.TimeoutException):
        return Timeout(details=details)
    if isinstance(exc, httpx.ConnectError) and _is_connection_refused(exc):
        return ConnectionRefused(details=details)
    return NetworkError(f"Network error: {details['error']}", details=details)


class TeamcenterClient:
    """HTTP client for the remote PLM REST API"""

    def __init__(
        self,
        settings: Settings,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        logger=None
    ):
        self.settings = settings
        self.endpoints = settings.endpoints
        self.logger = logger or structlog.get_logger(__name__)
        self._client = httpx.AsyncClient(
            base_url=settings.tc_base_url.rstrip('/'),
            timeout=httpx.Timeout(settings.tc_timeout),
            headers={
                "Content-Type": "application/json",
                "Accept": "application/json",
            },
            transport=transport,
        )

    async def __aenter__(self) -> "TeamcenterClient":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        """Close the underlying HTTP connection pool"""
        if not self._client.is_closed:
            await self._client.aclose()

    @property
    def session_token(self) -> Optional[str]:
        value = self._client.headers.get(AUTHORIZATION_HEADER)
        if value and value.startswith("Bearer "):
            return value[len("Bearer "):]
        return None

    @property
    def headers(self) -> httpx.Headers:
        return self._client.headers

    def set_session_token(self, token: str) -> None:
        """Attach a remote session id to every subsequent call"""
        self._client.headers[AUTHORIZATION_HEADER] = f"Bearer {token}"
        self.logger.debug("Teamcenter session token set")

    def clear_session_token(self) -> None:
        """Remove the remote session header; safe to call repeatedly"""
        if AUTHORIZATION_HEADER in self._client.headers:
            del self._client.headers[AUTHORIZATION_HEADER]
        self.logger.debug("Teamcenter session token cleared")

    async def _request(
        self,
        method: str,
        path: str,
        json: Optional[Any] = None,
        params: Optional[Dict[str, Any]] = None
    ) -> Any:
        """Issue a request; every failure passes through translate_error"""
        self.logger.info("Teamcenter request", method=method, path=path)
        if json is not None:
            self.logger.debug("Teamcenter request payload", method=method, path=path, payload=redact(json))

        try:
            response = await self._client.request(method, path, json=json, params=params)
            response.raise_for_status()
        except httpx.HTTPError as e:
            error = translate_error(e)
            self.logger.error(
                "Teamcenter request failed",
                method=method,
                path=path,
                kind=error.kind.value,
                status_code=error.details.get("status_code"),
                remote_message=error.remote_message,
                error=str(e),
            )
            raise error from e

        self.logger.info("Teamcenter response", path=path, status_code=response.status_code)

        if response.status_code == 204 or not response.content:
            return None

        try:
            data = response.json()
        except ValueError as e:
            self.logger.error("Teamcenter returned a non-JSON body", path=path, status_code=response.status_code)
            raise TransportError("Invalid response from the PLM system",
                                 details={"status_code": response.status_code}) from e

        self.logger.debug("Teamcenter response body", path=path, data=redact(data))
        return data

    async def get(self, path: str, params: Optional[Dict[str, Any]] = None) -> Any:
        return await self._request("GET", path, params=params)

    async def post(self, path: str, json: Optional[Any] = None, params: Optional[Dict[str, Any]] = None) -> Any:
        return await self._request("POST", path, json=json, params=params)

    async def put(self, path: str, json: Optional[Any] = None, params: Optional[Dict[str, Any]] = None) -> Any:
        return await self._request("PUT", path, json=json, params=params)

    async def delete(self, path: str, params: Optional[Dict[str, Any]] = None) -> Any:
        return await self._request("DELETE", path, params=params)

    @staticmethod
    def _parse_auth_result(data: Any) -> RemoteAuthResult:
        if not isinstance(data, dict) or not data.get("sessionId"):
            raise TransportError("PLM session endpoint returned no session id")
        try:
            return RemoteAuthResult.model_validate({**data, "sessionId": str(data["sessionId"])})
        except PydanticValidationError as e:
            raise TransportError("PLM session endpoint returned an unexpected body",
                                 details={"error": str(e)}) from e

    async def authenticate(self, username: str, password: str) -> RemoteAuthResult:
        """
        Open a remote session

        Args:
            username: Remote user name
            password: Remote password

        Returns:
            RemoteAuthResult with the session id and user metadata

        Raises:
            AuthenticationFailed: chained to the underlying cause
        """
        try:
            data = await self.post(
                self.endpoints.sessions,
                json={"credentials": {"username": username, "password": password}},
            )
            result = self._parse_auth_result(data)
        except GatewayError as e:
            self.logger.error("Teamcenter authentication failed", username=username,
                              kind=e.kind.value, error=e.message)
            raise AuthenticationFailed(
                details={"cause": e.kind.value},
                remote_message=e.remote_message,
            ) from e

        self.set_session_token(result.session_id)
        self.logger.info("Teamcenter authentication succeeded", username=username)
        return result

    async def logout(self) -> None:
        """End the remote session; the local header is cleared whatever happens"""
        try:
            await self.delete(self.endpoints.sessions)
            self.logger.info("Teamcenter logout succeeded")
        except GatewayError as e:
            self.logger.error("Teamcenter logout failed", kind=e.kind.value, error=e.message)
        finally:
            self.clear_session_token()
