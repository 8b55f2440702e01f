"""
Authentication Service
Bridges a remote PLM session to a self-contained local token
"""

from typing import Callable

import structlog

from plm_gateway.models.auth import AuthToken, LoginResponse, SessionState, TokenPayload, User
from plm_gateway.utils.errors import AuthenticationFailed, GatewayError, ValidationError
from plm_gateway.utils.security import TokenManager
from plm_gateway.utils.teamcenter_client import TeamcenterClient

ClientFactory = Callable[[], TeamcenterClient]


class AuthService:
    """Login, logout and local token lifecycle"""

    def __init__(self, client_factory: ClientFactory, token_manager: TokenManager, logger=None):
        self.client_factory = client_factory
        self.token_manager = token_manager
        self.logger = logger or structlog.get_logger(__name__)

    def _transition(self, username: str, state: SessionState) -> None:
        self.logger.debug("Login state changed", username=username, state=state.value)

    async def login(self, username: str, password: str) -> LoginResponse:
        """
        Authenticate against the remote system and mint a local token

        Args:
            username: Remote user name
            password: Remote password

        Returns:
            LoginResponse with user info and the local token

        Raises:
            ValidationError: if a credential is empty
            AuthenticationFailed: for any remote failure (cause only logged)
        """
        if not username or not password:
            raise ValidationError("Username and password are required")

        self._transition(username, SessionState.UNAUTHENTICATED)
        self._transition(username, SessionState.AUTHENTICATING)
        try:
            async with self.client_factory() as client:
                remote = await client.authenticate(username, password)
        except GatewayError as e:
            self._transition(username, SessionState.FAILED)
            cause = e.__cause__ if isinstance(e.__cause__, GatewayError) else e
            self.logger.error(
                "Login failed",
                username=username,
                kind=cause.kind.value,
                error=cause.message,
                remote_message=cause.remote_message,
            )
            raise AuthenticationFailed() from e

        user = User(
            username=username,
            user_id=remote.user.user_id if remote.user else None,
            group_id=remote.user.group_id if remote.user else None,
            role=remote.user.role if remote.user else None,
        )
        auth = self.token_manager.issue(username, remote.session_id)

        self._transition(username, SessionState.AUTHENTICATED)
        self.logger.info("Login succeeded", username=username)
        return LoginResponse(success=True, user=user, auth=auth)

    async def logout(self, remote_session_id: str) -> None:
        """End the remote session; never raises"""
        try:
            async with self.client_factory() as client:
                client.set_session_token(remote_session_id)
                await client.logout()
            self.logger.info("Logout completed")
        except Exception as e:
            # Remote session may already be gone; local logout still succeeds
            self.logger.error("Logout failed", error=str(e))

    def validate_token(self, token: str) -> TokenPayload:
        return self.token_manager.decode(token)

    def refresh_token(self, old_token: str) -> AuthToken:
        """
        Re-sign a valid token with a fresh expiry

        The remote session is not re-validated here; a stale remote session
        surfaces as Unauthenticated on the next remote call.
        """
        payload = self.validate_token(old_token)
        self.logger.debug("Refreshing local token without remote check", username=payload.username)
        return self.token_manager.issue(payload.username, payload.remote_session_id)

