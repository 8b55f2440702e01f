"""
FastAPI Dependencies
Token authentication and per-request remote client wiring
"""

from typing import Annotated, AsyncGenerator, Callable, Optional

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from plm_gateway.config import Settings
from plm_gateway.models.auth import TokenPayload
from plm_gateway.repositories import ItemRepository, SearchRepository
from plm_gateway.services import AuthService, ItemService, SearchService
from plm_gateway.utils.errors import ConfigurationError, InvalidToken
from plm_gateway.utils.security import TokenManager
from plm_gateway.utils.teamcenter_client import TeamcenterClient

# Missing credentials are reported through InvalidToken, not FastAPI's default 403
security = HTTPBearer(auto_error=False)


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_token_manager(request: Request) -> TokenManager:
    token_manager = getattr(request.app.state, "token_manager", None)
    if token_manager is None:
        raise ConfigurationError("Token manager is not initialized")
    return token_manager


def get_client_factory(request: Request) -> Callable[[], TeamcenterClient]:
    """Build a factory producing a fresh remote client per call"""
    settings = request.app.state.settings
    transport = getattr(request.app.state, "tc_transport", None)

    def factory() -> TeamcenterClient:
        return TeamcenterClient(settings, transport=transport)

    return factory


async def get_bearer_token(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security)
) -> str:
    if credentials is None or not credentials.credentials:
        raise InvalidToken("Token not provided")
    return credentials.credentials


async def get_current_user(
    token: Annotated[str, Depends(get_bearer_token)],
    token_manager: Annotated[TokenManager, Depends(get_token_manager)],
) -> TokenPayload:
    """
    Validate the local token of the current request

    Raises:
        InvalidToken: if the token is missing, malformed, expired or forged
    """
    return token_manager.decode(token)


async def get_teamcenter_client(
    current_user: Annotated[TokenPayload, Depends(get_current_user)],
    factory: Annotated[Callable[[], TeamcenterClient], Depends(get_client_factory)],
) -> AsyncGenerator[TeamcenterClient, None]:
    """Remote client bound to the caller's session; closed after the request"""
    async with factory() as client:
        client.set_session_token(current_user.remote_session_id)
        yield client


def get_auth_service(
    factory: Annotated[Callable[[], TeamcenterClient], Depends(get_client_factory)],
    token_manager: Annotated[TokenManager, Depends(get_token_manager)],
) -> AuthService:
    return AuthService(factory, token_manager)


def get_item_service(
    client: Annotated[TeamcenterClient, Depends(get_teamcenter_client)]
) -> ItemService:
    return ItemService(ItemRepository(client))


def get_search_service(
    client: Annotated[TeamcenterClient, Depends(get_teamcenter_client)],
    settings: Annotated[Settings, Depends(get_app_settings)],
) -> SearchService:
    return SearchService(
        SearchRepository(client, default_max_results=settings.search_default_max_results),
        max_results_limit=settings.search_max_results,
        default_max_results=settings.search_default_max_results,
    )


# Type aliases for common dependencies
CurrentUser = Annotated[TokenPayload, Depends(get_current_user)]
BearerToken = Annotated[str, Depends(get_bearer_token)]
AuthServiceDep = Annotated[AuthService, Depends(get_auth_service)]
ItemServiceDep = Annotated[ItemService, Depends(get_item_service)]
SearchServiceDep = Annotated[SearchService, Depends(get_search_service)]
