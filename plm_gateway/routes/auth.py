"""
Authentication routes
"""

from fastapi import APIRouter
import structlog

from plm_gateway.models.auth import LoginRequest
from plm_gateway.utils.dependencies import AuthServiceDep, BearerToken, CurrentUser

logger = structlog.get_logger(__name__)

router = APIRouter()


@router.post("/login")
async def login(credentials: LoginRequest, auth_service: AuthServiceDep):
    """Open a remote session and return a local token"""
    response = await auth_service.login(credentials.username, credentials.password)
    return response.model_dump()


@router.post("/logout")
async def logout(current_user: CurrentUser, auth_service: AuthServiceDep):
    """End the remote session behind the caller's token"""
    await auth_service.logout(current_user.remote_session_id)
    logger.info("User logged out", username=current_user.username)
    return {"success": True, "message": "Logout successful"}


@router.post("/refresh")
async def refresh(token: BearerToken, auth_service: AuthServiceDep):
    """Re-sign the caller's token with a fresh expiry"""
    new_token = auth_service.refresh_token(token)
    return {"success": True, "auth": new_token.model_dump()}
