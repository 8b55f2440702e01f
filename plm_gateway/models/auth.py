"""
Authentication data models and schemas
"""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class SessionState(str, Enum):
    """States of a single login attempt"""
    UNAUTHENTICATED = "unauthenticated"
    AUTHENTICATING = "authenticating"
    AUTHENTICATED = "authenticated"
    FAILED = "failed"


class LoginRequest(BaseModel):
    """Login credentials submitted by a caller"""
    username: str = Field(..., min_length=3, max_length=50)
    password: str = Field(..., min_length=6)


class RemoteUser(BaseModel):
    """User metadata returned by the remote session endpoint"""
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    uid: Optional[str] = None
    user_id: Optional[str] = Field(None, alias="userId")
    user_name: Optional[str] = Field(None, alias="userName")
    group_id: Optional[str] = Field(None, alias="groupId")
    group_name: Optional[str] = Field(None, alias="groupName")
    role: Optional[str] = None


class RemoteAuthResult(BaseModel):
    """Response of the remote session endpoint"""
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    session_id: str = Field(..., alias="sessionId", min_length=1)
    user: Optional[RemoteUser] = None


class User(BaseModel):
    """Authenticated gateway user"""
    username: str
    user_id: Optional[str] = None
    group_id: Optional[str] = None
    role: Optional[str] = None


class TokenPayload(BaseModel):
    """Claims carried by a local token"""
    username: str
    remote_session_id: str
    iat: int
    exp: int


class AuthToken(BaseModel):
    """Local token handed to callers"""
    token: str
    expires_in: int
    token_type: str = "Bearer"


class LoginResponse(BaseModel):
    success: bool = True
    user: User
    auth: AuthToken
