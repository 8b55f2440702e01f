"""
Data models for the PLM gateway
"""

from .auth import (
    AuthToken, LoginRequest, LoginResponse, RemoteAuthResult, RemoteUser,
    SessionState, TokenPayload, User
)
from .item import Item, ItemCreate, ItemRevision, ItemUpdate, RemoteProperty
from .search import SavedQuery, SavedQueryExecution, SearchCriteria, SearchResult, SearchResultItem

__all__ = [
    "AuthToken",
    "LoginRequest",
    "LoginResponse",
    "RemoteAuthResult",
    "RemoteUser",
    "SessionState",
    "TokenPayload",
    "User",
    "Item",
    "ItemCreate",
    "ItemRevision",
    "ItemUpdate",
    "RemoteProperty",
    "SavedQuery",
    "SavedQueryExecution",
    "SearchCriteria",
    "SearchResult",
    "SearchResultItem",
]
