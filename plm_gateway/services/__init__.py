"""
Business logic services for the PLM gateway
"""

from .auth_service import AuthService
from .item_service import ItemService
from .search_service import SearchService

__all__ = ["AuthService", "ItemService", "SearchService"]
