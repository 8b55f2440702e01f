"""
Remote resource repositories
"""

from .item_repository import ItemRepository
from .search_repository import SearchRepository

__all__ = ["ItemRepository", "SearchRepository"]
