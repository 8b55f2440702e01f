"""
Search data models and schemas
"""

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field


class SearchCriteria(BaseModel):
    """Search criteria for a free-text query"""
    query: str = Field(..., description="Query string, e.g. item_id:000*")
    type: Optional[str] = Field(None, description="Object type filter, e.g. Item")
    max_results: Optional[int] = Field(None, ge=1)
    properties: Optional[List[str]] = Field(None, description="Properties to inflate")


class SearchResultItem(BaseModel):
    uid: str
    type: Optional[str] = None
    properties: Dict[str, Any] = Field(default_factory=dict)


class SearchResult(BaseModel):
    total_found: int = 0
    items: List[SearchResultItem] = Field(default_factory=list)
    has_more: bool = False


class SavedQuery(BaseModel):
    uid: Optional[str] = None
    name: Optional[str] = None
    description: Optional[str] = None
    query_type: str = "Unknown"


class SavedQueryExecution(BaseModel):
    """Request body for running a saved query"""
    entries: Dict[str, str] = Field(default_factory=dict)
