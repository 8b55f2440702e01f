"""
Item data models and schemas
"""

from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

ITEM_ID_PATTERN = r"^[a-zA-Z0-9_-]+$"


class RemoteProperty(BaseModel):
    """A single entry of a remote property bag"""
    model_config = ConfigDict(populate_by_name=True)

    db_values: List[Any] = Field(default_factory=list, alias="dbValues")
    ui_values: List[str] = Field(default_factory=list, alias="uiValues")
    type: Optional[str] = None


class ItemRevision(BaseModel):
    """Revision of an Item"""
    id: str = Field(..., description="Remote UID")
    revision_id: str = Field("", description="Revision ID (e.g. A, B, 001)")
    name: str = ""
    description: Optional[str] = None
    properties: Dict[str, Any] = Field(default_factory=dict)
    created_date: Optional[datetime] = None
    last_modified_date: Optional[datetime] = None


class Item(BaseModel):
    """Flattened Item record"""
    id: str = Field(..., description="Remote UID")
    item_id: str = Field("", description="Item ID (e.g. 000123)")
    name: str = ""
    description: Optional[str] = None
    type: Optional[str] = None
    revisions: List[ItemRevision] = Field(default_factory=list)
    properties: Dict[str, Any] = Field(default_factory=dict)
    created_date: Optional[datetime] = None
    last_modified_date: Optional[datetime] = None
    owning_user: Optional[str] = None


class ItemCreate(BaseModel):
    """Schema for creating a new Item"""
    item_id: str = Field(..., min_length=1, pattern=ITEM_ID_PATTERN)
    name: str = Field(..., min_length=1, max_length=255)
    description: Optional[str] = Field(None, max_length=1000)
    type: Optional[str] = Field("Item")
    properties: Optional[Dict[str, Any]] = None


class ItemUpdate(BaseModel):
    """Schema for a partial Item update"""
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    description: Optional[str] = Field(None, max_length=1000)
    properties: Optional[Dict[str, Any]] = None
