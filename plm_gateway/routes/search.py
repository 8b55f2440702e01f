"""
Search routes
"""

from typing import Optional

from fastapi import APIRouter, Body, Query

from plm_gateway.models.search import SavedQueryExecution, SearchCriteria
from plm_gateway.utils.dependencies import SearchServiceDep

router = APIRouter()


@router.post("")
async def search(criteria: SearchCriteria, search_service: SearchServiceDep):
    """Free-text search with optional type filter"""
    result = await search_service.search(criteria)
    return {"success": True, "data": result.model_dump(mode="json")}


@router.get("/type/{type}")
async def search_by_type(
    type: str,
    search_service: SearchServiceDep,
    max_results: Optional[int] = Query(None, alias="maxResults", ge=1),
):
    result = await search_service.search_by_type(type, max_results)
    return {"success": True, "data": result.model_dump(mode="json")}


@router.get("/item-id/{item_id}")
async def search_by_item_id(item_id: str, search_service: SearchServiceDep):
    result = await search_service.search_by_item_id(item_id)
    return {"success": True, "data": result.model_dump(mode="json")}


@router.get("/saved-queries")
async def list_saved_queries(search_service: SearchServiceDep):
    queries = await search_service.list_saved_queries()
    return {
        "success": True,
        "data": [query.model_dump(mode="json") for query in queries],
        "count": len(queries),
    }


@router.post("/saved-query/{query_name}")
async def execute_saved_query(
    query_name: str,
    search_service: SearchServiceDep,
    execution: Optional[SavedQueryExecution] = Body(None),
):
    """Run a named saved query with optional entry values"""
    entries = execution.entries if execution else None
    result = await search_service.execute_saved_query(query_name, entries)
    return {"success": True, "data": result.model_dump(mode="json")}
