"""
Search repository
Free-text search and saved-query execution against the remote PLM REST API
"""

from typing import Any, Dict, List, Optional
from urllib.parse import quote

from plm_gateway.config import SEARCH_DEFAULT_MAX_RESULTS
from plm_gateway.models.search import SavedQuery, SearchCriteria, SearchResult, SearchResultItem
from plm_gateway.utils import property_codec as codec
from plm_gateway.utils.teamcenter_client import TeamcenterClient

TYPE_FILTER_KEY = "WorkspaceObject.object_type"


def build_search_payload(criteria: SearchCriteria, default_max: int = SEARCH_DEFAULT_MAX_RESULTS) -> Dict[str, Any]:
    """Build the remote search body for a set of criteria"""
    search_input: Dict[str, Any] = {
        "searchCriteria": criteria.query,
        "maxToReturn": criteria.max_results or default_max,
    }
    if criteria.type:
        search_input["searchFilterMap"] = {TYPE_FILTER_KEY: [criteria.type]}
    if criteria.properties:
        search_input["attributesToInflate"] = list(criteria.properties)
    return {"searchInput": search_input}


def build_query_entries(entries: Dict[str, str]) -> List[Dict[str, str]]:
    return [{"key": key, "value": value} for key, value in entries.items()]


def to_search_result(data: Optional[Dict[str, Any]]) -> SearchResult:
    """Map a remote search response; has_more is advisory"""
    data = data or {}
    total_found = data.get("totalFound") or 0
    total_loaded = data.get("totalLoaded") or 0
    items = [
        SearchResultItem(
            uid=str(obj.get("uid") or ""),
            type=obj.get("type"),
            properties=codec.extract_all_scalars(obj.get("properties")),
        )
        for obj in data.get("objects") or []
    ]
    return SearchResult(total_found=total_found, items=items, has_more=total_found > total_loaded)


def to_saved_query(data: Dict[str, Any]) -> SavedQuery:
    return SavedQuery(
        uid=data.get("uid"),
        name=data.get("name") or data.get("query_name"),
        description=data.get("description") or data.get("query_desc"),
        query_type=data.get("query_type") or "Unknown",
    )


class SearchRepository:
    """Search operations bound to one remote client"""

    def __init__(self, client: TeamcenterClient, default_max_results: int = SEARCH_DEFAULT_MAX_RESULTS):
        self.client = client
        self.default_max_results = default_max_results

    async def execute_search(self, criteria: SearchCriteria) -> SearchResult:
        payload = build_search_payload(criteria, self.default_max_results)
        data = await self.client.post(self.client.endpoints.search, json=payload)
        return to_search_result(data)

    async def search_by_type(self, type: str, max_results: int = SEARCH_DEFAULT_MAX_RESULTS) -> SearchResult:
        return await self.execute_search(
            SearchCriteria(query=f"type:{type}", type=type, max_results=max_results)
        )

    async def search_by_item_id(self, item_id: str) -> SearchResult:
        """Search by Item ID; wildcards such as 000* are passed through"""
        return await self.execute_search(SearchCriteria(query=f"item_id:{item_id}", type="Item"))

    async def get_saved_queries(self) -> List[SavedQuery]:
        data = await self.client.get(self.client.endpoints.saved_queries)
        return [to_saved_query(sq) for sq in data or []]

    async def execute_saved_query(self, query_name: str, entries: Optional[Dict[str, str]] = None) -> SearchResult:
        path = f"{self.client.endpoints.saved_queries}/{quote(query_name, safe='')}"
        payload = {"entries": build_query_entries(entries)} if entries else {}
        data = await self.client.post(path, json=payload)
        return to_search_result(data)
