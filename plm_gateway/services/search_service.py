"""
Search Service
Business rules for search and saved-query operations
"""

from typing import Dict, List, Optional

import structlog

from plm_gateway.config import SEARCH_DEFAULT_MAX_RESULTS, SEARCH_MAX_RESULTS_LIMIT
from plm_gateway.models.search import SavedQuery, SearchCriteria, SearchResult
from plm_gateway.repositories.search_repository import SearchRepository
from plm_gateway.utils.errors import GatewayError, ValidationError


class SearchService:
    """Search business logic service"""

    def __init__(
        self,
        repository: SearchRepository,
        max_results_limit: int = SEARCH_MAX_RESULTS_LIMIT,
        default_max_results: int = SEARCH_DEFAULT_MAX_RESULTS,
        logger=None
    ):
        self.repository = repository
        self.max_results_limit = max_results_limit
        self.default_max_results = default_max_results
        self.logger = logger or structlog.get_logger(__name__)

    def clamp_max_results(self, requested: Optional[int]) -> int:
        """Apply the default and the configured upper bound"""
        if not requested:
            return self.default_max_results
        if requested > self.max_results_limit:
            self.logger.warning(
                "Maximum results limited",
                requested=requested,
                limit=self.max_results_limit,
            )
            return self.max_results_limit
        return requested

    async def search(self, criteria: SearchCriteria) -> SearchResult:
        if not criteria.query or not criteria.query.strip():
            raise ValidationError("Search query is required")

        criteria = criteria.model_copy(update={"max_results": self.clamp_max_results(criteria.max_results)})
        try:
            result = await self.repository.execute_search(criteria)
        except GatewayError as e:
            self.logger.error("Search failed", query=criteria.query, kind=e.kind.value, error=e.message)
            raise

        self.logger.info("Search executed", query=criteria.query, total_found=result.total_found)
        return result

    async def search_by_type(self, type: str, max_results: Optional[int] = None) -> SearchResult:
        if not type or not type.strip():
            raise ValidationError("Object type is required")

        try:
            result = await self.repository.search_by_type(type, self.clamp_max_results(max_results))
        except GatewayError as e:
            self.logger.error("Search by type failed", type=type, kind=e.kind.value, error=e.message)
            raise

        self.logger.info("Search by type executed", type=type, total_found=result.total_found)
        return result

    async def search_by_item_id(self, item_id: str) -> SearchResult:
        if not item_id or not item_id.strip():
            raise ValidationError("Item ID is required")

        try:
            result = await self.repository.search_by_item_id(item_id)
        except GatewayError as e:
            self.logger.error("Search by Item ID failed", item_id=item_id, kind=e.kind.value, error=e.message)
            raise

        self.logger.info("Search by Item ID executed", item_id=item_id, total_found=result.total_found)
        return result

    async def list_saved_queries(self) -> List[SavedQuery]:
        try:
            queries = await self.repository.get_saved_queries()
        except GatewayError as e:
            self.logger.error("Failed to list saved queries", kind=e.kind.value, error=e.message)
            raise

        self.logger.info("Saved queries retrieved", count=len(queries))
        return queries

    async def execute_saved_query(self, query_name: str, entries: Optional[Dict[str, str]] = None) -> SearchResult:
        if not query_name or not query_name.strip():
            raise ValidationError("Saved query name is required")

        try:
            result = await self.repository.execute_saved_query(query_name, entries)
        except GatewayError as e:
            self.logger.error("Saved query failed", query_name=query_name, kind=e.kind.value, error=e.message)
            raise

        self.logger.info("Saved query executed", query_name=query_name, total_found=result.total_found)
        return result
