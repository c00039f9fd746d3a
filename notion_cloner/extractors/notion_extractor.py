"""Row extractor for Notion databases."""

import asyncio
import logging
from typing import List, Optional

from .base import BaseExtractor, Page
from ..client import MAX_PAGE_SIZE, NotionClient
from ..models.record import SourceRow

logger = logging.getLogger(__name__)


class NotionExtractor(BaseExtractor):
    """Reads rows through the database query endpoint, 100 per page."""

    def __init__(self, client: NotionClient, page_size: int = MAX_PAGE_SIZE):
        """
        Initialize the extractor.

        Args:
            client: Configured API client
            page_size: Rows requested per page (capped at the service maximum)
        """
        self.client = client
        self.page_size = min(page_size, MAX_PAGE_SIZE)

    async def fetch_page(self, database_id: str, cursor: Optional[str] = None) -> Page:
        response = await asyncio.to_thread(
            self.client.query_database,
            database_id,
            cursor,
            self.page_size,
        )

        rows = [SourceRow.from_page(item) for item in response.get("results", [])]
        logger.debug(f"Fetched {len(rows)} rows from {database_id} (cursor={cursor})")

        return Page(
            rows=rows,
            has_more=bool(response.get("has_more")),
            next_cursor=response.get("next_cursor"),
        )

    async def fetch_all(self, database_id: str) -> List[SourceRow]:
        """Fetch every row of a database, in query order."""
        result = await self.extract(database_id)
        return result.rows
