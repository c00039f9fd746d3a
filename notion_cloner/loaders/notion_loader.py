"""Loader that creates the cloned database and replays rows into it."""

import asyncio
import logging
from typing import Any, Dict, List, Optional

from .base import BaseLoader
from ..client import NotionClient
from ..errors import ClonerError, CloneError
from ..models.record import RowResult, SourceRow
from ..models.schema import Schema
from ..services.property_filter import PropertyFilter

logger = logging.getLogger(__name__)


def plain_title(text: str) -> List[Dict[str, Any]]:
    """Rich-text title array holding a single plain run."""
    return [{"type": "text", "text": {"content": text}}]


class NotionLoader(BaseLoader):
    """
    Loads rows into a Notion database.

    Creates the target database in a single call (a failure there is fatal
    for the whole clone), then creates one page per source row with its
    properties passed through the PropertyFilter.
    """

    def __init__(
        self,
        client: NotionClient,
        batch_size: int = 10,
        property_filter: Optional[PropertyFilter] = None
    ):
        """
        Initialize the loader.

        Args:
            client: Configured API client
            batch_size: Rows created concurrently per batch
            property_filter: Filter applied to each row's properties
        """
        super().__init__(batch_size)
        self.client = client
        self.property_filter = property_filter or PropertyFilter()

    async def create_database(self, parent_page_id: str, name: str, schema: Schema) -> str:
        """
        Create the target database.

        Args:
            parent_page_id: Page the database is created under
            name: Title of the new database
            schema: Already filtered schema

        Returns:
            ID of the created database

        Raises:
            ClonerError: Any failure; nothing is created in that case
        """
        try:
            response = await asyncio.to_thread(
                self.client.create_database,
                parent_page_id,
                plain_title(name),
                schema,
            )
        except ClonerError:
            raise
        except Exception as e:
            raise CloneError("Failed to create database", str(e)) from e

        database_id = response.get("id")
        if not database_id:
            raise CloneError("Failed to create database", "response carried no database id")

        logger.info(f"Created database {name!r} ({database_id}) with {len(schema)} properties")
        return database_id

    async def load_row(self, database_id: str, row: SourceRow) -> RowResult:
        """Create a single page; failures come back as an unsuccessful RowResult."""
        try:
            properties = self.property_filter.filter(row.properties)
            response = await asyncio.to_thread(self.client.create_page, database_id, properties)
        except Exception as e:
            logger.warning(f"Failed to create row for {row.id}: {e}")
            return RowResult(
                source_id=row.id,
                success=False,
                error=str(e),
                error_type=type(e).__name__,
            )

        return RowResult(
            source_id=row.id,
            target_id=response.get("id"),
            success=True,
        )
