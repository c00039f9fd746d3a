"""Base extractor interface."""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, AsyncIterator, Dict, List, Optional
import logging

from ..errors import TransientFetchError
from ..models.record import SourceRow

logger = logging.getLogger(__name__)


@dataclass
class Page:
    """One page of rows returned by the service."""
    rows: List[SourceRow]
    has_more: bool = False
    next_cursor: Optional[str] = None


@dataclass
class ExtractionResult:
    """Result of reading every row of a database."""
    database_id: str
    rows: List[SourceRow] = field(default_factory=list)
    pages_fetched: int = 0
    started_at: Optional[datetime] = None
    completed_at: Optional[datetime] = None

    @property
    def total_extracted(self) -> int:
        return len(self.rows)

    @property
    def duration_seconds(self) -> Optional[float]:
        """Get duration in seconds."""
        if self.started_at and self.completed_at:
            return (self.completed_at - self.started_at).total_seconds()
        return None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary representation."""
        return {
            "database_id": self.database_id,
            "total_extracted": self.total_extracted,
            "pages_fetched": self.pages_fetched,
            "started_at": self.started_at.isoformat() if self.started_at else None,
            "completed_at": self.completed_at.isoformat() if self.completed_at else None,
            "duration_seconds": self.duration_seconds,
        }


class BaseExtractor(ABC):
    """
    Base class for cursor-paginated extractors.

    Subclasses fetch a single page; this class walks the cursor chain and
    collects every row in page order. Any failure aborts the walk and is
    raised as TransientFetchError. Nothing is retried here.
    """

    @abstractmethod
    async def fetch_page(self, database_id: str, cursor: Optional[str] = None) -> Page:
        """
        Fetch one page of rows.

        Args:
            database_id: Database to read
            cursor: Continuation cursor; None for the first page

        Returns:
            The page, with its continuation state
        """
        pass

    async def stream(self, database_id: str) -> AsyncIterator[Page]:
        """
        Yield pages until the service reports none remain.

        Raises:
            TransientFetchError: If any page request fails
        """
        cursor: Optional[str] = None

        while True:
            try:
                page = await self.fetch_page(database_id, cursor)
            except TransientFetchError:
                raise
            except Exception as e:
                raise TransientFetchError(f"Fetching rows of {database_id} failed", str(e)) from e

            yield page

            if not page.has_more:
                break
            if not page.next_cursor:
                raise TransientFetchError(
                    f"Fetching rows of {database_id} failed",
                    "service reported more pages without a continuation cursor",
                )
            cursor = page.next_cursor

    async def extract(self, database_id: str) -> ExtractionResult:
        """Read every row of a database into one ordered sequence."""
        result = ExtractionResult(database_id=database_id, started_at=datetime.utcnow())

        async for page in self.stream(database_id):
            result.rows.extend(page.rows)
            result.pages_fetched += 1

        result.completed_at = datetime.utcnow()
        logger.info(
            f"Extracted {result.total_extracted} rows from {database_id} "
            f"in {result.pages_fetched} page(s)"
        )
        return result
