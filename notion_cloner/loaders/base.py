"""Base loader interface for target databases."""

import asyncio
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, Iterator, List, Optional, Sequence

from ..models.record import RowResult, SourceRow

logger = logging.getLogger(__name__)


@dataclass
class LoadResult:
    """Result of a load operation."""
    database_id: str
    total_attempted: int = 0
    total_succeeded: int = 0
    total_failed: int = 0
    batches: int = 0
    errors: List[Dict[str, Any]] = field(default_factory=list)
    id_map: Dict[str, str] = field(default_factory=dict)  # source row ID -> created row ID
    started_at: Optional[datetime] = None
    completed_at: Optional[datetime] = None

    @property
    def duration_seconds(self) -> Optional[float]:
        if self.started_at and self.completed_at:
            return (self.completed_at - self.started_at).total_seconds()
        return None

    @property
    def success_rate(self) -> float:
        if self.total_attempted == 0:
            return 0.0
        return self.total_succeeded / self.total_attempted

    def record(self, result: RowResult) -> None:
        """Account for one settled row."""
        self.total_attempted += 1

        if result.success:
            self.total_succeeded += 1
            if result.target_id:
                self.id_map[result.source_id] = result.target_id
        else:
            self.total_failed += 1
            self.errors.append({
                "record_id": result.source_id,
                "error": result.error,
                "error_type": result.error_type,
            })

    def to_dict(self) -> Dict[str, Any]:
        return {
            "database_id": self.database_id,
            "total_attempted": self.total_attempted,
            "total_succeeded": self.total_succeeded,
            "total_failed": self.total_failed,
            "batches": self.batches,
            "success_rate": self.success_rate,
            "started_at": self.started_at.isoformat() if self.started_at else None,
            "completed_at": self.completed_at.isoformat() if self.completed_at else None,
            "duration_seconds": self.duration_seconds,
        }


def batch_iterator(items: Sequence[Any], batch_size: int) -> Iterator[Sequence[Any]]:
    """Iterate over items in consecutive batches."""
    for i in range(0, len(items), batch_size):
        yield items[i:i + batch_size]


class BaseLoader(ABC):
    """
    Base class for row loaders.

    Rows are loaded in fixed-size batches. Batches run strictly one after
    another; inside a batch every row is created concurrently and the batch
    completes only once all of them have settled. A failed row is recorded
    and never retried, and it does not cancel its siblings.
    """

    def __init__(self, batch_size: int = 10):
        """
        Initialize the loader.

        Args:
            batch_size: Rows created concurrently per batch
        """
        if batch_size < 1:
            raise ValueError("batch_size must be at least 1")
        self.batch_size = batch_size

    @abstractmethod
    async def load_row(self, database_id: str, row: SourceRow) -> RowResult:
        """
        Create a single row in the target database.

        Args:
            database_id: Target database
            row: Source row to copy

        Returns:
            RowResult indicating success/failure
        """
        pass

    async def load_batch(self, database_id: str, rows: Sequence[SourceRow]) -> List[RowResult]:
        """Create a batch of rows concurrently and wait for all of them to settle."""
        settled = await asyncio.gather(
            *(self.load_row(database_id, row) for row in rows),
            return_exceptions=True,
        )

        results = []
        for row, outcome in zip(rows, settled):
            if isinstance(outcome, BaseException):
                logger.error(f"Failed to load row {row.id}: {outcome}")
                outcome = RowResult(
                    source_id=row.id,
                    success=False,
                    error=str(outcome),
                    error_type=type(outcome).__name__,
                )
            results.append(outcome)
        return results

    async def load_all(self, database_id: str, rows: Sequence[SourceRow]) -> LoadResult:
        """
        Load every row, batch by batch.

        Args:
            database_id: Target database
            rows: Rows in the order they should be created

        Returns:
            LoadResult with counts and the source -> target ID map
        """
        result = LoadResult(database_id=database_id, started_at=datetime.utcnow())
        logger.info(f"Loading {len(rows)} rows in batches of {self.batch_size}...")

        for batch in batch_iterator(rows, self.batch_size):
            result.batches += 1
            for row_result in await self.load_batch(database_id, batch):
                result.record(row_result)

            logger.debug(
                f"Batch {result.batches}: {result.total_succeeded}/{result.total_attempted} succeeded so far"
            )

        result.completed_at = datetime.utcnow()
        logger.info(f"Loaded {result.total_succeeded}/{result.total_attempted} rows")
        return result
