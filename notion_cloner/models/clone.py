"""Clone execution models."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional
import uuid


class CloneStatus(str, Enum):
    """Status of a clone run."""
    PENDING = "pending"
    VALIDATING = "validating"
    CREATING_SCHEMA = "creating_schema"
    EXTRACTING = "extracting"
    REPLICATING = "replicating"
    RESTORING_HIERARCHY = "restoring_hierarchy"
    COMPLETED = "completed"
    FAILED = "failed"


@dataclass
class CloneOptions:
    """Per-call options for a clone."""
    new_name: Optional[str] = None
    restore_hierarchy: bool = False


@dataclass
class CloneStep:
    """A single phase of a clone run."""
    id: str = field(default_factory=lambda: str(uuid.uuid4()))
    name: str = ""
    status: CloneStatus = CloneStatus.PENDING
    started_at: Optional[datetime] = None
    completed_at: Optional[datetime] = None
    records_processed: int = 0
    records_succeeded: int = 0
    records_failed: int = 0
    records_skipped: int = 0
    errors: List[Dict[str, Any]] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)
    summary: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary representation."""
        return {
            "id": self.id,
            "name": self.name,
            "status": self.status.value,
            "started_at": self.started_at.isoformat() if self.started_at else None,
            "completed_at": self.completed_at.isoformat() if self.completed_at else None,
            "records_processed": self.records_processed,
            "records_succeeded": self.records_succeeded,
            "records_failed": self.records_failed,
            "records_skipped": self.records_skipped,
            "errors": self.errors,
            "warnings": self.warnings,
            "summary": self.summary,
        }

    @property
    def duration_seconds(self) -> Optional[float]:
        """Get duration in seconds."""
        if self.started_at and self.completed_at:
            return (self.completed_at - self.started_at).total_seconds()
        return None


@dataclass
class CloneRun:
    """Progress record of one clone operation."""
    id: str = field(default_factory=lambda: str(uuid.uuid4()))
    source_database_id: str = ""
    parent_page_id: str = ""
    status: CloneStatus = CloneStatus.PENDING

    created_at: datetime = field(default_factory=datetime.utcnow)
    started_at: Optional[datetime] = None
    completed_at: Optional[datetime] = None

    steps: List[CloneStep] = field(default_factory=list)
    current_step: Optional[str] = None
    errors: List[Dict[str, Any]] = field(default_factory=list)

    def add_step(self, name: str, status: CloneStatus) -> CloneStep:
        """Add a new step and mark it started."""
        step = CloneStep(name=name, status=status, started_at=datetime.utcnow())
        self.steps.append(step)
        self.current_step = step.id
        self.status = status
        return step

    @property
    def duration_seconds(self) -> Optional[float]:
        """Get duration in seconds."""
        if self.started_at and self.completed_at:
            return (self.completed_at - self.started_at).total_seconds()
        return None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary representation."""
        return {
            "id": self.id,
            "source_database_id": self.source_database_id,
            "parent_page_id": self.parent_page_id,
            "status": self.status.value,
            "created_at": self.created_at.isoformat(),
            "started_at": self.started_at.isoformat() if self.started_at else None,
            "completed_at": self.completed_at.isoformat() if self.completed_at else None,
            "duration_seconds": self.duration_seconds,
            "steps": [s.to_dict() for s in self.steps],
            "current_step": self.current_step,
            "errors": self.errors,
        }


@dataclass
class HierarchyResult:
    """Outcome of relationship reconstruction."""
    field_name: Optional[str] = None
    edges_found: int = 0
    edges_applied: int = 0
    edges_skipped: int = 0
    edges_failed: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "field_name": self.field_name,
            "edges_found": self.edges_found,
            "edges_applied": self.edges_applied,
            "edges_skipped": self.edges_skipped,
            "edges_failed": self.edges_failed,
        }


@dataclass
class CloneResult:
    """What a finished clone reports back to its caller."""
    new_database_id: str
    new_database_url: str
    database_name: str
    copied_row_count: int = 0
    failed_row_count: int = 0
    hierarchy: Optional[HierarchyResult] = None
    run: Optional[CloneRun] = None

    @property
    def message(self) -> str:
        return f'Database "{self.database_name}" successfully cloned!'

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary representation."""
        return {
            "new_database_id": self.new_database_id,
            "new_database_url": self.new_database_url,
            "database_name": self.database_name,
            "copied_row_count": self.copied_row_count,
            "failed_row_count": self.failed_row_count,
            "message": self.message,
            "hierarchy": self.hierarchy.to_dict() if self.hierarchy else None,
            "run": self.run.to_dict() if self.run else None,
        }
