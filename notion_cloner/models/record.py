"""Row models for clone data."""

from dataclasses import dataclass
from typing import Any, Dict, List, Optional


@dataclass
class SourceRow:
    """A row read from the source database."""
    id: str
    properties: Dict[str, Any]

    @classmethod
    def from_page(cls, page: Dict[str, Any]) -> "SourceRow":
        """Build from a page object returned by a database query."""
        return cls(
            id=page["id"],
            properties=page.get("properties") or {},
        )

    @property
    def identity_key(self) -> Optional[str]:
        """
        Title text used to match this row with its clone.

        Taken from the first plain-text run of the title property. Not
        unique: two rows with the same title share a key.
        """
        for value in self.properties.values():
            if not isinstance(value, dict) or value.get("type") != "title":
                continue
            runs = value.get("title") or []
            if not runs:
                return None
            first = runs[0]
            text = first.get("plain_text")
            if text is None:
                text = (first.get("text") or {}).get("content")
            return text
        return None

    def relation_ids(self, name: str) -> List[str]:
        """IDs listed in a relation property, in order."""
        value = self.properties.get(name)
        if not isinstance(value, dict) or value.get("type") != "relation":
            return []
        return [item["id"] for item in value.get("relation") or [] if item.get("id")]


@dataclass
class RowResult:
    """Result of attempting to create a row in the target database."""
    source_id: str
    target_id: Optional[str] = None
    success: bool = False
    error: Optional[str] = None
    error_type: Optional[str] = None


@dataclass(frozen=True)
class HierarchyEdge:
    """Parent -> child pair between two source rows."""
    parent_id: str
    child_id: str
