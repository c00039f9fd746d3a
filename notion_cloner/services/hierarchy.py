"""Reconstruction of parent/child relationships between cloned rows."""

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional, Sequence

from ..client import NotionClient
from ..extractors.notion_extractor import NotionExtractor
from ..models.clone import HierarchyResult
from ..models.record import HierarchyEdge, SourceRow
from ..models.schema import (
    DEFAULT_CHILDREN_FIELD,
    FieldKind,
    HierarchyRole,
    Schema,
    hierarchy_role,
    normalize_id,
)

logger = logging.getLogger(__name__)


def detect_hierarchy_fields(schema: Schema, database_id: str) -> Dict[str, HierarchyRole]:
    """
    Find self-referential relation properties with a recognised name.

    Args:
        schema: Source database schema
        database_id: ID of the database the schema belongs to

    Returns:
        Property name -> role, in schema order; empty when the feature does not apply
    """
    fields: Dict[str, HierarchyRole] = {}
    own_id = normalize_id(database_id)

    for name, definition in schema.items():
        if not isinstance(definition, dict) or definition.get("type") != FieldKind.RELATION.value:
            continue
        related = (definition.get(FieldKind.RELATION.value) or {}).get("database_id") or ""
        if normalize_id(related) != own_id:
            continue
        role = hierarchy_role(name)
        if role:
            fields[name] = role

    return fields


def target_field_name(fields: Dict[str, HierarchyRole], existing: Iterable[str] = ()) -> str:
    """
    Name of the relation added to the clone.

    The source's children property name when it has one, otherwise
    DEFAULT_CHILDREN_FIELD. A numeric suffix is added while the name is
    already used by a property of the cloned schema.
    """
    base = DEFAULT_CHILDREN_FIELD
    for name, role in fields.items():
        if role == HierarchyRole.CHILDREN:
            base = name
            break

    taken = set(existing)
    name = base
    suffix = 2
    while name in taken:
        name = f"{base} {suffix}"
        suffix += 1
    return name


@dataclass
class HierarchyAnalysis:
    """Edges between source rows plus the source -> target row ID map."""
    edges: List[HierarchyEdge] = field(default_factory=list)
    identity_map: Dict[str, str] = field(default_factory=dict)
    matched_by_title: int = 0
    unmatched: List[str] = field(default_factory=list)


class HierarchyAnalyzer:
    """
    Discovers parent -> child edges in the source database.

    Source rows are re-fetched in full. Rows created during replication are
    mapped through the creation-time ID pairs; any source row without a
    pair is matched to a target row by title text, which is a heuristic:
    same-titled rows are paired in query order and each target row is
    used at most once.
    """

    def __init__(self, extractor: NotionExtractor):
        self.extractor = extractor

    async def analyze(
        self,
        source_database_id: str,
        target_database_id: str,
        fields: Dict[str, HierarchyRole],
        created_ids: Optional[Dict[str, str]] = None
    ) -> HierarchyAnalysis:
        """
        Build the edge list and identity map.

        Args:
            source_database_id: Database the rows were copied from
            target_database_id: Database the rows were copied to
            fields: Recognised hierarchy properties of the source schema
            created_ids: Source row ID -> created row ID pairs from replication

        Returns:
            HierarchyAnalysis
        """
        analysis = HierarchyAnalysis(identity_map=dict(created_ids or {}))
        source_rows = await self.extractor.fetch_all(source_database_id)

        unmapped = [row for row in source_rows if row.id not in analysis.identity_map]
        if unmapped:
            target_rows = await self.extractor.fetch_all(target_database_id)
            self._match_by_title(analysis, unmapped, target_rows)

        analysis.edges = self._collect_edges(source_rows, fields)
        logger.info(
            f"Found {len(analysis.edges)} hierarchy edges; "
            f"{len(analysis.identity_map)} rows mapped ({analysis.matched_by_title} by title)"
        )
        return analysis

    def _match_by_title(
        self,
        analysis: HierarchyAnalysis,
        unmapped: Sequence[SourceRow],
        target_rows: Sequence[SourceRow]
    ) -> None:
        taken = set(analysis.identity_map.values())
        by_title: Dict[str, List[str]] = {}
        for row in target_rows:
            key = row.identity_key
            if key is None or row.id in taken:
                continue
            by_title.setdefault(key, []).append(row.id)

        for row in unmapped:
            candidates = by_title.get(row.identity_key) if row.identity_key is not None else None
            target_id = candidates.pop(0) if candidates else None
            if target_id:
                analysis.identity_map[row.id] = target_id
                analysis.matched_by_title += 1
            else:
                analysis.unmatched.append(row.id)

    def _collect_edges(
        self,
        rows: Sequence[SourceRow],
        fields: Dict[str, HierarchyRole]
    ) -> List[HierarchyEdge]:
        edges: Dict[HierarchyEdge, None] = {}

        for row in rows:
            for name, role in fields.items():
                for related_id in row.relation_ids(name):
                    if role == HierarchyRole.CHILDREN:
                        edge = HierarchyEdge(parent_id=row.id, child_id=related_id)
                    else:
                        edge = HierarchyEdge(parent_id=related_id, child_id=row.id)
                    edges[edge] = None

        # A two-way relation lists every edge from both ends; keep one copy.
        return list(edges)


def partition_edges(edges: Sequence[HierarchyEdge], batch_size: int) -> List[List[HierarchyEdge]]:
    """
    Split edges into batches whose parents are all distinct.

    An edge whose parent is already in the current batch waits for a later
    one, so no row is read and rewritten by two requests at once.
    """
    pending = list(edges)
    batches: List[List[HierarchyEdge]] = []

    while pending:
        batch: List[HierarchyEdge] = []
        parents = set()
        deferred: List[HierarchyEdge] = []

        for edge in pending:
            if len(batch) < batch_size and edge.parent_id not in parents:
                batch.append(edge)
                parents.add(edge.parent_id)
            else:
                deferred.append(edge)

        batches.append(batch)
        pending = deferred

    return batches


class HierarchyApplier:
    """
    Replays parent -> child edges onto the cloned rows.

    For each edge the parent's relation value is read, the child appended
    (existing entries are not deduplicated) and the list written back.
    Edges run in concurrent batches, batches run in sequence, and a failed
    or unmappable edge is logged without stopping the others.
    """

    def __init__(self, client: NotionClient, batch_size: int = 5):
        """
        Initialize the applier.

        Args:
            client: Configured API client
            batch_size: Edges applied concurrently per batch
        """
        if batch_size < 1:
            raise ValueError("batch_size must be at least 1")
        self.client = client
        self.batch_size = batch_size

    async def add_relation_field(self, database_id: str, field_name: str) -> None:
        """Add a relation property pointing at the database itself."""
        await asyncio.to_thread(
            self.client.update_database,
            database_id,
            {
                field_name: {
                    "relation": {
                        "database_id": database_id,
                        "single_property": {},
                    }
                }
            },
        )
        logger.info(f"Added self-relation {field_name!r} to {database_id}")

    async def apply(
        self,
        edges: Sequence[HierarchyEdge],
        identity_map: Dict[str, str],
        field_name: str
    ) -> HierarchyResult:
        """
        Apply edges to the target rows.

        Args:
            edges: Parent -> child edges between source rows
            identity_map: Source row ID -> target row ID
            field_name: Relation property on the target holding children

        Returns:
            HierarchyResult with applied/skipped/failed counts
        """
        result = HierarchyResult(field_name=field_name, edges_found=len(edges))
        translated: List[HierarchyEdge] = []

        for edge in edges:
            parent = identity_map.get(edge.parent_id)
            child = identity_map.get(edge.child_id)
            if not parent or not child:
                logger.info(f"Skipping edge {edge.parent_id} -> {edge.child_id}: row not mapped")
                result.edges_skipped += 1
                continue
            translated.append(HierarchyEdge(parent_id=parent, child_id=child))

        for batch in partition_edges(translated, self.batch_size):
            settled = await asyncio.gather(
                *(self._append_child(edge, field_name) for edge in batch),
                return_exceptions=True,
            )
            for edge, outcome in zip(batch, settled):
                if isinstance(outcome, BaseException):
                    logger.error(f"Failed to link {edge.child_id} under {edge.parent_id}: {outcome}")
                    result.edges_failed += 1
                else:
                    result.edges_applied += 1

        logger.info(
            f"Applied {result.edges_applied}/{result.edges_found} hierarchy edges "
            f"({result.edges_skipped} skipped, {result.edges_failed} failed)"
        )
        return result

    async def _append_child(self, edge: HierarchyEdge, field_name: str) -> None:
        page = await asyncio.to_thread(self.client.retrieve_page, edge.parent_id)
        value: Dict[str, Any] = (page.get("properties") or {}).get(field_name) or {}
        current = [{"id": item["id"]} for item in value.get("relation") or [] if item.get("id")]
        current.append({"id": edge.child_id})

        await asyncio.to_thread(
            self.client.update_page,
            edge.parent_id,
            {field_name: {"relation": current}},
        )
