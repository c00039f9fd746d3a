"""Clone orchestrator - coordinates the complete clone process."""

import asyncio
import logging
from datetime import datetime
from typing import Any, Dict, Optional

from .client import NotionClient, database_url
from .config import ClonerSettings
from .errors import ClonerError, CloneError
from .extractors.notion_extractor import NotionExtractor
from .loaders.notion_loader import NotionLoader
from .models.clone import (
    CloneOptions,
    CloneResult,
    CloneRun,
    CloneStatus,
    CloneStep,
    HierarchyResult,
)
from .models.schema import Schema
from .services.hierarchy import (
    HierarchyAnalyzer,
    HierarchyApplier,
    detect_hierarchy_fields,
    target_field_name,
)
from .services.schema_filter import SchemaFilter
from .services.validator import IdValidator

logger = logging.getLogger(__name__)


class CloneOrchestrator:
    """
    Orchestrates a database clone.

    Handles:
    - Identifier validation
    - Schema retrieval and filtering
    - Target database creation
    - Row extraction and batch replication
    - Optional parent/child relationship reconstruction
    - Progress tracking per phase

    Schema retrieval and database creation failures abort the clone.
    Row-level failures are counted and the clone still completes.
    """

    def __init__(
        self,
        client: NotionClient,
        settings: Optional[ClonerSettings] = None
    ):
        """
        Initialize the orchestrator.

        Args:
            client: API client shared by every component
            settings: Loaded settings (defaults when omitted)
        """
        self.client = client
        self.settings = settings or ClonerSettings()
        self.validator = IdValidator()
        self.schema_filter = SchemaFilter()
        self.extractor = NotionExtractor(client, page_size=self.settings.page_size)
        self.loader = NotionLoader(client, batch_size=self.settings.row_batch_size)
        self.analyzer = HierarchyAnalyzer(self.extractor)
        self.applier = HierarchyApplier(client, batch_size=self.settings.edge_batch_size)

    def run(
        self,
        source_database_id: str,
        parent_page_id: str,
        options: Optional[CloneOptions] = None
    ) -> CloneResult:
        """Blocking entry point for callers without an event loop."""
        return asyncio.run(self.clone_database(source_database_id, parent_page_id, options))

    async def clone_database(
        self,
        source_database_id: str,
        parent_page_id: str,
        options: Optional[CloneOptions] = None
    ) -> CloneResult:
        """
        Clone a database under a parent page.

        Args:
            source_database_id: Database to copy
            parent_page_id: Page to create the copy under
            options: New name and whether to restore the hierarchy

        Returns:
            CloneResult with the new database ID and row counts

        Raises:
            ValidationError: Malformed identifiers
            NotFoundError: Source database or parent page not found
            UnauthorizedError: Token rejected
            TransientFetchError: Row pagination interrupted
            CloneError: Any other remote failure while creating the database
        """
        options = options or CloneOptions()
        name = options.new_name or self.settings.new_database_name

        run = CloneRun(source_database_id=source_database_id, parent_page_id=parent_page_id)
        run.started_at = datetime.utcnow()

        try:
            # Phase 1: Validation
            logger.info("=== PHASE 1: VALIDATION ===")
            step = run.add_step("Validate identifiers", CloneStatus.VALIDATING)
            source_database_id = self.validator.validate(source_database_id, "sourceDatabaseId")
            parent_page_id = self.validator.validate(parent_page_id, "parentPageId")
            self._complete(step)

            # Phase 2: Schema
            logger.info("=== PHASE 2: SCHEMA ===")
            step = run.add_step("Create target database", CloneStatus.CREATING_SCHEMA)
            source_schema = await self._retrieve_schema(source_database_id)
            target_schema = self.schema_filter.filter(source_schema)
            step.records_processed = len(source_schema)
            step.records_succeeded = len(target_schema)
            step.records_skipped = len(source_schema) - len(target_schema)
            new_database_id = await self.loader.create_database(parent_page_id, name, target_schema)
            self._complete(step)

            # Phase 3: Extraction
            logger.info("=== PHASE 3: EXTRACTION ===")
            step = run.add_step("Extract source rows", CloneStatus.EXTRACTING)
            extraction = await self.extractor.extract(source_database_id)
            rows = extraction.rows
            step.records_processed = step.records_succeeded = len(rows)
            step.summary = extraction.to_dict()
            self._complete(step)

            # Phase 4: Replication
            logger.info("=== PHASE 4: REPLICATION ===")
            step = run.add_step("Replicate rows", CloneStatus.REPLICATING)
            load_result = await self.loader.load_all(new_database_id, rows)
            step.records_processed = load_result.total_attempted
            step.records_succeeded = load_result.total_succeeded
            step.records_failed = load_result.total_failed
            step.errors.extend(load_result.errors)
            step.summary = load_result.to_dict()
            self._complete(step)

        except Exception as e:
            logger.error(f"Clone failed: {e}")
            if run.steps:
                failed = run.steps[-1]
                failed.status = CloneStatus.FAILED
                failed.completed_at = datetime.utcnow()
                failed.errors.append({"error": str(e)})
            run.errors.append({
                "phase": run.status.value,
                "error": str(e),
                "timestamp": datetime.utcnow().isoformat(),
            })
            run.status = CloneStatus.FAILED
            run.completed_at = datetime.utcnow()
            raise

        result = CloneResult(
            new_database_id=new_database_id,
            new_database_url=database_url(new_database_id),
            database_name=name,
            copied_row_count=load_result.total_succeeded,
            failed_row_count=load_result.total_failed,
            run=run,
        )

        if options.restore_hierarchy:
            logger.info("=== PHASE 5: HIERARCHY ===")
            result.hierarchy = await self._restore_hierarchy(
                run,
                source_database_id,
                new_database_id,
                source_schema,
                target_schema,
                load_result.id_map,
            )

        run.status = CloneStatus.COMPLETED
        run.completed_at = datetime.utcnow()
        logger.info(
            f"=== CLONE COMPLETED: {result.copied_row_count} copied, "
            f"{result.failed_row_count} failed ==="
        )
        return result

    async def _retrieve_schema(self, database_id: str) -> Schema:
        try:
            database = await asyncio.to_thread(self.client.retrieve_database, database_id)
        except ClonerError:
            raise
        except Exception as e:
            raise CloneError("Failed to retrieve source database", str(e)) from e
        return database.get("properties") or {}

    async def _restore_hierarchy(
        self,
        run: CloneRun,
        source_database_id: str,
        target_database_id: str,
        source_schema: Schema,
        target_schema: Schema,
        created_ids: Dict[str, str]
    ) -> HierarchyResult:
        """Rebuild parent/child links; failures here never undo the clone."""
        step = run.add_step("Restore hierarchy", CloneStatus.RESTORING_HIERARCHY)
        fields = detect_hierarchy_fields(source_schema, source_database_id)

        if not fields:
            step.warnings.append("Source database has no recognised parent/child relation")
            logger.warning("Hierarchy restore requested but no self-referential relation was found")
            self._complete(step)
            return HierarchyResult()

        field_name = target_field_name(fields, target_schema)
        try:
            await self.applier.add_relation_field(target_database_id, field_name)
            analysis = await self.analyzer.analyze(
                source_database_id,
                target_database_id,
                fields,
                created_ids,
            )
            result = await self.applier.apply(analysis.edges, analysis.identity_map, field_name)
        except Exception as e:
            logger.error(f"Hierarchy restore failed: {e}")
            step.status = CloneStatus.FAILED
            step.errors.append({"error": str(e)})
            step.completed_at = datetime.utcnow()
            run.errors.append({
                "phase": CloneStatus.RESTORING_HIERARCHY.value,
                "error": str(e),
                "timestamp": datetime.utcnow().isoformat(),
            })
            return HierarchyResult(field_name=field_name)

        step.records_processed = result.edges_found
        step.records_succeeded = result.edges_applied
        step.records_failed = result.edges_failed
        step.records_skipped = result.edges_skipped
        self._complete(step)
        return result

    def _complete(self, step: CloneStep) -> None:
        step.status = CloneStatus.COMPLETED
        step.completed_at = datetime.utcnow()


async def clone_database(
    client: NotionClient,
    source_database_id: str,
    parent_page_id: str,
    options: Optional[CloneOptions] = None,
    settings: Optional[ClonerSettings] = None
) -> CloneResult:
    """Clone a database with a one-off orchestrator."""
    orchestrator = CloneOrchestrator(client, settings)
    return await orchestrator.clone_database(source_database_id, parent_page_id, options)


def summarize(result: CloneResult) -> Dict[str, Any]:
    """Compact summary used by the CLI and API."""
    return {
        "newDatabaseId": result.new_database_id,
        "newDatabaseUrl": result.new_database_url,
        "copiedRowCount": result.copied_row_count,
        "failedRowCount": result.failed_row_count,
        "message": result.message,
    }
