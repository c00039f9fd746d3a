"""Command line interface for the cloner."""

import argparse
import json
import logging
import sys
from typing import List, Optional

from .client import NotionClient
from .config import ClonerSettings
from .errors import ClonerError
from .models.clone import CloneOptions
from .orchestrator import CloneOrchestrator, summarize
from .services.schema_filter import SchemaFilter
from .services.validator import IdValidator

logger = logging.getLogger(__name__)


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for the CLI."""
    parser = argparse.ArgumentParser(
        description="Notion Database Cloner - Copy a database's schema and rows under another page"
    )

    subparsers = parser.add_subparsers(dest="command", help="Commands")

    # Clone a database
    clone_parser = subparsers.add_parser("clone", help="Clone a database")
    clone_parser.add_argument("--source", help="Source database ID (default: SOURCE_DATABASE_ID)")
    clone_parser.add_argument("--parent", help="Parent page ID (default: PARENT_PAGE_ID)")
    clone_parser.add_argument("--name", help="Title of the new database (default: NEW_DATABASE_NAME)")
    clone_parser.add_argument(
        "--restore-hierarchy",
        action="store_true",
        help="Rebuild parent/child links after copying rows",
    )
    clone_parser.add_argument("--json", action="store_true", help="Print the full result as JSON")
    clone_parser.add_argument("--verbose", "-v", action="store_true", help="Verbose output")

    # Validate an ID
    validate_parser = subparsers.add_parser("validate-id", help="Check an ID's format")
    validate_parser.add_argument("id", help="Database or page ID")

    # Preview schema filtering
    schema_parser = subparsers.add_parser("filter-schema", help="Preview the filtered schema")
    schema_parser.add_argument("--input", required=True, help="Path to a database JSON file")

    args = parser.parse_args(argv)

    log_level = logging.DEBUG if getattr(args, "verbose", False) else logging.INFO
    logging.basicConfig(
        level=log_level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )

    if args.command == "clone":
        return run_clone(args)
    elif args.command == "validate-id":
        return run_validate_id(args)
    elif args.command == "filter-schema":
        return run_filter_schema(args)

    parser.print_help()
    return 2


def run_clone(args) -> int:
    """Clone a database using environment configuration."""
    try:
        settings = ClonerSettings.from_env()
        source = args.source or settings.source_database_id
        parent = args.parent or settings.parent_page_id

        client = NotionClient.from_settings(settings)
        orchestrator = CloneOrchestrator(client, settings)
        result = orchestrator.run(
            source,
            parent,
            CloneOptions(new_name=args.name, restore_hierarchy=args.restore_hierarchy),
        )
    except ClonerError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    if args.json:
        print(json.dumps(result.to_dict(), indent=2, default=str))
        return 0

    summary = summarize(result)
    print("\n" + "=" * 60)
    print("CLONE COMPLETE")
    print("=" * 60)
    print(summary["message"])
    print(f"Database ID: {summary['newDatabaseId']}")
    print(f"URL: {summary['newDatabaseUrl']}")
    print(f"Rows copied: {summary['copiedRowCount']}")
    print(f"Rows failed: {summary['failedRowCount']}")
    if result.hierarchy:
        print(
            f"Hierarchy edges applied: {result.hierarchy.edges_applied}/{result.hierarchy.edges_found}"
        )
    if result.run and result.run.duration_seconds:
        print(f"Duration: {result.run.duration_seconds:.2f} seconds")
    return 0


def run_validate_id(args) -> int:
    """Validate a single ID."""
    try:
        IdValidator().validate(args.id, "id")
    except ClonerError as e:
        print(e.details or e.message)
        return 1
    print(f"{args.id} is a valid Notion ID")
    return 0


def run_filter_schema(args) -> int:
    """Print the schema a clone of the given database would be created with."""
    with open(args.input) as f:
        data = json.load(f)

    schema = data.get("properties", data) if isinstance(data, dict) else {}
    try:
        filtered = SchemaFilter().filter(schema)
    except ClonerError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    print(json.dumps(filtered, indent=2))
    return 0


if __name__ == "__main__":
    sys.exit(main())
