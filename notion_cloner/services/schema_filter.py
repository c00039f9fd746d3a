"""Schema filtering: turns a source database schema into one safe to create elsewhere."""

import copy
import logging
from typing import Any, Dict, List, Tuple

from ..errors import ValidationError
from ..models.schema import (
    DONE_OPTION,
    FieldKind,
    RenameRule,
    SCHEMA_DROP_KINDS,
    Schema,
    rename_rule,
)

logger = logging.getLogger(__name__)


def property_kind(name: str, definition: Any) -> str:
    """Return the `type` discriminator of a property, failing fast when absent."""
    if not isinstance(definition, dict) or not definition.get("type"):
        raise ValidationError("Malformed schema", f"Property {name!r} has no type")
    return definition["type"]


class SchemaFilter:
    """
    Filter for database schemas.

    Rules, applied per property in source order:
    - relation and rollup properties are dropped
    - properties in the rename table get their prefix and are moved to the
      front (prefixes sorting before letters) or the back of the schema
    - everything else passes through unchanged
    - single-select options named "Done" (any case) are moved first
    """

    def filter(self, schema: Schema) -> Schema:
        """
        Produce the target-safe schema.

        Args:
            schema: Property name -> definition, as returned by the service

        Returns:
            New schema; the input is not modified
        """
        passthrough: List[Tuple[str, Dict[str, Any]]] = []
        leading: List[Tuple[str, Dict[str, Any]]] = []
        trailing: List[Tuple[str, Dict[str, Any]]] = []

        for name, definition in schema.items():
            kind = property_kind(name, definition)

            if kind in SCHEMA_DROP_KINDS:
                logger.info(f"Skipping {kind} property in schema: {name}")
                continue

            definition = self._reorder_done_option(name, copy.deepcopy(definition))

            rule = rename_rule(name)
            if rule:
                renamed = self._rename(rule, definition)
                (leading if rule.leading else trailing).append(renamed)
                continue

            passthrough.append((name, definition))

        return dict(leading + passthrough + trailing)

    def _rename(self, rule: RenameRule, definition: Dict[str, Any]) -> Tuple[str, Dict[str, Any]]:
        logger.info(f"Renaming property {rule.source_name!r} to {rule.target_name!r}")
        if "name" in definition:
            definition["name"] = rule.target_name
        return rule.target_name, definition

    def _reorder_done_option(self, name: str, definition: Dict[str, Any]) -> Dict[str, Any]:
        """Move the "Done" option of a single-select to the front of its option list."""
        if definition.get("type") != FieldKind.SELECT.value:
            return definition

        config = definition.get(FieldKind.SELECT.value) or {}
        options = config.get("options") or []

        for index, option in enumerate(options):
            if str(option.get("name", "")).lower() == DONE_OPTION:
                if index > 0:
                    logger.debug(f"Moving option {option.get('name')!r} first in {name!r}")
                    config["options"] = [option] + options[:index] + options[index + 1:]
                break

        return definition


def filter_schema(schema: Schema) -> Schema:
    """Filter a schema with the default rules."""
    return SchemaFilter().filter(schema)
