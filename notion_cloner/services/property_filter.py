"""Row property filtering for page creation."""

import logging
from typing import Any, Dict

from ..models.schema import ROW_DROP_KINDS, target_name
from .schema_filter import property_kind

logger = logging.getLogger(__name__)


class PropertyFilter:
    """
    Filter for row property values.

    Drops values the service computes or maintains (relation, rollup,
    formula, created/last-edited by/time), renames properties covered by
    the rename table and passes every other value through unchanged.
    Filtering is driven by each value's own `type`.
    """

    def filter(self, properties: Dict[str, Any]) -> Dict[str, Any]:
        """
        Produce property values safe to send when creating a row.

        Args:
            properties: Property name -> value for one source row

        Returns:
            New mapping; empty input yields an empty mapping
        """
        filtered: Dict[str, Any] = {}

        for name, value in properties.items():
            kind = property_kind(name, value)
            if kind in ROW_DROP_KINDS:
                continue
            filtered[target_name(name)] = value

        return filtered


def filter_properties(properties: Dict[str, Any]) -> Dict[str, Any]:
    """Filter row properties with the default rules."""
    return PropertyFilter().filter(properties)
