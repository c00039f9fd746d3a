"""Service layer for the cloner."""

from .validator import IdValidator, validate_id
from .schema_filter import SchemaFilter, filter_schema
from .property_filter import PropertyFilter, filter_properties
from .hierarchy import HierarchyAnalyzer, HierarchyApplier, detect_hierarchy_fields

__all__ = [
    "IdValidator",
    "validate_id",
    "SchemaFilter",
    "filter_schema",
    "PropertyFilter",
    "filter_properties",
    "HierarchyAnalyzer",
    "HierarchyApplier",
    "detect_hierarchy_fields",
]
