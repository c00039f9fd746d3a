"""Property kinds and the static tables that drive schema filtering."""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, FrozenSet, Optional

# Property name -> definition, in display order.
Schema = Dict[str, Dict[str, Any]]


class FieldKind(str, Enum):
    """Property kinds used by the cloner (the `type` discriminator)."""
    TITLE = "title"
    RICH_TEXT = "rich_text"
    NUMBER = "number"
    SELECT = "select"
    MULTI_SELECT = "multi_select"
    STATUS = "status"
    CHECKBOX = "checkbox"
    DATE = "date"
    URL = "url"
    EMAIL = "email"
    PHONE_NUMBER = "phone_number"
    PEOPLE = "people"
    FILES = "files"
    RELATION = "relation"
    ROLLUP = "rollup"
    FORMULA = "formula"
    CREATED_BY = "created_by"
    LAST_EDITED_BY = "last_edited_by"
    CREATED_TIME = "created_time"
    LAST_EDITED_TIME = "last_edited_time"


# Kinds that reference other databases; never part of a cloned schema.
SCHEMA_DROP_KINDS: FrozenSet[str] = frozenset({
    FieldKind.RELATION.value,
    FieldKind.ROLLUP.value,
})

# Kinds the service computes or maintains; never settable on a new row.
ROW_DROP_KINDS: FrozenSet[str] = frozenset({
    FieldKind.RELATION.value,
    FieldKind.ROLLUP.value,
    FieldKind.FORMULA.value,
    FieldKind.CREATED_BY.value,
    FieldKind.LAST_EDITED_BY.value,
    FieldKind.CREATED_TIME.value,
    FieldKind.LAST_EDITED_TIME.value,
})

# Property name -> prefix added in the cloned database.
RENAME_PREFIXES: Dict[str, str] = {
    "Done": "1. ",
    "Last Edited By": "z. ",
}

DONE_OPTION = "done"


@dataclass(frozen=True)
class RenameRule:
    """A property that is renamed with a prefix and moved to one end of the schema."""
    source_name: str
    prefix: str

    @property
    def target_name(self) -> str:
        return f"{self.prefix}{self.source_name}"

    @property
    def leading(self) -> bool:
        """Prefixes that sort before letters go in front of the other properties."""
        return self.prefix.lower() < "a"


def rename_rule(name: str) -> Optional[RenameRule]:
    """Get the rename rule for a property name, if any."""
    prefix = RENAME_PREFIXES.get(name)
    if prefix is None:
        return None
    return RenameRule(source_name=name, prefix=prefix)


def target_name(name: str) -> str:
    """Name a source property gets in the cloned database."""
    rule = rename_rule(name)
    return rule.target_name if rule else name


# Self-referential relation names recognised for hierarchy reconstruction.
CHILDREN_FIELD_NAMES: FrozenSet[str] = frozenset({
    "sub-item",
    "sub-items",
    "subitems",
    "children",
    "child items",
    "sub-tasks",
    "subtasks",
})

PARENT_FIELD_NAMES: FrozenSet[str] = frozenset({
    "parent item",
    "parent",
    "parent task",
})

DEFAULT_CHILDREN_FIELD = "Sub-items"


class HierarchyRole(str, Enum):
    """Direction a recognised relation points in."""
    CHILDREN = "children"
    PARENT = "parent"


def hierarchy_role(name: str) -> Optional[HierarchyRole]:
    """Classify a property name against the hierarchy tables."""
    key = name.strip().lower()
    if key in CHILDREN_FIELD_NAMES:
        return HierarchyRole.CHILDREN
    if key in PARENT_FIELD_NAMES:
        return HierarchyRole.PARENT
    return None


def normalize_id(identifier: str) -> str:
    """Strip hyphens and lowercase an identifier for comparison."""
    return identifier.replace("-", "").lower()
