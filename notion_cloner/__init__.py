"""
Notion Database Cloner

Clones a Notion database (schema plus rows) under another parent page,
dropping properties whose semantics cannot be reproduced in the copy.

Supports:
- Schema filtering (relations, rollups) with renamed/repositioned properties
- Cursor-based extraction of every row in the source database
- Bounded-concurrency batch replication with partial-failure accounting
- Optional reconstruction of parent/child (sub-item) relationships
"""

__version__ = "2.0.0"
