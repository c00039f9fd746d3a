"""Row loaders for target databases."""

from .base import BaseLoader, LoadResult
from .notion_loader import NotionLoader

__all__ = [
    "BaseLoader",
    "LoadResult",
    "NotionLoader",
]
