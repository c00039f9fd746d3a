"""Row extractors for source databases."""

from .base import BaseExtractor, ExtractionResult, Page
from .notion_extractor import NotionExtractor

__all__ = [
    "BaseExtractor",
    "ExtractionResult",
    "Page",
    "NotionExtractor",
]
