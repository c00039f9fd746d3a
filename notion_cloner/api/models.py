"""Pydantic models for API requests and responses."""

from typing import Optional
from pydantic import BaseModel, ConfigDict, Field


# Request Models
class DuplicateRequest(BaseModel):
    """Body of a duplicate request; omitted IDs fall back to the configured defaults."""
    model_config = ConfigDict(populate_by_name=True)

    source_database_id: Optional[str] = Field(default=None, alias="sourceDatabaseId")
    parent_page_id: Optional[str] = Field(default=None, alias="parentPageId")
    new_name: Optional[str] = Field(default=None, alias="newName")
    restore_hierarchy: bool = Field(default=False, alias="restoreHierarchy")


# Response Models
class DuplicateResponse(BaseModel):
    success: bool = True
    newDatabaseId: str
    newDatabaseUrl: str
    copiedRowCount: int = 0
    failedRowCount: int = 0
    message: str


class ErrorResponse(BaseModel):
    error: str
    message: Optional[str] = None
    details: Optional[str] = None


class HealthResponse(BaseModel):
    status: str  # "healthy" or "unhealthy"
    timestamp: str
    version: str
    hasToken: bool
    hasSourceDatabaseId: bool
    hasParentPageId: bool
