"""Health check endpoint."""

from datetime import datetime, timezone

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from ... import __version__
from ...config import ClonerSettings
from ..dependencies import get_settings
from ..models import HealthResponse

router = APIRouter()


@router.get("", response_model=HealthResponse)
async def health_check(settings: ClonerSettings = Depends(get_settings)):
    """Report whether the required configuration is present."""
    has_token = bool(settings.notion_token)
    has_source = bool(settings.source_database_id)
    has_parent = bool(settings.parent_page_id)
    healthy = has_token and has_source and has_parent

    body = HealthResponse(
        status="healthy" if healthy else "unhealthy",
        timestamp=datetime.now(timezone.utc).isoformat(),
        version=__version__,
        hasToken=has_token,
        hasSourceDatabaseId=has_source,
        hasParentPageId=has_parent,
    )
    return JSONResponse(status_code=200 if healthy else 503, content=body.model_dump())
