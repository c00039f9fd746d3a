"""Database duplicate endpoint."""

import logging
from typing import Optional

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from ...config import ClonerSettings
from ...errors import (
    ClonerError,
    ConfigError,
    NotFoundError,
    UnauthorizedError,
    ValidationError,
)
from ...models.clone import CloneOptions
from ...orchestrator import CloneOrchestrator, summarize
from ...services.validator import IdValidator
from ..dependencies import ClientFactory, get_client_factory, get_settings
from ..models import DuplicateRequest, DuplicateResponse, ErrorResponse

logger = logging.getLogger(__name__)

router = APIRouter()


def error_response(error: Exception, settings: ClonerSettings) -> JSONResponse:
    """Map an error to its HTTP status and body."""
    details = getattr(error, "details", None) or str(error)

    if isinstance(error, ValidationError):
        status, message = 400, "Bad request"
    elif isinstance(error, ConfigError):
        status, message = 500, "Server configuration error"
    elif isinstance(error, NotFoundError):
        status, message = 404, "Database or page not found. Check permissions and IDs."
        details = details if settings.is_development else None
    elif isinstance(error, UnauthorizedError):
        status, message = 401, "Unauthorized. Check Notion token and permissions."
        details = details if settings.is_development else None
    else:
        status, message = 500, "Failed to clone database"
        details = details if settings.is_development else None

    body = ErrorResponse(error=message, details=details)
    return JSONResponse(status_code=status, content=body.model_dump(exclude_none=True))


@router.post("", response_model=DuplicateResponse)
async def duplicate_database(
    body: Optional[DuplicateRequest] = None,
    settings: ClonerSettings = Depends(get_settings),
    client_factory: ClientFactory = Depends(get_client_factory),
):
    """Clone the requested (or configured) database under the parent page."""
    body = body or DuplicateRequest()

    try:
        validator = IdValidator()
        source_id = validator.validate(
            body.source_database_id or settings.source_database_id,
            "sourceDatabaseId",
        )
        parent_id = validator.validate(
            body.parent_page_id or settings.parent_page_id,
            "parentPageId",
        )

        settings.require_token()
        orchestrator = CloneOrchestrator(client_factory(settings), settings)
        result = await orchestrator.clone_database(
            source_id,
            parent_id,
            CloneOptions(
                new_name=body.new_name,
                restore_hierarchy=body.restore_hierarchy,
            ),
        )

    except ClonerError as e:
        logger.error(f"Error cloning database: {e}")
        return error_response(e, settings)
    except Exception as e:
        logger.exception("Unexpected error cloning database")
        return error_response(e, settings)

    return DuplicateResponse(success=True, **summarize(result))
