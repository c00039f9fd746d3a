"""FastAPI application entry point."""

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from .. import __version__
from ..config import ClonerSettings
from ..errors import ClonerError
from .models import ErrorResponse
from .routes import duplicate, health
from .routes.duplicate import error_response

app = FastAPI(
    title="Notion Database Cloner API",
    description="Clone a Notion database under another page",
    version=__version__,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["Content-Type", "Authorization"],
)

app.include_router(duplicate.router, prefix="/api/duplicate", tags=["duplicate"])
app.include_router(health.router, prefix="/api/health", tags=["health"])


@app.exception_handler(StarletteHTTPException)
async def http_error_handler(request: Request, exc: StarletteHTTPException):
    """Render framework errors in the same shape as clone errors."""
    if exc.status_code == 405:
        body = ErrorResponse(
            error="Method not allowed",
            message=f"{request.method} is not allowed for this endpoint",
        )
    else:
        body = ErrorResponse(error=str(exc.detail))
    return JSONResponse(
        status_code=exc.status_code,
        content=body.model_dump(exclude_none=True),
        headers=getattr(exc, "headers", None),
    )


@app.exception_handler(RequestValidationError)
async def request_validation_error_handler(request: Request, exc: RequestValidationError):
    """Malformed bodies are a bad request, like malformed IDs."""
    errors = exc.errors()
    details = None
    if errors:
        first = errors[0]
        location = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
        details = f"{location}: {first.get('msg')}" if location else first.get("msg")
    body = ErrorResponse(error="Bad request", details=details)
    return JSONResponse(status_code=400, content=body.model_dump(exclude_none=True))


@app.exception_handler(ClonerError)
async def cloner_error_handler(request: Request, exc: ClonerError):
    """Errors raised while resolving dependencies, such as unreadable settings."""
    return error_response(exc, ClonerSettings())
