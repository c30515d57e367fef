"""Exception handlers mapping catalog errors to JSON responses."""
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from .exceptions import CatalogError
from .logging import get_logger

logger = get_logger(__name__)


async def catalog_error_handler(request: Request, exc: CatalogError) -> JSONResponse:
    """Render a CatalogError with its status code."""
    log = logger.error if exc.status_code >= 500 else logger.info
    log(
        "request_failed",
        path=request.url.path,
        method=request.method,
        status=exc.status_code,
        error=exc.error_code,
        message=exc.message,
    )
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


def register_exception_handlers(app: FastAPI) -> None:
    """Register handlers for all catalog errors."""
    app.add_exception_handler(CatalogError, catalog_error_handler)
