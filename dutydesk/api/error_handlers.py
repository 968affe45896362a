import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from dutydesk.core.errors import InvalidRecordError, PersistenceError


logger = logging.getLogger(__name__)


def register_error_handlers(app: FastAPI) -> None:
    """Map record-store faults to HTTP: invalid input 400, failed write 500."""

    @app.exception_handler(InvalidRecordError)
    async def invalid_record_handler(request: Request, exc: InvalidRecordError) -> JSONResponse:
        logger.info("Rejected record on %s: %s", request.url.path, exc.message)
        return JSONResponse(status_code=exc.http_status, content={"detail": exc.message})

    @app.exception_handler(PersistenceError)
    async def persistence_error_handler(request: Request, exc: PersistenceError) -> JSONResponse:
        logger.error("Persistence failure on %s: %s", request.url.path, exc.message)
        return JSONResponse(
            status_code=exc.http_status,
            content={"detail": "The change could not be saved; please retry."},
        )
