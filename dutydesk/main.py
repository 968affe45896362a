import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from dutydesk.api.error_handlers import register_error_handlers
from dutydesk.api.routers.activity import router as activity_router
from dutydesk.api.routers.applications import router as applications_router
from dutydesk.api.routers.audit import router as audit_router
from dutydesk.api.routers.auth import router as auth_router
from dutydesk.api.routers.duty import router as duty_router
from dutydesk.api.routers.submissions import router as submissions_router
from dutydesk.api.routers.tickets import router as tickets_router
from dutydesk.core.config import settings
from dutydesk.core.errors import PersistenceError
from dutydesk.core.logging import configure_logging
from dutydesk.services.container import repository

configure_logging()
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    document = repository.read()
    logger.info(
        "Document hydrated from %s: %d applications, %d tickets, %d sessions",
        repository.path,
        len(document.applications),
        len(document.tickets),
        len(document.sessions),
    )
    yield
    try:
        repository.flush()
    except PersistenceError:
        logger.exception("Final flush of %s failed", repository.path)


app = FastAPI(
    title="DutyDesk",
    version="1.0.0",
    description=(
        "Record store and dashboard API for community applications, support tickets "
        "and duty-clock sessions, with activity leaderboards."
    ),
    lifespan=lifespan,
)
register_error_handlers(app)


@app.get("/")
def health() -> dict[str, str]:
    return {"status": "ok", "service": settings.app_name}


app.include_router(auth_router)
app.include_router(applications_router)
app.include_router(tickets_router)
app.include_router(duty_router)
app.include_router(activity_router)
app.include_router(submissions_router)
app.include_router(audit_router)
