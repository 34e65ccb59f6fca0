"""
Application entry point: logging, database pool lifecycle, middleware and routers.
"""

import time
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request

from aggie_nexus.config import settings
from aggie_nexus.db.pool import db_pool
from aggie_nexus.errors import install_error_handlers
from aggie_nexus.infrastructure.observability.logging import get_logger, log_request, setup_logging
from aggie_nexus.middleware import RequestContextMiddleware
from aggie_nexus.routes import (
    auth,
    events,
    health,
    organizations,
    profile,
    projects,
    protected,
    users,
)

# Setup logging before creating the app
setup_logging(log_level=settings.LOG_LEVEL)
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Open the database pool on startup and close it on shutdown."""
    logger.info("Application starting", environment=settings.environment, debug=settings.debug)

    logger.info("Initializing database pool")
    await db_pool.initialize()

    yield

    logger.info("Application shutting down")
    await db_pool.close()


app = FastAPI(
    title="Aggie Nexus",
    description="Profile, affiliation and authorization core for the Aggie Nexus platform",
    version="0.1.0",
    lifespan=lifespan,
)

install_error_handlers(app)

# Include routers
app.include_router(health.router)
app.include_router(auth.router)
app.include_router(protected.router)
app.include_router(profile.router)
app.include_router(events.router)
app.include_router(organizations.router)
app.include_router(projects.router)
app.include_router(users.router)


@app.middleware("http")
async def log_requests(request: Request, call_next):
    """Log HTTP requests with timing."""
    start_time = time.time()
    response = await call_next(request)
    log_request(
        method=request.method,
        path=request.url.path,
        status_code=response.status_code,
        duration_ms=round((time.time() - start_time) * 1000, 2),
    )
    return response


# Added last so it wraps the timing middleware and the request id is bound for its log line
app.add_middleware(RequestContextMiddleware)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=8000)
