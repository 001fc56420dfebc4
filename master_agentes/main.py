"""FastAPI application entry point."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from master_agentes.api.middleware import RequestIdMiddleware
from master_agentes.api.routes import api_router
from master_agentes.core.errors import MasterAgentesError, ValidationFailedError
from master_agentes.logging_config import setup_logging
from master_agentes.persistence.database import Database
from master_agentes.settings import settings

# Setup logging
setup_logging()

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager."""
    # Startup
    database = Database(settings.async_database_url, echo=settings.database_echo)
    if database.engine.dialect.name == "sqlite":
        # Local development without migrations
        await database.create_all()
    app.state.db = database
    logger.info("Database ready", extra={"dialect": database.engine.dialect.name})
    yield
    # Shutdown
    await database.dispose()


# Create FastAPI app
app = FastAPI(
    title="Master Agentes API",
    description="Multi-tenant agent management with the ChatVolt integration bridge",
    version=settings.api_version,
    lifespan=lifespan,
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_allow_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Add request id middleware
app.add_middleware(RequestIdMiddleware)


@app.exception_handler(MasterAgentesError)
async def master_agentes_error_handler(request: Request, exc: MasterAgentesError) -> JSONResponse:
    """Render domain errors as ``{error, message?, details?}``."""
    if exc.status_code >= 500:
        logger.error("Request failed", extra={"path": request.url.path, "error": exc.error})
    return JSONResponse(status_code=exc.status_code, content=exc.to_body())


@app.exception_handler(RequestValidationError)
async def request_validation_error_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Report body and query validation failures as 400 with field details."""
    # ctx may hold exception instances, which are not JSON
    details = [
        {key: item[key] for key in ("type", "loc", "msg", "input") if key in item}
        for item in exc.errors()
    ]
    error = ValidationFailedError(details=jsonable_encoder(details))
    return JSONResponse(status_code=error.status_code, content=error.to_body())


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    """Render anything the routes did not handle as a generic 500 body."""
    logger.exception(
        "Unhandled error",
        extra={"path": request.url.path, "method": request.method, "error_type": type(exc).__name__},
    )
    error = MasterAgentesError()
    return JSONResponse(status_code=error.status_code, content=error.to_body())


# Include API routes
app.include_router(api_router, prefix=settings.api_prefix)


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy"}


@app.get("/")
async def root():
    """Root endpoint."""
    return {
        "message": "Master Agentes API",
        "version": settings.api_version,
        "docs": "/docs",
        "integration_guide": f"{settings.api_prefix}/docs/chatvolt-integration",
    }
