"""
Main FastAPI application entry point.
"""
from contextlib import asynccontextmanager

from fastapi import FastAPI, Response
from fastapi.middleware.cors import CORSMiddleware

from crudgen import __version__
from crudgen.core.config import settings
from crudgen.core.logging import setup_logging
from crudgen.core.middleware import MonitoringMiddleware, ErrorHandlingMiddleware
from crudgen.api.v1.router import api_router


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events."""
    # Startup
    setup_logging()
    yield


app = FastAPI(
    title=settings.APP_NAME,
    description="Schema-valid, consistent CRUD test data from OpenAPI/Swagger specifications",
    version=__version__,
    lifespan=lifespan,
)

# Middleware (order matters - last added is first executed)
app.add_middleware(ErrorHandlingMiddleware)
if settings.ENABLE_METRICS:
    app.add_middleware(MonitoringMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.get_cors_origins(),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(api_router, prefix="/api/v1")


@app.get("/")
async def root():
    """Root endpoint."""
    return {"message": settings.APP_NAME, "version": __version__}


@app.get("/health")
async def health():
    """Health check endpoint."""
    return {"status": "healthy"}


@app.get("/metrics")
async def metrics():
    """Prometheus metrics endpoint."""
    from crudgen.core.monitoring import get_metrics
    return Response(content=get_metrics(), media_type="text/plain")
