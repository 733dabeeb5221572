"""
Collection Runner - FastAPI Application Entry Point

Runs Postman collections over HTTP: every request of a collection is
executed concurrently and a per-request and aggregate report is returned.
"""

from contextlib import asynccontextmanager

from fastapi import FastAPI

from .config import Settings, load_environment
from .exceptions import register_exception_handlers
from .routers import runs
from .services.transport import create_client


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler for startup and shutdown events."""
    # Startup: read settings and the environment snapshot once
    settings = Settings.from_environ()
    app.state.settings = settings
    app.state.environment = load_environment(settings.env_file)
    app.state.http_client = create_client(settings)
    yield
    # Shutdown: release pooled connections
    await app.state.http_client.aclose()


app = FastAPI(
    title="Collection Runner",
    description="Runs Postman collections concurrently and reports the results",
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_url="/openapi.json",
    lifespan=lifespan
)

# Register global exception handlers
register_exception_handlers(app)


@app.get("/")
async def root():
    """Root endpoint returning API information."""
    return {
        "name": "Collection Runner",
        "version": "1.0.0",
        "docs": "/docs"
    }


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy"}


# Register routers
app.include_router(runs.router)
