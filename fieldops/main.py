"""
Main FastAPI application entry point.
Field Operations API Server
"""
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from fieldops.backend.sqlite import SQLiteBackend
from fieldops.config import settings
from fieldops.database import init_database
from fieldops.exceptions import AccessDenied
from fieldops.routers import (
    regions_router,
    workers_router,
    equipment_router,
    reports_router,
    incidents_router,
    dashboard_router,
    users_router,
)
from fieldops.sync.collection import RealtimeCollection

# Configure logging
logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL),
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
)
logger = logging.getLogger('main')

# Mirror ordering per collection (application field names)
COLLECTION_ORDER = {
    'regions': ('name', False),
    'workers': ('fullName', False),
    'equipment': ('type', False),
    'reports': ('date', True),
    'incidents': ('date', True),
}


async def start_services(app: FastAPI, database_path: str):
    """Create the schema, the backend and one live mirror per synchronized collection."""
    await init_database(database_path)
    backend = SQLiteBackend(database_path)
    collections = {}
    for name in settings.SYNC_COLLECTIONS:
        collection = RealtimeCollection(backend, name, order_by=COLLECTION_ORDER.get(name))
        await collection.start()
        collections[name] = collection
    app.state.backend = backend
    app.state.collections = collections
    logger.info(f"Synchronizing collections: {', '.join(collections)}")


async def stop_services(app: FastAPI):
    """Release every change subscription."""
    for collection in app.state.collections.values():
        await collection.stop()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler for startup/shutdown events."""
    # Startup
    logger.info("Starting Field Operations API Server...")
    await start_services(app, settings.DATABASE_PATH)
    yield
    # Shutdown
    logger.info("Shutting down Field Operations API Server...")
    await stop_services(app)


# Create FastAPI application
app = FastAPI(
    title="Field Operations API",
    description="Daily work reports, incidents, workers and equipment by region",
    version="1.0.0",
    lifespan=lifespan,
)

# CORS Middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(AccessDenied)
async def access_denied_handler(request: Request, exc: AccessDenied):
    logger.warning(f"Access denied on {request.url.path}: {exc.message}")
    return JSONResponse(status_code=403, content={"detail": "No access to this region"})


# Include routers
app.include_router(users_router)
app.include_router(regions_router)
app.include_router(workers_router)
app.include_router(equipment_router)
app.include_router(reports_router)
app.include_router(incidents_router)
app.include_router(dashboard_router)


@app.get("/")
async def root():
    """Root endpoint."""
    return {
        "name": "Field Operations API",
        "version": "1.0.0",
        "status": "running"
    }


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy"}


# For running with uvicorn directly
if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "fieldops.main:app",
        host=settings.API_HOST,
        port=settings.API_PORT,
        reload=True
    )
