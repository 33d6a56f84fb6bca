"""
Estately API - Main application entry point.

Browser-facing layer of a real-estate listing marketplace.
"""

from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.core.config import get_settings
from app.core.backend import DataBackend
from app.auth.views import router as auth_router
from app.properties.views import router as properties_router
from app.applications.views import router as applications_router
from app.geocoding.views import router as geocoding_router

settings = get_settings()
API_PREFIX = "/api/v1"


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan - startup and shutdown events."""
    # Startup
    await DataBackend.connect()
    yield
    # Shutdown
    await DataBackend.disconnect()


# Create FastAPI app
app = FastAPI(
    title=settings.APP_NAME,
    version=settings.APP_VERSION,
    description="""
## Estately API

Browse properties, list your own and manage rental/purchase applications.

### Features

- 🏠 **Listings**: Browse, filter and view properties with a map location
- 📍 **Address Suggestions**: Debounced address search while listing a property
- 📨 **Applications**: Apply to properties and approve or reject applications you receive

Data and authorization live in the hosted data backend; this service composes it.
    """,
    lifespan=lifespan,
    docs_url=f"{API_PREFIX}/docs",
    redoc_url=f"{API_PREFIX}/redoc",
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # Configure appropriately for production
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
routers = [
    auth_router,
    properties_router,
    applications_router,
    geocoding_router,
]

for router in routers:
    app.include_router(router, prefix=API_PREFIX)


@app.get("/", tags=["Health"])
async def root():
    """Health check endpoint."""
    return {
        "status": "healthy",
        "app": settings.APP_NAME,
        "version": settings.APP_VERSION,
    }


@app.get("/health", tags=["Health"])
async def health_check():
    """Detailed health check."""
    return {
        "status": "healthy",
        "data_backend": "connected" if DataBackend.client else "disconnected",
        "version": settings.APP_VERSION,
    }
