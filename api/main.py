"""Synduct Insights FastAPI Application."""

from fastapi import Depends, FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from starlette.middleware.base import BaseHTTPMiddleware

from api.config import get_settings
from api.models.schemas import HealthResponse
from api.routers import filters, presets, signals
from api.services.store import get_store
from config import config
from config.logging_config import setup_logging
from src.filtering import DashboardStore

settings = get_settings()
setup_logging(log_level="DEBUG" if settings.debug else config.app.log_level)

app = FastAPI(
    title=settings.app_name,
    version=settings.version,
    description="API for analytics over anonymized physician Q&A interactions",
)


class CacheHeaderMiddleware(BaseHTTPMiddleware):
    """Middleware to add Cache-Control headers to responses."""

    # Endpoints that can be cached; values only change when the files change
    CACHEABLE_PATHS = {
        "/api/filters/presets": settings.cache_ttl_seconds,
        "/api/filters/options": settings.cache_ttl_seconds,
    }

    async def dispatch(self, request: Request, call_next):
        response = await call_next(request)

        # Only cache GET requests
        if request.method != "GET":
            return response

        # Check if this path should be cached
        path = request.url.path
        for cacheable_path, max_age in self.CACHEABLE_PATHS.items():
            if path.startswith(cacheable_path):
                response.headers["Cache-Control"] = f"public, max-age={max_age}"
                break
        else:
            # Default: no cache for other endpoints
            response.headers["Cache-Control"] = "no-cache"

        return response


# Add cache header middleware
app.add_middleware(CacheHeaderMiddleware)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(signals.router, prefix="/api/signals", tags=["Signals"])
app.include_router(filters.router, prefix="/api/filters", tags=["Filters"])
app.include_router(presets.router, prefix="/api/filters/presets", tags=["Presets"])


@app.get("/")
async def root():
    """Root endpoint with API info."""
    return {
        "name": settings.app_name,
        "version": settings.version,
        "docs": "/docs",
        "endpoints": {
            "signals": "/api/signals",
            "filters": "/api/filters",
            "presets": "/api/filters/presets",
        },
    }


@app.get("/health", response_model=HealthResponse)
async def health_check(store: DashboardStore = Depends(get_store)):
    """Health check endpoint."""
    return {
        "status": "healthy",
        "records_loaded": len(store.records),
    }


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("api.main:app", host="0.0.0.0", port=8000, reload=settings.debug)
