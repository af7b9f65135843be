"""
FastAPI application entry point for life-data reliability analysis.
"""
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from lifedata.config import get_settings
from lifedata.core.distributions import DistributionFactory
from contextlib import asynccontextmanager
import logging

logger = logging.getLogger(__name__)

settings = get_settings()

logging.basicConfig(
    level=getattr(logging, settings.log_level.upper(), logging.INFO),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s"
)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler."""
    # Startup
    logger.info(f"Starting {settings.app_name} API")

    try:
        DistributionFactory.register_all()
        logger.info(f"Registered {len(DistributionFactory.list_distributions())} lifetime distributions")
    except Exception as e:
        logger.error(f"Failed to register distributions: {e}")

    yield

    # Shutdown
    logger.info(f"Shutting down {settings.app_name} API")


app = FastAPI(
    title=settings.app_name,
    version=settings.app_version,
    description="Backend API for life-data analysis: distribution fitting, reliability curves and confidence bounds",
    docs_url="/api/docs",
    redoc_url="/api/redoc",
    openapi_url="/api/openapi.json",
    lifespan=lifespan
)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Import and include routers
from lifedata.api import analysis

app.include_router(
    analysis.router,
    prefix="/api",
    tags=["analysis"]
)


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {
        "status": "healthy",
        "app": settings.app_name,
        "version": settings.app_version,
        "distributions_registered": len(DistributionFactory.list_distributions())
    }


@app.get("/")
async def root():
    """Root endpoint."""
    return {
        "message": f"{settings.app_name} API",
        "version": settings.app_version,
        "docs": "/api/docs",
        "endpoints": {
            "estimate": "/api/analysis/estimate",
            "reliability": "/api/analysis/reliability",
            "best_fit": "/api/analysis/best-fit",
            "confidence_bounds": "/api/analysis/confidence-bounds",
            "maintenance": "/api/analysis/maintenance",
            "distributions": "/api/analysis/distributions"
        }
    }
