"""
FastAPI application entry point.
"""
import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded

from cropguard.config import settings
from cropguard.api.limiter import limiter
from cropguard.middleware.error_handler import ErrorHandlerMiddleware
from cropguard.api.v1.routers import farms, plants, plots

# Configure logging
logging.basicConfig(
    level=getattr(logging, settings.log_level.upper(), logging.INFO),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan context manager.
    
    Handles startup and shutdown events using the modern FastAPI pattern.
    """
    # Startup
    logger.info(f"Starting {settings.app_name} v{settings.app_version}")
    logger.info(f"Log level: {settings.log_level}")
    logger.info(f"Risk thresholds: critical>{settings.risk_critical_ratio}, "
                f"high>{settings.risk_high_ratio}, medium>{settings.risk_medium_ratio}")
    logger.info(f"Rate limit: {settings.rate_limit_requests} requests/minute")
    
    yield
    
    # Shutdown
    from cropguard.infrastructure.store_client import get_store_client
    logger.info("Shutting down application...")
    client = get_store_client()
    await client.close()
    logger.info("Shutdown complete")


# Create FastAPI application
app = FastAPI(
    title=settings.app_name,
    version=settings.app_version,
    description="""
    Disease Propagation API for Farm Plots
    
    This API analyzes plots laid out as grids of plants and reports how
    likely each diagnosed disease is to spread to neighboring plants.
    
    ## Features
    
    - **Propagation Alerts**: Per-disease risk level, affected cells, exposed
      healthy neighbors and ordered mitigation actions
    - **Farm-wide Analysis**: Every plot of a farm analyzed concurrently
    - **Plot Views**: Grid layout and plant counts per status and disease
    - **Plant Lifecycle**: Placement with collision checks, diagnoses,
      treatments and manual status changes
    - **Rate Limiting**: Protects the API from abuse
    
    ## Risk Algorithm
    
    1. Place plants on the plot grid, ignoring positions outside the bounds
    2. Group Diseased plants by disease
    3. Classify each group by infected / total plants
       (>30% critical, >15% high, >5% medium, otherwise low)
    4. Count distinct healthy plants in the 8-cell neighborhood of infected cells
    5. Sort alerts by risk, keeping discovery order for ties
    """,
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_url="/openapi.json",
    lifespan=lifespan,
)

# Add rate limiter to app state
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

# Add CORS middleware with configurable origins
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Add global error handling middleware
app.add_middleware(ErrorHandlerMiddleware)

# Include routers
app.include_router(plots.router, prefix="/api/v1")
app.include_router(farms.router, prefix="/api/v1")
app.include_router(plants.router, prefix="/api/v1")


@app.get("/", tags=["health"])
async def root():
    """
    Root endpoint for health check.
    
    Returns:
        Status message
    """
    return {
        "status": "healthy",
        "service": settings.app_name,
        "version": settings.app_version,
    }


@app.get("/health", tags=["health"])
async def health_check():
    """
    Health check endpoint.
    
    Returns:
        Health status
    """
    return {
        "status": "healthy",
        "service": settings.app_name,
    }
