"""
FastAPI application entry point for the Industry Inference Service.
"""

import structlog
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from prometheus_fastapi_instrumentator import Instrumentator

from industry_inference.api.dependencies import get_industry_classifier
from industry_inference.api.error_handlers import EXCEPTION_HANDLERS
from industry_inference.api.middleware import RequestTracingMiddleware
from industry_inference.api.routes import health_router, router
from industry_inference.cache.redis_client import RedisClient
from industry_inference.config import settings
from industry_inference.logging_config import configure_logging

# Configure structured logging before any other imports
configure_logging(settings.LOG_LEVEL, settings.ENVIRONMENT)
logger = structlog.get_logger(__name__)

app = FastAPI(
    title=settings.APP_NAME,
    description="Classifies free-text occupation descriptions into a three-level industry taxonomy",
    version=settings.APP_VERSION,
    docs_url="/docs",
    redoc_url="/redoc",
)

# Request tracing middleware (must be first for request_id in all logs)
app.add_middleware(RequestTracingMiddleware)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

for exc_class, handler in EXCEPTION_HANDLERS.items():
    app.add_exception_handler(exc_class, handler)

app.include_router(router, prefix="/api/inference", tags=["inference"])
app.include_router(health_router, tags=["health"])


@app.on_event("startup")
async def startup():
    """Load reference tables eagerly so the first request does not pay for it."""
    logger.info(
        "Application startup",
        version=settings.APP_VERSION,
        environment=settings.ENVIRONMENT,
        llm_base_url=settings.LLM_BASE_URL,
        model=settings.LLM_MODEL,
        cache_backend=settings.CACHE_BACKEND,
    )

    classifier = get_industry_classifier()
    if not await classifier.cache.health_check():
        logger.warning("Classification cache unreachable, serving without cache")

    logger.info("Application startup complete")


@app.on_event("shutdown")
async def shutdown():
    """Application shutdown - close the LLM client and cache connections."""
    logger.info("Application shutdown")
    if get_industry_classifier.cache_info().currsize:
        await get_industry_classifier().close()
    await RedisClient.close_async_pool()
    logger.info("Application shutdown complete")


if settings.PROMETHEUS_ENABLED:
    Instrumentator().instrument(app).expose(app)


@app.get("/")
async def root():
    """Root endpoint with API documentation links."""
    return {
        "service": settings.APP_NAME,
        "version": settings.APP_VERSION,
        "docs": "/docs",
        "health": "/health",
        "taxonomy": "/api/inference/taxonomy",
        "metrics": "/metrics" if settings.PROMETHEUS_ENABLED else None,
    }


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "industry_inference.main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.DEBUG,
    )
