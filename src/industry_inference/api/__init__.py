"""
FastAPI API routes and endpoints.

- routes.py: /api/inference endpoints (parse, classify, validate, cache, taxonomy) and /health
- dependencies.py: Dependency injection for the classifier and settings
- models.py: API-specific request/response models
- error_handlers.py: Exception handlers for structured error responses
- middleware.py: Request id tracing
"""

from industry_inference.api import dependencies, error_handlers, models
from industry_inference.api.routes import health_router, router

__all__ = [
    "router",
    "health_router",
    "dependencies",
    "error_handlers",
    "models",
]
