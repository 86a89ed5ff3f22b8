"""FastAPI application factory."""

from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from slowapi import Limiter
from slowapi.util import get_remote_address

from shortlink.metrics import MetricsSink

from .api import create_api_router
from .errors import register_exception_handlers
from .middleware.limits import BodySizeLimitMiddleware, RequestTimeoutMiddleware
from .middleware.logging import LoggingMiddleware
from .middleware.metrics import MetricsMiddleware


def create_app(
    service_instance,
    config,
    metrics: Optional[MetricsSink] = None,
) -> FastAPI:
    """Create and configure FastAPI application.

    Args:
        service_instance: Link service instance (may be set later by the lifespan)
        config: Configuration instance
        metrics: Metrics sink; defaults to the service's sink

    Returns:
        Configured FastAPI app
    """
    if metrics is None:
        metrics = service_instance.metrics if service_instance is not None else MetricsSink()

    app = FastAPI(
        title="Shortlink",
        description="Minimal link shortening service",
        version="1.0.0",
        docs_url="/docs",
        openapi_url="/docs/api.json",
        redoc_url=None,
    )

    # Store instances in app state for access in routes
    app.state.service = service_instance
    app.state.config = config
    app.state.metrics = metrics

    limiter = Limiter(key_func=get_remote_address, enabled=config.should_rate_limit)
    app.state.limiter = limiter

    register_exception_handlers(app)

    # Added innermost first; the last middleware added sees the request first
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["GET"],
        max_age=config.cors_max_age,
    )
    app.add_middleware(GZipMiddleware)
    app.add_middleware(RequestTimeoutMiddleware, timeout_seconds=config.request_timeout_seconds)
    app.add_middleware(BodySizeLimitMiddleware, max_bytes=config.max_body_bytes)
    app.add_middleware(MetricsMiddleware, metrics=metrics)
    app.add_middleware(LoggingMiddleware)

    app.include_router(
        create_api_router(
            limiter=limiter if config.should_rate_limit else None,
            rate_limit=config.rate_limit,
        )
    )

    return app
