"""Request counting middleware."""

import time
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from typing import Callable

from shortlink.metrics import MetricsSink


class MetricsMiddleware(BaseHTTPMiddleware):
    """Count and time requests by method, status and route template."""

    def __init__(self, app, metrics: MetricsSink):
        super().__init__(app)
        self.metrics = metrics

    async def dispatch(self, request: Request, call_next: Callable):
        start_time = time.perf_counter()

        response = await call_next(request)

        # Route templates keep link IDs out of the label values
        route = request.scope.get("route")
        endpoint = getattr(route, "path", None) or "unmatched"
        labels = {
            "method": request.method,
            "status": str(response.status_code),
            "endpoint": endpoint,
        }

        self.metrics.increment("http_requests", **labels)
        self.metrics.observe(
            "http_requests_duration_seconds",
            time.perf_counter() - start_time,
            **labels,
        )
        return response
