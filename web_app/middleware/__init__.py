"""Middleware for the link service web app."""

from .limits import BodySizeLimitMiddleware, RequestTimeoutMiddleware
from .logging import LoggingMiddleware
from .metrics import MetricsMiddleware

__all__ = [
    "BodySizeLimitMiddleware",
    "LoggingMiddleware",
    "MetricsMiddleware",
    "RequestTimeoutMiddleware",
]
