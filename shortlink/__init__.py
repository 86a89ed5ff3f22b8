"""Short-link identity and redirection core."""

from .service import LinkService, RedirectTarget
from .identifier import IdentifierCodec
from .metrics import MetricsSink

__all__ = ["LinkService", "RedirectTarget", "IdentifierCodec", "MetricsSink"]
