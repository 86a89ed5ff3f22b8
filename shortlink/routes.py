"""HTTP route registry shared by the web layer and the identifier codec."""

from enum import Enum
from typing import List


class Route(str, Enum):
    """Every path exposed by the service, in registration order.

    The redirect route must stay after the fixed routes so it never shadows them.
    """

    HEALTH = "/health"
    METRICS = "/metrics"
    DOCS = "/docs"
    LINK_CREATE = "/create"
    LINK_LIST = "/links"
    LINK_GET = "/links/{link_id}"
    LINK_REDIRECT = "/{link_id}"

    @property
    def path(self) -> str:
        return self.value

    @property
    def first_segment(self) -> str:
        """First path segment, e.g. ``links`` for ``/links/{link_id}``."""
        segment = self.value.lstrip("/")
        if "/" in segment:
            segment = segment.split("/", 1)[0]
        return segment


def reserved_segments() -> List[str]:
    """Lower-cased first segments of every registered route."""
    return [route.first_segment.lower() for route in Route]
