"""In-memory link store.

Reference implementation of the store contract for tests and store-less local
runs. Every hook completes without yielding to the event loop, so the
read-modify-write in ``_increment_redirect_count`` cannot interleave with
another request.
"""

import logging
from typing import Dict, List, Optional

from ..metrics import MetricsSink
from .base import DEFAULT_TIMEOUT_SECONDS, DuplicateIdentifier, LinkStoreBase
from .models import Link, utcnow


class InMemoryLinkStore(LinkStoreBase):
    """Dictionary-backed link store."""

    backend_name = "memory"

    def __init__(
        self,
        timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS,
        metrics: Optional[MetricsSink] = None,
        logger: Optional[logging.Logger] = None,
    ):
        super().__init__(timeout_seconds=timeout_seconds, metrics=metrics, logger=logger)
        self._links: Dict[str, Link] = {}

    async def _insert(self, link_id: str, target_url: str) -> Link:
        if link_id in self._links:
            raise DuplicateIdentifier(link_id)

        now = utcnow()
        link = Link(id=link_id, target_url=target_url, created_at=now, updated_at=now)
        self._links[link_id] = link
        return link

    async def _find_by_id(self, link_id: str) -> Optional[Link]:
        return self._links.get(link_id)

    async def _list_all(self) -> List[Link]:
        return list(self._links.values())

    async def _increment_redirect_count(self, link_id: str) -> Optional[Link]:
        link = self._links.get(link_id)
        if link is None:
            return None

        updated = link.with_redirect(utcnow())
        self._links[link_id] = updated
        return updated

    async def health_check(self) -> bool:
        return True

    async def close(self) -> None:
        self._links.clear()
