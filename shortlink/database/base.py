"""Abstract base class for link store implementations."""

import asyncio
import logging
from abc import ABC, abstractmethod
from typing import Awaitable, List, Optional, TypeVar

from ..metrics import MetricsSink
from .models import Link

T = TypeVar("T")

DEFAULT_TIMEOUT_SECONDS = 0.4


class StoreError(Exception):
    """Base class for store failures."""


class DuplicateIdentifier(StoreError):
    """An insert collided with an existing identifier."""

    def __init__(self, link_id: str):
        super().__init__(f"identifier already in use: {link_id}")
        self.link_id = link_id


class StoreUnavailable(StoreError):
    """The store could not complete the call."""


class StoreTimeout(StoreUnavailable):
    """The call did not finish within the timeout budget."""


class StoreFailure(StoreUnavailable):
    """The underlying persistence layer reported an error."""


class LinkStoreBase(ABC):
    """Link persistence with a fixed per-call timeout.

    Public methods race the backend call against the deadline and translate
    failures into the store error taxonomy. Backends implement the underscored
    hooks and raise ``DuplicateIdentifier`` on unique-constraint violations.
    """

    backend_name = "base"

    def __init__(
        self,
        timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS,
        metrics: Optional[MetricsSink] = None,
        logger: Optional[logging.Logger] = None,
    ):
        """Initialize the store.

        Args:
            timeout_seconds: Wall-clock budget for each store call
            metrics: Optional metrics sink
            logger: Optional logger instance
        """
        self.timeout_seconds = timeout_seconds
        self.metrics = metrics or MetricsSink()
        self.logger = logger or logging.getLogger(__name__)

    async def connect(self) -> None:
        """Open backend resources ahead of the first call; a no-op by default."""

    async def insert(self, link_id: str, target_url: str) -> Link:
        """Insert a new link.

        Raises:
            DuplicateIdentifier: If ``link_id`` is already stored
            StoreUnavailable: On timeout or backend failure
        """
        try:
            return await self._bounded(self._insert(link_id, target_url), "insert")
        except StoreUnavailable:
            self.metrics.increment("db.saving_link_impossible")
            raise

    async def find_by_id(self, link_id: str) -> Optional[Link]:
        """Return the link with this identifier, or None."""
        try:
            return await self._bounded(self._find_by_id(link_id), "find_by_id")
        except StoreUnavailable:
            self.metrics.increment("db.failed_to_lookup_link")
            raise

    async def list_all(self) -> List[Link]:
        """Return every stored link."""
        try:
            return await self._bounded(self._list_all(), "list_all")
        except StoreUnavailable:
            self.metrics.increment("db.failed_to_lookup_link")
            raise

    async def increment_redirect_count(self, link_id: str) -> Optional[Link]:
        """Atomically count one redirect; returns the updated link or None."""
        try:
            link = await self._bounded(
                self._increment_redirect_count(link_id), "increment_redirect_count"
            )
        except StoreUnavailable:
            self.metrics.increment("db.failed_to_increment_link")
            raise

        if link is not None:
            self.logger.debug(f"Incremented redirect count for link with ID {link_id}")
        return link

    async def _bounded(self, call: Awaitable[T], operation: str) -> T:
        """Await a backend call under the timeout budget."""
        try:
            return await asyncio.wait_for(call, timeout=self.timeout_seconds)
        except asyncio.TimeoutError as e:
            self.metrics.increment("db.connection_timeout")
            self.logger.error(
                f"Store call '{operation}' timed out after {self.timeout_seconds * 1000:.0f}ms"
            )
            raise StoreTimeout(f"{operation} timed out") from e
        except StoreError:
            raise
        except Exception as e:
            self.logger.error(f"Store call '{operation}' failed: {e}")
            raise StoreFailure(f"{operation} failed: {e}") from e

    @abstractmethod
    async def _insert(self, link_id: str, target_url: str) -> Link:
        pass

    @abstractmethod
    async def _find_by_id(self, link_id: str) -> Optional[Link]:
        pass

    @abstractmethod
    async def _list_all(self) -> List[Link]:
        pass

    @abstractmethod
    async def _increment_redirect_count(self, link_id: str) -> Optional[Link]:
        pass

    @abstractmethod
    async def health_check(self) -> bool:
        """Check if the store is reachable.

        Returns:
            True if healthy, False otherwise
        """
        pass

    @abstractmethod
    async def close(self) -> None:
        """Release store resources."""
        pass
