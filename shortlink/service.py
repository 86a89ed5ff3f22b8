"""Business logic service for short links."""

import logging
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Dict, Iterator, List, Mapping, Optional

from .common.validators import parse_url
from .database.base import DuplicateIdentifier, LinkStoreBase, StoreUnavailable
from .database.models import Link
from .errors import (
    InternalError,
    LinkIdNotUnique,
    LinkIdNotValid,
    LinkNotFound,
    URLWithMatchingHosts,
    URLWithoutHost,
)
from .identifier import IdentifierCodec
from .metrics import MetricsSink
from .redirect import CACHE_CONTROL, build_redirect_target, forward_headers, hosts_match


@dataclass
class RedirectTarget:
    """Where to send a redirected client, and the response headers to use."""

    location: str
    headers: Dict[str, str] = field(default_factory=dict)


class LinkService:
    """Service layer for link creation, lookup and redirection."""

    def __init__(
        self,
        store: LinkStoreBase,
        codec: Optional[IdentifierCodec] = None,
        metrics: Optional[MetricsSink] = None,
        logger: Optional[logging.Logger] = None,
    ):
        """Initialize link service.

        Args:
            store: Link store instance
            codec: Optional identifier codec
            metrics: Optional metrics sink
            logger: Optional logger
        """
        self.store = store
        self.codec = codec or IdentifierCodec()
        self.metrics = metrics or store.metrics
        self.logger = logger or logging.getLogger(__name__)

    async def create(
        self,
        target_url: str,
        custom_id: Optional[str] = None,
        request_host: str = "",
    ) -> Link:
        """Create a new short link.

        All validation happens before the store is touched.

        Args:
            target_url: URL the link redirects to
            custom_id: Optional caller-chosen identifier
            request_host: Host this request was addressed to

        Returns:
            The stored link

        Raises:
            MalformedURL: If the target is not an absolute URL
            URLWithoutHost: If the target has no host
            URLWithMatchingHosts: If the target points back at this service
            LinkIdNotValid: If the custom identifier fails validation
            LinkIdNotUnique: If the custom identifier is taken
            InternalError: On store failures
        """
        parsed = parse_url(target_url)

        if not parsed.host:
            raise URLWithoutHost(parsed.url)

        # Deny targets that would redirect back into this service
        if request_host and hosts_match(request_host, parsed.authority):
            raise URLWithMatchingHosts(request_host)

        if custom_id is not None:
            if not self.codec.validate_id(custom_id):
                raise LinkIdNotValid(custom_id)
            link_id = custom_id
        else:
            link_id = self.codec.generate_id()

        try:
            with self._store_errors():
                link = await self.store.insert(link_id, parsed.url)
        except DuplicateIdentifier as e:
            if custom_id is not None:
                self.metrics.increment("db.user_provided_taken_id")
                raise LinkIdNotUnique(custom_id) from e
            raise InternalError(f"generated identifier already in use: {link_id}") from e

        self.logger.debug(f"Created new link with id {link.id} targeting {link.target_url}")
        return link

    async def get(self, link_id: str) -> Link:
        """Get a link by identifier.

        Raises:
            LinkNotFound: If no link has this identifier
        """
        with self._store_errors():
            link = await self.store.find_by_id(link_id)

        if link is None:
            raise LinkNotFound(link_id)

        self.logger.debug(f"Found link with ID {link_id}")
        return link

    async def list_links(self) -> List[Link]:
        """List every stored link."""
        with self._store_errors():
            return await self.store.list_all()

    async def redirect(
        self,
        link_id: str,
        raw_query: Optional[str] = None,
        request_headers: Optional[Mapping[str, str]] = None,
    ) -> RedirectTarget:
        """Count a redirect and work out where to send the client.

        Args:
            link_id: Identifier from the request path
            raw_query: Raw query string of the request, if any
            request_headers: Headers of the request

        Returns:
            Redirect location and response headers

        Raises:
            LinkNotFound: If no link has this identifier
            InternalError: On store failures or a corrupt stored URL
        """
        with self._store_errors():
            link = await self.store.increment_redirect_count(link_id)

        if link is None:
            raise LinkNotFound(link_id)

        location = build_redirect_target(link, raw_query)
        self.logger.debug(f"Redirecting link ID {link_id} to {location}")

        headers = {"location": location, "cache-control": CACHE_CONTROL}
        forward_headers(headers, request_headers or {})
        return RedirectTarget(location=location, headers=headers)

    async def health_check(self) -> bool:
        return await self.store.health_check()

    async def close(self) -> None:
        """Close store connections."""
        await self.store.close()

    @contextmanager
    def _store_errors(self) -> Iterator[None]:
        """Translate store unavailability into an internal error."""
        try:
            yield
        except StoreUnavailable as e:
            raise InternalError(str(e)) from e
