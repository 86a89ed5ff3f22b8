"""Redirect safety rules: loop detection, target construction, header forwarding."""

import logging
from typing import Mapping, MutableMapping, Optional
from urllib.parse import urlsplit, urlunsplit

from .common.headers import FORWARDED_HEADERS, is_valid_header_value
from .common.validators import parse_url
from .database.models import Link
from .errors import CorruptLinkError, MalformedURL

logger = logging.getLogger(__name__)

CACHE_CONTROL = "public, max-age=300, s-maxage=300, stale-while-revalidate=300, stale-if-error=300"

LOOPBACK_HOSTS = ("0.0.0.0", "localhost", "127.0.0.1")


def hosts_match(request_host: str, target_host: str) -> bool:
    """Check if a target host points back at this service.

    Loopback aliases are treated as the same host; their ports must then agree,
    or both be absent.

    Args:
        request_host: Host the request was sent to (``Host`` header)
        target_host: Host of the URL being shortened

    Returns:
        True if the target would redirect into this service
    """
    if request_host == target_host:
        return True

    if _is_loopback(request_host) and _is_loopback(target_host):
        request_port = _port_suffix(request_host)
        target_port = _port_suffix(target_host)
        if request_port is None or target_port is None:
            return request_port is None and target_port is None
        return request_port == target_port

    return False


def _is_loopback(host: str) -> bool:
    return any(host.startswith(alias) for alias in LOOPBACK_HOSTS)


def _port_suffix(host: str) -> Optional[str]:
    if ":" not in host:
        return None
    return host.split(":", 1)[1]


def build_redirect_target(link: Link, raw_query: Optional[str] = None) -> str:
    """Build the redirect URL for a link.

    A non-empty ``raw_query`` replaces any query stored on the target.

    Raises:
        CorruptLinkError: If the stored target URL no longer parses
    """
    try:
        target = parse_url(link.target_url).url
    except MalformedURL as e:
        logger.error(f"Invalid URL stored for link with ID '{link.id}': {e.detail}")
        raise CorruptLinkError(f"stored target URL for '{link.id}' does not parse: {e.detail}") from e

    if not raw_query:
        return target

    parts = urlsplit(target)
    return urlunsplit(parts._replace(query=raw_query))


def forward_headers(
    response_headers: MutableMapping[str, str],
    request_headers: Mapping[str, str],
) -> MutableMapping[str, str]:
    """Copy allow-listed request headers onto a redirect response.

    Headers already set on the response are never replaced, and values that are
    not valid header text are skipped.

    Args:
        response_headers: Headers of the outgoing response (updated in place)
        request_headers: Headers of the incoming request

    Returns:
        The updated response headers
    """
    incoming = {k.lower(): v for k, v in request_headers.items()}
    existing = {k.lower() for k in response_headers}

    for name in FORWARDED_HEADERS:
        value = incoming.get(name)
        if value is None or not is_valid_header_value(value):
            continue
        if name in existing:
            continue
        response_headers[name] = value
        existing.add(name)

    return response_headers
