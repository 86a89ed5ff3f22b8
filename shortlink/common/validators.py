"""URL validation utilities."""

from dataclasses import dataclass
from typing import Optional
from urllib.parse import urlsplit

from pydantic import AnyUrl, TypeAdapter, ValidationError

from ..errors import MalformedURL

_url_adapter = TypeAdapter(AnyUrl)


@dataclass(frozen=True)
class ParsedURL:
    """An absolute URL in normalized form."""

    url: str
    host: Optional[str]
    authority: str


def parse_url(raw: str) -> ParsedURL:
    """Parse and normalize an absolute URL.

    Any scheme is accepted; relative references are rejected.

    Args:
        raw: The URL to parse

    Returns:
        Parsed URL

    Raises:
        MalformedURL: If the input is not an absolute URL
    """
    if not isinstance(raw, str):
        raise MalformedURL("URL must be a string")

    try:
        parsed = _url_adapter.validate_python(raw)
    except ValidationError as e:
        errors = e.errors()
        raise MalformedURL(errors[0]["msg"] if errors else "invalid URL") from e

    normalized = str(parsed)
    return ParsedURL(
        url=normalized,
        host=parsed.host or None,
        authority=url_authority(normalized),
    )


def url_authority(url: str) -> str:
    """Return ``host[:port]`` of a URL, without user info."""
    netloc = urlsplit(url).netloc
    return netloc.rpartition("@")[2]
