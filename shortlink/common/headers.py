"""Header utilities for redirect responses."""

import re
from typing import Any

# Request headers copied onto redirect responses
FORWARDED_HEADERS = (
    # Basic
    "host",
    "accept-language",
    "content-type",
    # Security
    "content-security-policy",
    "x-content-type-options",
    "x-frame-options",
    "x-xss-protection",
    # Cookies
    "cookie",
    "set-cookie",
)

_HEADER_VALUE_RE = re.compile(r"^[\t\x20-\x7e]*$")


def is_valid_header_value(value: Any) -> bool:
    """Check that a value is a visible-ASCII header value."""
    return isinstance(value, str) and bool(_HEADER_VALUE_RE.match(value))
