"""Common utilities for the link service."""

from .validators import ParsedURL, parse_url, url_authority
from .headers import FORWARDED_HEADERS, is_valid_header_value
from .logging_config import setup_logging

__all__ = [
    "ParsedURL",
    "parse_url",
    "url_authority",
    "FORWARDED_HEADERS",
    "is_valid_header_value",
    "setup_logging",
]
