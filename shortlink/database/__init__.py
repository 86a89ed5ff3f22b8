"""Link store layer."""

from .base import (
    DuplicateIdentifier,
    LinkStoreBase,
    StoreError,
    StoreFailure,
    StoreTimeout,
    StoreUnavailable,
)
from .factory import create_store
from .memory import InMemoryLinkStore
from .models import Link

__all__ = [
    "DuplicateIdentifier",
    "InMemoryLinkStore",
    "Link",
    "LinkStoreBase",
    "StoreError",
    "StoreFailure",
    "StoreTimeout",
    "StoreUnavailable",
    "create_store",
]
