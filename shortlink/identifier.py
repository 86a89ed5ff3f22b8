"""Short identifier generation and validation."""

import logging
import random
import string
from typing import Iterable, Optional

from .errors import IdentifierGenerationError
from .routes import reserved_segments


class IdentifierCodec:
    """Generate and validate short link identifiers."""

    # Base62 characters (alphanumeric, case-sensitive)
    ALPHABET = string.digits + string.ascii_lowercase + string.ascii_uppercase
    MAX_GENERATION_ATTEMPTS = 5

    def __init__(
        self,
        length: int = 5,
        reserved: Optional[Iterable[str]] = None,
        logger: Optional[logging.Logger] = None,
    ):
        """Initialize the codec.

        Args:
            length: Length of generated identifiers
            reserved: Reserved path segments (defaults to the route registry)
            logger: Optional logger
        """
        if length < 1:
            raise ValueError("Identifier length must be at least 1")

        self.length = length
        self.reserved = frozenset(
            s.lower() for s in (reserved if reserved is not None else reserved_segments())
        )
        self.logger = logger or logging.getLogger(__name__)
        self._alphabet_set = frozenset(self.ALPHABET)
        self._rng = random.SystemRandom()

    def generate_id(self) -> str:
        """Generate a random identifier that passes validation.

        Returns:
            New identifier

        Raises:
            IdentifierGenerationError: If no valid identifier was produced
        """
        for attempt in range(self.MAX_GENERATION_ATTEMPTS):
            candidate = "".join(self._rng.choices(self.ALPHABET, k=self.length))
            if self.validate_id(candidate):
                return candidate
            self.logger.debug(f"Generated identifier rejected on attempt {attempt + 1}: {candidate}")

        raise IdentifierGenerationError(
            f"could not generate a valid identifier after {self.MAX_GENERATION_ATTEMPTS} attempts"
        )

    def validate_id(self, link_id: str) -> bool:
        """Check that an identifier is non-empty, Base62 only and not a reserved segment.

        Args:
            link_id: Identifier to validate

        Returns:
            True if valid
        """
        if not link_id or not isinstance(link_id, str):
            return False

        if any(c not in self._alphabet_set for c in link_id):
            return False

        return link_id.lower() not in self.reserved
