"""Error taxonomy for the link service.

Every error exposes ``message``, the text returned to clients. ``InternalError``
keeps its detail for server-side logs and always presents a fixed message.
"""


class LinkError(Exception):
    """Base class for errors surfaced by the link service."""

    def __init__(self, detail: str = ""):
        super().__init__(detail)
        self.detail = detail

    @property
    def message(self) -> str:
        return str(self)


class LinkNotFound(LinkError):
    def __str__(self) -> str:
        return f"A link with the provided ID '{self.detail}' could not be found"


class LinkIdNotUnique(LinkError):
    def __str__(self) -> str:
        return f"The provided custom link ID is already in use: {self.detail}"


class LinkIdNotValid(LinkError):
    def __str__(self) -> str:
        return f"The provided custom link ID is not valid: {self.detail}"


class MalformedURL(LinkError):
    def __str__(self) -> str:
        return f"Malformed URL: {self.detail}"


class URLWithoutHost(LinkError):
    def __str__(self) -> str:
        return f"Only URLs with valid hosts are accepted: {self.detail}"


class URLWithMatchingHosts(LinkError):
    def __str__(self) -> str:
        return f"URLs with the same host as this service are forbidden: {self.detail}"


class RouteNotFound(LinkError):
    def __str__(self) -> str:
        return "Route not found"


class InvalidRequest(LinkError):
    def __str__(self) -> str:
        return f"Invalid request: {self.detail}"


class InternalError(LinkError):
    """Unexpected condition; the detail is logged, never sent to clients."""

    def __str__(self) -> str:
        return "Something went wrong"


class IdentifierGenerationError(InternalError):
    """Identifier generation exhausted its attempts."""


class CorruptLinkError(InternalError):
    """A stored target URL no longer parses."""
