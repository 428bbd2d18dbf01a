"""
Error taxonomy for URL resolution.

Every failure a resolution request can produce is one of the four
subclasses below. Callers branch on ``kind`` (or on the class) instead of
inspecting message text.
"""

from enum import Enum
from typing import Dict, Optional


class ResolutionErrorKind(Enum):
    """Closed set of resolution failure kinds"""
    INVALID_URL_FORMAT = "InvalidUrlFormat"
    TRANSPORT_FAILURE = "TransportFailure"
    TOO_MANY_REDIRECTS = "TooManyRedirects"
    DUPLICATE_RESOLVED_URL = "DuplicateResolvedUrl"


class ResolutionError(Exception):
    """Base class for all resolution failures"""

    kind: ResolutionErrorKind

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_dict(self) -> Dict[str, str]:
        """Structured payload (kind + message) for API responses"""
        return {"kind": self.kind.value, "message": self.message}


class InvalidUrlFormat(ResolutionError):
    """Input is not a usable URL. Raised before any network activity."""

    kind = ResolutionErrorKind.INVALID_URL_FORMAT

    def __init__(self, url: str, reason: str = "Invalid URL format"):
        super().__init__(f"{reason}: {url!r}")
        self.url = url


class TransportFailure(ResolutionError):
    """Both HEAD and GET failed at the network layer for some hop."""

    kind = ResolutionErrorKind.TRANSPORT_FAILURE

    def __init__(self, url: str, cause: Optional[BaseException] = None):
        detail = str(cause) if cause is not None else "Unknown error"
        super().__init__(f"Failed to resolve URL: {detail}")
        self.url = url
        self.cause = cause


class TooManyRedirects(ResolutionError):
    """Hop limit reached without a non-redirect response."""

    kind = ResolutionErrorKind.TOO_MANY_REDIRECTS

    def __init__(self, max_hops: int):
        super().__init__(f"Too many redirects (max {max_hops})")
        self.max_hops = max_hops


class DuplicateResolvedUrl(ResolutionError):
    """The resolved destination is already in the store (policy rejection)."""

    kind = ResolutionErrorKind.DUPLICATE_RESOLVED_URL

    def __init__(self, resolved_url: str):
        super().__init__("URL already exists in the list")
        self.resolved_url = resolved_url

    def to_dict(self) -> Dict[str, str]:
        payload = super().to_dict()
        payload["resolved_url"] = self.resolved_url
        return payload
