"""
Redirect resolver.

Follows HTTP redirects by hand, one hop at a time, so every Location header
can be resolved explicitly against the URL that produced it.
"""

import re
from typing import Callable, Optional
from urllib.parse import urljoin, urlparse

import requests
import urllib3

from resolver_app.config import settings
from resolver_app.services.errors import (
    InvalidUrlFormat,
    TooManyRedirects,
    TransportFailure,
)

DEFAULT_SCHEME_PREFIX = "https://"
HTTP_PREFIXES = ("http://", "https://")

# RFC 3986 scheme followed by ":"
_SCHEME_RE = re.compile(r"^[a-zA-Z][a-zA-Z0-9+.\-]*:")
_EXPLICIT_SCHEME_RE = re.compile(r"^[a-zA-Z][a-zA-Z0-9+.\-]*://")

MAX_LABEL_LENGTH = 63

# Failures that mean "this hop could not be fetched". urllib3 raises
# LocationParseError (a ValueError) for hosts it can't parse, and requests
# passes it through unwrapped.
TRANSPORT_ERRORS = (requests.RequestException, urllib3.exceptions.HTTPError, ValueError)


def normalize_url(raw_input: str) -> str:
    """Strip whitespace and prepend https:// when no http(s) prefix is present"""
    url = raw_input.strip()
    if not url.lower().startswith(HTTP_PREFIXES):
        url = DEFAULT_SCHEME_PREFIX + url
    return url


def validate_url(raw_input: str) -> str:
    """
    Check that the input is a syntactically usable URL.

    Bare hosts such as ``example.com`` are accepted since normalization
    supplies the scheme. Returns the normalized URL.

    Raises:
        InvalidUrlFormat: empty input, embedded whitespace, a non-HTTP(S)
            scheme, a missing host, or an unparseable port.
    """
    if not raw_input or not raw_input.strip():
        raise InvalidUrlFormat(raw_input or "", "URL is required")

    stripped = raw_input.strip()
    if any(ch.isspace() for ch in stripped):
        raise InvalidUrlFormat(raw_input, "URL must not contain whitespace")

    if _EXPLICIT_SCHEME_RE.match(stripped) and not stripped.lower().startswith(HTTP_PREFIXES):
        raise InvalidUrlFormat(raw_input, "Only http and https URLs are supported")

    url = normalize_url(stripped)
    try:
        parsed = urlparse(url)
        parsed.port  # raises ValueError on a malformed port
    except ValueError:
        raise InvalidUrlFormat(raw_input)

    if not parsed.hostname:
        raise InvalidUrlFormat(raw_input, "URL has no host")

    if ":" not in parsed.hostname:  # IPv6 literals have no DNS labels
        labels = parsed.hostname.rstrip(".").split(".")
        if any(not label or len(label) > MAX_LABEL_LENGTH for label in labels):
            raise InvalidUrlFormat(raw_input, "Host label empty or too long")

    return url


def resolve_location(current_url: str, location: str) -> str:
    """
    Resolve a Location header value against the URL that returned it.

    - absolute (has a scheme): used as-is
    - root-relative ("/path"): scheme and host of current_url + location
    - anything else (including "//host/path"): standard relative resolution
    """
    if _SCHEME_RE.match(location):
        return location

    if location.startswith("/") and not location.startswith("//"):
        parsed = urlparse(current_url)
        return f"{parsed.scheme}://{parsed.netloc}{location}"

    return urljoin(current_url, location)


class RedirectResolver:
    """
    Bounded, manual redirect follower.

    Each hop sends a HEAD request with redirects disabled. If HEAD fails at
    the transport level the hop is retried once with GET. A 3xx response with
    a Location header advances to the next hop; anything else ends the chain.

    The resolver keeps no state between calls: every ``resolve()`` opens a
    fresh ``requests.Session``, so cookies set during one resolution never
    reach another. Tests inject a ``session_factory`` returning a fake.
    """

    def __init__(
        self,
        session_factory: Optional[Callable[[], requests.Session]] = None,
        timeout: Optional[float] = None,
        user_agent: Optional[str] = None,
        max_hops: Optional[int] = None,
    ):
        self.session_factory = session_factory or requests.Session
        self.timeout = timeout if timeout is not None else settings.request_timeout
        self.user_agent = user_agent or settings.user_agent
        self.max_hops = max_hops if max_hops is not None else settings.max_redirects

    def resolve(self, raw_input: str, max_hops: Optional[int] = None) -> str:
        """
        Resolve raw_input to its final, non-redirecting URL.

        Args:
            raw_input: URL as typed by the user (scheme optional)
            max_hops: Hop limit for this call (defaults to the resolver's)

        Returns:
            The final URL

        Raises:
            TransportFailure: HEAD and GET both failed on some hop
            TooManyRedirects: still redirecting after max_hops hops
        """
        if max_hops is None:
            max_hops = self.max_hops
        if max_hops < 1:
            raise ValueError(f"max_hops must be at least 1, got {max_hops}")

        current_url = normalize_url(raw_input)

        with self.session_factory() as session:
            for _ in range(max_hops):
                status_code, location = self._fetch_hop(session, current_url)

                if 300 <= status_code < 400 and location:
                    current_url = resolve_location(current_url, location)
                    continue

                # Not a redirect (or a 3xx without a usable Location)
                return current_url

        raise TooManyRedirects(max_hops)

    def _fetch_hop(self, session: requests.Session, url: str):
        """One hop: HEAD, falling back to GET on transport failure"""
        try:
            return self._request(session, "HEAD", url)
        except TRANSPORT_ERRORS:
            # Some servers reject or drop HEAD
            try:
                return self._request(session, "GET", url)
            except TRANSPORT_ERRORS as e:
                raise TransportFailure(url, e) from e

    def _request(self, session: requests.Session, method: str, url: str):
        """Send a single request without following redirects"""
        response = session.request(
            method,
            url,
            headers={"User-Agent": self.user_agent},
            allow_redirects=False,
            timeout=self.timeout,
            stream=(method == "GET"),  # Don't download the body
        )
        try:
            return response.status_code, response.headers.get("Location")
        finally:
            response.close()
