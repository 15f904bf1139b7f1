from __future__ import annotations

import re

import requests
from requests.adapters import HTTPAdapter
from urllib3.exceptions import LocationParseError
from urllib3.util import parse_url

from . import __version__
from .errors import InvalidRequestTarget, TransportError, UnexpectedStatus

DEFAULT_TIMEOUT = 20.0

# characters allowed anywhere in a URI (RFC 3986 reserved, unreserved and %)
_URI_CHARS = re.compile(r"[A-Za-z0-9\-._~:/?#\[\]@!$&'()*+,;=%]+")


def create_session(
    user_agent: str | None = None,
    pool_connections: int = 4,
    pool_maxsize: int = 10,
) -> requests.Session:
    """Create the pooled requests session shared by all calls of a client.

    Retries are switched off: every logical request is exactly one round trip.

    Args:
        user_agent: Custom User-Agent header value.
        pool_connections: Number of host pools to cache.
        pool_maxsize: Connections kept alive per host, i.e. how many calls may
            run concurrently without opening fresh connections.

    Returns:
        Configured requests Session.
    """
    session = requests.Session()
    adapter = HTTPAdapter(
        pool_connections=pool_connections,
        pool_maxsize=pool_maxsize,
        max_retries=0,
    )
    session.mount("https://", adapter)
    session.mount("http://", adapter)

    session.headers.update(
        {
            "User-Agent": user_agent
            or f"mvg-fahrinfo/{__version__} (+https://github.com/leftshift/python_mvg_api)",
            "Accept": "application/json",
        }
    )

    return session


def validate_target(url: str) -> None:
    """Check that ``url`` is a usable absolute http(s) request target.

    Raises:
        InvalidRequestTarget: if the URL is malformed. Nothing is sent.
    """
    if any(ch.isspace() or not ch.isprintable() or not ch.isascii() for ch in url):
        raise InvalidRequestTarget(url, "contains whitespace, control or non-ASCII characters")
    if not _URI_CHARS.fullmatch(url):
        raise InvalidRequestTarget(url, "contains characters not allowed in a URI")
    try:
        parsed = parse_url(url)
    except LocationParseError as e:
        raise InvalidRequestTarget(url, str(e)) from e
    if parsed.scheme not in ("http", "https"):
        raise InvalidRequestTarget(url, "scheme must be http or https")
    if not parsed.host:
        raise InvalidRequestTarget(url, "missing host")


def fetch(
    session: requests.Session,
    url: str,
    context: str,
    timeout: float = DEFAULT_TIMEOUT,
) -> bytes:
    """GET ``url`` and return the complete body of a 200 response.

    Args:
        session: Shared session from :func:`create_session`.
        url: Absolute request URL.
        context: What was queried (e.g. a station id), carried by
            :class:`UnexpectedStatus` for user facing messages.
        timeout: Connect/read timeout in seconds.

    Raises:
        InvalidRequestTarget: malformed URL, no request attempted.
        TransportError: DNS, TLS, connection or timeout failure.
        UnexpectedStatus: any status other than 200; the body is not read.
    """
    validate_target(url)
    try:
        with session.get(url, timeout=timeout) as resp:
            if resp.status_code != 200:
                raise UnexpectedStatus(resp.status_code, context, url)
            return resp.content
    except requests.RequestException as e:
        raise TransportError(url, e) from e
