"""Failures raised by the MVG client.

The set is closed: every failure of the request pipeline is one of the four
subclasses of :class:`MVGError`. Callers pick their recovery policy (for
example falling back from an id lookup to a name search) by catching the
specific kind.
"""

from __future__ import annotations

from typing import Any, List, Optional


class MVGError(Exception):
    """Base class for all MVG client failures."""


class InvalidRequestTarget(MVGError):
    """Raised when a built URL cannot be used as a request target."""

    def __init__(self, url: str, reason: str = "malformed URL"):
        super().__init__(f"Invalid request target {url!r}: {reason}")
        self.url = url
        self.reason = reason


class TransportError(MVGError):
    """Raised on network, TLS or connection failures.

    The underlying exception is kept on ``cause`` and chained as ``__cause__``.
    """

    def __init__(self, url: str, cause: BaseException):
        super().__init__(f"Request to {url} failed: {cause}")
        self.url = url
        self.cause = cause


class UnexpectedStatus(MVGError):
    """Raised when the API answers with anything but HTTP 200."""

    def __init__(self, status_code: int, context: str, url: Optional[str] = None):
        super().__init__(f"No valid response for {context} (HTTP {status_code})")
        self.status_code = status_code
        self.context = context
        self.url = url


class DecodeError(MVGError):
    """Raised when a response body is not valid JSON or has the wrong shape."""

    def __init__(self, message: str, errors: Optional[List[Any]] = None):
        super().__init__(message)
        self.errors = errors or []


__all__ = [
    "MVGError",
    "InvalidRequestTarget",
    "TransportError",
    "UnexpectedStatus",
    "DecodeError",
]
