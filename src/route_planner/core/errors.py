"""Errors raised at the route-document boundary."""
from __future__ import annotations

from typing import Optional, Tuple


class RouteDocumentError(Exception):
    """Base class for failures while turning bytes into a Route."""


class MalformedDocument(RouteDocumentError):
    """The document is not well-formed XML (unterminated element, bad encoding, empty input).

    Non-recoverable: the caller must abort the load.
    """

    def __init__(self, message: str, position: Optional[Tuple[int, int]] = None):
        super().__init__(message)
        self.position = position


class NoRouteFound(RouteDocumentError):
    """The document is well-formed but holds no completed ``<rte>`` element."""

    def __init__(self, message: str = "No route data found in document"):
        super().__init__(message)
