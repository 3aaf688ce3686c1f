"""Byte-acquisition collaborators for route documents."""
from __future__ import annotations

from pathlib import Path
from typing import Optional, Union
from urllib.parse import urlparse

from route_planner.sources.base import DocumentSource
from route_planner.sources.file import FileSource
from route_planner.sources.http import HTTPClient, HTTPSource

__all__ = ["DocumentSource", "FileSource", "HTTPClient", "HTTPSource", "build_http_client", "source_for"]


def build_http_client() -> HTTPClient:
    from route_planner.config import settings

    return HTTPClient(
        user_agent=settings.http_user_agent,
        timeout_s=settings.http_timeout_s,
        tries=settings.http_tries,
        backoff_s=settings.http_backoff_s,
    )


def source_for(location: Union[str, Path], client: Optional[HTTPClient] = None) -> DocumentSource:
    """
    Pick a source from *location*: ``http(s)://`` URLs are fetched, anything
    else is read from the local filesystem.
    """
    if isinstance(location, str) and urlparse(location).scheme in ("http", "https"):
        return HTTPSource(location, client or build_http_client())
    return FileSource(location)
