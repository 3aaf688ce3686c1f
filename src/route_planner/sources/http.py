from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Optional

import requests
from requests.exceptions import ConnectionError, ReadTimeout

from route_planner.sources.base import DocumentSource

log = logging.getLogger(__name__)


@dataclass
class HTTPClient:
    user_agent: str
    timeout_s: int = 25
    tries: int = 4
    backoff_s: float = 0.8

    def __post_init__(self) -> None:
        self.s = requests.Session()
        self.s.headers.update(
            {
                "User-Agent": self.user_agent,
                "Accept": "application/gpx+xml, application/xml, text/xml;q=0.9, */*;q=0.8",
            }
        )

    def get_bytes(self, url: str, timeout_s: Optional[int] = None) -> bytes:
        timeout = timeout_s if timeout_s is not None else self.timeout_s
        last_err: Optional[Exception] = None
        for attempt in range(self.tries):
            try:
                r = self.s.get(url, timeout=timeout)
                r.raise_for_status()
                return r.content
            except (ReadTimeout, ConnectionError) as e:
                last_err = e
                log.warning("GET %s failed (attempt %d/%d): %s", url, attempt + 1, self.tries, e)
                time.sleep(self.backoff_s * (2**attempt))
        raise last_err if last_err else RuntimeError("HTTP get_bytes failed")


class HTTPSource(DocumentSource):
    def __init__(self, url: str, client: HTTPClient):
        self.url = url
        self.client = client

    @property
    def label(self) -> str:
        return self.url

    def read_bytes(self) -> bytes:
        return self.client.get_bytes(self.url)
