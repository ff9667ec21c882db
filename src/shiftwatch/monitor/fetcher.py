"""HTTP retrieval of remote counterparts."""

import logging
import random
import time
from dataclasses import dataclass
from typing import Callable, Dict, Optional
from urllib.parse import quote

import httpx

from shiftwatch import __version__

from .errors import TransportError

logger = logging.getLogger(__name__)

DEFAULT_USER_AGENT = f"shiftwatch/{__version__}"

# Sub-delimiters and ":" / "@" stay literal inside one path segment
PATH_SEGMENT_SAFE = "!$&'()*+,;=:@"

# Request headers sent with every fetch
NO_CACHE_HEADERS: Dict[str, str] = {
    "Cache-Control": "no-cache, no-store, must-revalidate",
    "Pragma": "no-cache",
    "Expires": "0",
    "If-Modified-Since": "Thu, 01 Jan 1970 00:00:00 GMT",
    "If-None-Match": "",
    "Connection": "close",
    "Accept-Encoding": "identity",
}


@dataclass(frozen=True)
class FetchResult:
    """Response for one remote item."""
    url: str
    status_code: int
    content: bytes

    @property
    def ok(self) -> bool:
        return self.status_code == httpx.codes.OK


class RemoteFetcher:
    """Fetches remote files named relative to a base URL."""

    def __init__(
        self,
        base_url: str,
        timeout: float = 30.0,
        user_agent: str = DEFAULT_USER_AGENT,
        client: Optional[httpx.Client] = None,
        rng: Optional[random.Random] = None,
        clock_ns: Callable[[], int] = time.time_ns,
    ) -> None:
        self.base_url = base_url if base_url.endswith("/") else base_url + "/"
        self.user_agent = user_agent
        self._client = client or httpx.Client(timeout=timeout)
        self._rng = rng or random.Random()
        self._clock_ns = clock_ns

    def cache_buster(self) -> str:
        """Query value unique per request: hex nanoseconds plus a random suffix."""
        return f"{self._clock_ns():x}-{self._rng.randrange(1000000)}"

    def build_url(self, filename: str) -> str:
        return f"{self.base_url}{quote(filename, safe=PATH_SEGMENT_SAFE)}?t={self.cache_buster()}"

    def fetch(self, filename: str) -> FetchResult:
        """
        Fetch the remote counterpart of ``filename``.

        Redirects are followed. Non-success statuses are returned, not raised.

        Raises:
            TransportError: If no response could be obtained
        """
        url = self.build_url(filename)
        headers = dict(NO_CACHE_HEADERS, **{"User-Agent": self.user_agent})

        try:
            response = self._client.get(url, headers=headers, follow_redirects=True)
        except httpx.HTTPError as e:
            raise TransportError(f"Fetch failed: {e}", url=url) from e

        logger.debug(f"Fetched: {{'url': {url!r}, 'status': {response.status_code}, 'bytes': {len(response.content)}}}")
        return FetchResult(url=url, status_code=response.status_code, content=response.content)

    def close(self) -> None:
        self._client.close()

    def __enter__(self) -> "RemoteFetcher":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()
